"""Catalog endpoints — public module content."""

from __future__ import annotations

from fastapi import APIRouter

from satslab.catalog.modules import get_module, list_modules
from satslab.sessions.schemas import (
    ModuleDetailResponse,
    ModuleSummaryResponse,
    module_detail,
    module_summary,
)
from satslab.sessions.service import ModuleNotFound

router = APIRouter(prefix="/api/v1", tags=["Modules"])


@router.get("/modules", response_model=list[ModuleSummaryResponse])
async def get_modules() -> list[ModuleSummaryResponse]:
    return [module_summary(m) for m in list_modules()]


@router.get("/modules/{module_id}", response_model=ModuleDetailResponse)
async def get_module_detail(module_id: int) -> ModuleDetailResponse:
    """Module content without correct answers or hint texts."""
    module = get_module(module_id)
    if module is None:
        raise ModuleNotFound(module_id)
    return module_detail(module)
