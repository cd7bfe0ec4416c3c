"""Learner record endpoints — saved progress and earned badges. Require authentication."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from satslab.auth.dependencies import get_current_learner
from satslab.dependencies import get_db
from satslab.gamification.badge_service import list_user_badges
from satslab.progress.store import SqlProgressStore
from satslab.sessions.schemas import (
    BadgesResponse,
    EarnedBadgeResponse,
    ProgressEntryResponse,
    ProgressResponse,
)

router = APIRouter(prefix="/api/v1", tags=["Progress"])


@router.get("/progress", response_model=ProgressResponse)
async def get_progress(
    user_id: str = Depends(get_current_learner),
    db: AsyncSession = Depends(get_db),
) -> ProgressResponse:
    rows = await SqlProgressStore(db).list_progress(user_id)
    return ProgressResponse(
        modules=[ProgressEntryResponse(module_id=module_id, **snap.model_dump()) for module_id, snap in rows]
    )


@router.get("/badges", response_model=BadgesResponse)
async def get_badges(
    user_id: str = Depends(get_current_learner),
    db: AsyncSession = Depends(get_db),
) -> BadgesResponse:
    badges = await list_user_badges(db, user_id)
    earned = [
        EarnedBadgeResponse(
            module_id=b.module_id,
            badge_name=b.badge_name,
            badge_type=b.badge_type,
            description=b.description,
            image_url=b.image_url,
            earned_at=b.earned_at,
            metadata=b.badge_metadata or {},
        )
        for b in badges
    ]
    return BadgesResponse(earned=earned, total_earned=len(earned))
