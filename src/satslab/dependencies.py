"""Shared FastAPI dependencies."""

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from satslab.auth.dependencies import get_current_learner_optional
from satslab.database import get_session
from satslab.redis_client import get_redis_optional
from satslab.sessions.manager import SessionManager
from satslab.sessions.service import LearningService
from satslab.validation.service import ValidationService

get_db = get_session


def get_session_manager(request: Request) -> SessionManager:
    return request.app.state.session_manager


def get_validation_service(request: Request) -> ValidationService:
    return request.app.state.validation_service


def get_learning_service(
    db: AsyncSession = Depends(get_db),
    sessions: SessionManager = Depends(get_session_manager),
    validator: ValidationService = Depends(get_validation_service),
    learner_id: str | None = Depends(get_current_learner_optional),
) -> LearningService:
    """Per-request learning service bound to the request's database session and caller."""
    return LearningService(db, sessions, validator, redis=get_redis_optional(), learner_id=learner_id)
