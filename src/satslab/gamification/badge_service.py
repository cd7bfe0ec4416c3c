"""Module badge award service with duplicate prevention and notification."""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from satslab.db.models import UserBadge
from satslab.learning.models import BadgeTemplate

logger = logging.getLogger(__name__)

BADGE_EARNED_CHANNEL = "pubsub:badge_earned"


async def get_user_badge(db: AsyncSession, user_id: str, module_id: int) -> UserBadge | None:
    """Fetch the badge a learner earned for a module, if any."""
    result = await db.execute(
        select(UserBadge).where(
            UserBadge.user_id == user_id,
            UserBadge.module_id == module_id,
        )
    )
    return result.scalar_one_or_none()


async def has_badge(db: AsyncSession, user_id: str, module_id: int) -> bool:
    """Check if the learner already has the badge of a module."""
    return await get_user_badge(db, user_id, module_id) is not None


async def list_user_badges(db: AsyncSession, user_id: str) -> list[UserBadge]:
    """All badges of a learner, newest first."""
    result = await db.execute(
        select(UserBadge)
        .where(UserBadge.user_id == user_id)
        .order_by(UserBadge.earned_at.desc())
    )
    return list(result.scalars().all())


async def award_module_badge(
    db: AsyncSession,
    redis: object | None,
    user_id: str,
    module_id: int,
    badge: BadgeTemplate,
    metadata: dict | None = None,
) -> bool:
    """Award a module badge to a learner.

    Returns True if awarded, False if already earned.
    Handles:
    1. Insert into user_badges (UNIQUE on user + module)
    2. Publish badge_earned on Redis when available
    """
    if await has_badge(db, user_id, module_id):
        return False

    user_badge = UserBadge(
        user_id=user_id,
        module_id=module_id,
        badge_name=badge.name,
        badge_type=badge.type,
        description=badge.description,
        image_url=badge.image_url,
        badge_metadata=metadata or {},
        earned_at=datetime.now(timezone.utc),
    )
    db.add(user_badge)

    try:
        await db.flush()
    except IntegrityError:
        await db.rollback()
        return False  # Race condition: badge already awarded

    await _emit_badge_earned(redis, user_id, module_id, badge)
    return True


async def _emit_badge_earned(
    redis: object | None,
    user_id: str,
    module_id: int,
    badge: BadgeTemplate,
) -> None:
    """Push badge-earned event via Redis pub/sub."""
    if redis is None:
        return
    try:
        await redis.publish(  # type: ignore[union-attr]
            BADGE_EARNED_CHANNEL,
            json.dumps({
                "user_id": user_id,
                "module_id": module_id,
                "badge_name": badge.name,
                "badge_type": badge.type,
            }),
        )
    except Exception:
        logger.warning("Failed to publish badge_earned notification", exc_info=True)
