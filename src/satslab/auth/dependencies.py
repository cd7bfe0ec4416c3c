"""FastAPI authentication dependencies."""

from __future__ import annotations

import jwt
import structlog
from fastapi import HTTPException, Security
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from satslab.auth.jwt import verify_token

logger = structlog.get_logger()

_bearer = HTTPBearer()
_bearer_optional = HTTPBearer(auto_error=False)


async def get_current_learner(
    credentials: HTTPAuthorizationCredentials = Security(_bearer),
) -> str:
    """Verify the bearer token and return the learner id. Raises 401 on failure."""
    try:
        payload = verify_token(credentials.credentials)
    except jwt.InvalidTokenError as e:
        raise HTTPException(status_code=401, detail=str(e)) from e
    return str(payload["sub"])


async def get_current_learner_optional(
    credentials: HTTPAuthorizationCredentials | None = Security(_bearer_optional),
) -> str | None:
    """Learner id from the bearer token if present and valid, None for guests."""
    if credentials is None:
        return None
    try:
        payload = verify_token(credentials.credentials)
    except jwt.InvalidTokenError as e:
        logger.info("guest_fallback_invalid_token", error=str(e))
        return None
    return str(payload["sub"])
