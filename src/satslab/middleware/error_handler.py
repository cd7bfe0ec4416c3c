"""Global error handler — consistent JSON error responses."""

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from satslab.learning.flow import FlowTransitionError
from satslab.sessions.manager import SessionNotFound
from satslab.sessions.service import ModuleNotFound, SessionForbidden

logger = structlog.get_logger()


def setup_error_handlers(app: FastAPI) -> None:
    """Register global exception handlers."""

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(_request: Request, exc: StarletteHTTPException) -> JSONResponse:
        """Handle HTTP exceptions with consistent JSON format."""
        return JSONResponse(
            status_code=exc.status_code,
            content={"detail": exc.detail},
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(_request: Request, exc: RequestValidationError) -> JSONResponse:
        """Handle validation errors with consistent JSON format."""
        return JSONResponse(
            status_code=422,
            content={"detail": "Validation error", "errors": exc.errors()},
        )

    @app.exception_handler(SessionNotFound)
    async def session_not_found_handler(_request: Request, _exc: SessionNotFound) -> JSONResponse:
        return JSONResponse(status_code=404, content={"detail": "Session not found"})

    @app.exception_handler(SessionForbidden)
    async def session_forbidden_handler(_request: Request, _exc: SessionForbidden) -> JSONResponse:
        return JSONResponse(status_code=403, content={"detail": "Session belongs to another learner"})

    @app.exception_handler(ModuleNotFound)
    async def module_not_found_handler(_request: Request, _exc: ModuleNotFound) -> JSONResponse:
        return JSONResponse(status_code=404, content={"detail": "Module not found"})

    @app.exception_handler(FlowTransitionError)
    async def flow_transition_handler(request: Request, exc: FlowTransitionError) -> JSONResponse:
        """Section change refused by the module flow."""
        logger.info("flow_transition_refused", path=request.url.path, reason=str(exc))
        return JSONResponse(status_code=409, content={"detail": str(exc)})

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Catch-all for unhandled exceptions — always return JSON."""
        logger.error(
            "unhandled_exception",
            path=request.url.path,
            method=request.method,
            error=str(exc),
            exc_info=exc,
        )
        return JSONResponse(
            status_code=500,
            content={"detail": "Internal server error"},
        )
