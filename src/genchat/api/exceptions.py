"""Global exception handlers.

Every error leaves the API as ``{"detail": <message>, "code": <CODE>}``.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from genchat.core.exceptions import GenChatError, ValidationError

from .models import ErrorResponse

logger = logging.getLogger(__name__)


def _error_response(status_code: int, message: str, code: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(detail=message, code=code).model_dump(),
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Register custom exception handlers on ``app``."""

    @app.exception_handler(GenChatError)
    async def handle_genchat_error(request: Request, exc: GenChatError) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error(
                "%s %s failed: %s",
                request.method,
                request.url.path,
                exc.code,
                exc_info=exc.__cause__ or exc,
            )
        return _error_response(exc.status_code, exc.message, exc.code)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        fields = sorted(
            {str(err["loc"][-1]) for err in exc.errors() if err.get("loc")}
        )
        message = (
            f"Invalid fields: {', '.join(fields)}" if fields else "Invalid request"
        )
        return _error_response(400, message, ValidationError.code)
