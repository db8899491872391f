"""Error handlers mapping resolution failures to JSON responses."""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from structlog import get_logger

from request_dto.core.errors import (
    ConfigurationError,
    ExtractionError,
    RequestDTOError,
    ValidationFailure,
)


logger = get_logger(__name__)


def error_body(exc: RequestDTOError) -> dict[str, dict[str, object]]:
    return {
        "error": {
            "type": exc.error_type,
            "message": exc.message,
            "details": exc.details,
        }
    }


def setup_error_handlers(app: FastAPI) -> None:
    """Setup error handlers for request DTO failures.

    Args:
        app: FastAPI application instance
    """

    async def request_dto_error_handler(
        request: Request, exc: RequestDTOError
    ) -> JSONResponse:
        log_kwargs = {
            "error_type": exc.error_type,
            "error_message": exc.message,
            "status_code": exc.status_code,
            "request_method": request.method,
            "request_url": str(request.url.path),
            "category": "resolver",
        }
        if isinstance(exc, ConfigurationError):
            logger.error("request_dto_configuration_error", **log_kwargs)
        elif isinstance(exc, ExtractionError | ValidationFailure):
            logger.info("request_dto_rejected", **log_kwargs)
        else:
            logger.warning("request_dto_error", **log_kwargs)

        return JSONResponse(status_code=exc.status_code, content=error_body(exc))

    app.add_exception_handler(RequestDTOError, request_dto_error_handler)
    logger.debug("request_dto_error_handlers_installed", category="lifecycle")
