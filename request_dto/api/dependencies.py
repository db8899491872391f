"""FastAPI dependencies resolving request DTOs."""

from collections.abc import Awaitable, Callable
from typing import Any

from fastapi import HTTPException, Request
from structlog import get_logger

from request_dto.context import RequestContext
from request_dto.dto import ParameterDeclaration, RequestDTO
from request_dto.resolver import RequestDTOResolver


logger = get_logger(__name__)

RESOLVER_STATE_KEY = "request_dto_resolver"


def get_resolver(request: Request) -> RequestDTOResolver:
    """Get the resolver installed on the application state."""
    resolver: RequestDTOResolver | None = getattr(
        request.app.state, RESOLVER_STATE_KEY, None
    )
    if resolver is None:
        logger.error("request_dto_resolver_missing_on_app_state", category="lifecycle")
        raise HTTPException(status_code=503, detail="Request DTO resolver not initialized")
    return resolver


def request_dto(
    declaration: RequestDTO, dto_type: type | None = None
) -> Callable[[Request], Awaitable[Any]]:
    """Create a dependency resolving ``declaration`` for the current request.

    Usage::

        @app.post("/users/{id}")
        async def create(
            user: Annotated[User, Depends(request_dto(RequestDTO(UserInput, "users")))],
        ) -> ...
    """
    parameter = ParameterDeclaration(declaration=declaration, dto_type=dto_type)

    async def _resolve(request: Request) -> Any:
        resolver = get_resolver(request)
        context = RequestContext.from_request(
            request, body_cache_key=resolver.settings.body_cache_key
        )
        return await resolver.resolve(parameter, context)

    return _resolve
