"""FastAPI integration for request DTO resolution."""

from fastapi import FastAPI
from structlog import get_logger

from request_dto.advice import AdviceSource, get_body_advice
from request_dto.assembler import IntermediateAssembler
from request_dto.config import Settings, get_settings
from request_dto.dto import ComponentRegistry
from request_dto.extractors import QueryParamExtractor
from request_dto.resolver import RequestDTOResolver
from request_dto.serialization import AdvisedBodyCodec, BodyCodec, JSONBodyCodec
from request_dto.validation import ConstraintValidator

from .dependencies import RESOLVER_STATE_KEY, get_resolver, request_dto
from .errors import setup_error_handlers


logger = get_logger(__name__)


def install_request_dto(
    app: FastAPI,
    registry: ComponentRegistry,
    settings: Settings | None = None,
    codec: BodyCodec | None = None,
    constraint_validator: ConstraintValidator | None = None,
    advice_source: AdviceSource | None = None,
) -> RequestDTOResolver:
    """Wire a resolver into ``app`` and install its error handlers.

    Body advice is discovered once from ``advice_source`` and shared by
    every request. When it is omitted the registry is searched, which
    creates every lazily registered component at install time; pass a
    narrower source to avoid that.
    """
    settings = settings or get_settings()
    chain = get_body_advice(advice_source if advice_source is not None else registry)
    assembler = IntermediateAssembler(
        codec=AdvisedBodyCodec(codec or JSONBodyCodec(), chain),
        query_extractor=QueryParamExtractor(
            reject_missing_required=settings.resolver.reject_missing_required_params
        ),
    )
    resolver = RequestDTOResolver(
        registry,
        assembler=assembler,
        constraint_validator=constraint_validator,
        settings=settings.resolver,
    )
    setattr(app.state, RESOLVER_STATE_KEY, resolver)
    setup_error_handlers(app)
    logger.info(
        "request_dto_installed",
        advice=[type(a).__name__ for a in chain.handles],
        category="lifecycle",
    )
    return resolver


__all__ = [
    "RESOLVER_STATE_KEY",
    "get_resolver",
    "install_request_dto",
    "request_dto",
    "setup_error_handlers",
]
