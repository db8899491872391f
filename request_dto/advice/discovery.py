"""Discovery and ordering of body advice components.

Advice is discovered once per application context and cached for the
lifetime of the process; request handling only reads the cached chain.
"""

import threading
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

import structlog

from .interfaces import DEFAULT_PRIORITY, AdviceSource, RequestBodyAdvice, ResponseBodyAdvice


logger = structlog.get_logger(__name__)


def advice_priority(component: Any) -> int:
    """Declared priority of ``component``; lower runs first."""
    priority = getattr(component, "priority", DEFAULT_PRIORITY)
    return priority if isinstance(priority, int) else DEFAULT_PRIORITY


@dataclass(frozen=True)
class AdviceChain:
    """Ordered, read-only advice lists partitioned by capability."""

    request_advice: tuple[RequestBodyAdvice, ...] = field(default_factory=tuple)
    response_advice: tuple[ResponseBodyAdvice, ...] = field(default_factory=tuple)
    handles: tuple[Any, ...] = field(default_factory=tuple)

    def __bool__(self) -> bool:
        return bool(self.handles)

    def __len__(self) -> int:
        return len(self.handles)

    def for_request(self, target_type: type) -> list[RequestBodyAdvice]:
        return [a for a in self.request_advice if a.supports(target_type)]

    def for_response(self, value_type: type) -> list[ResponseBodyAdvice]:
        return [a for a in self.response_advice if a.supports(value_type)]


EMPTY_CHAIN = AdviceChain()


class AdviceDiscovery:
    """Finds advice components in a component source and orders them."""

    def __init__(self, source: AdviceSource | None):
        """Initialize advice discovery.

        Args:
            source: Component source; None yields an empty chain
        """
        self.source = source

    def discover(self) -> AdviceChain:
        """Discover, order and partition advice components.

        Returns:
            AdviceChain sorted by priority, ties kept in registration order
        """
        if self.source is None:
            logger.debug("advice_source_missing", category="advice")
            return EMPTY_CHAIN

        logger.info(
            "advice_discovery_started",
            source=type(self.source).__name__,
            category="advice",
        )

        components: Sequence[Any] = self.source.list_components()
        seen: set[int] = set()
        candidates: list[Any] = []
        for component in components:
            if not isinstance(component, RequestBodyAdvice | ResponseBodyAdvice):
                continue
            if id(component) in seen:
                continue
            seen.add(id(component))
            candidates.append(component)

        # sorted() is stable, so equal priorities keep registration order
        ordered = sorted(candidates, key=advice_priority)

        request_advice: list[RequestBodyAdvice] = []
        response_advice: list[ResponseBodyAdvice] = []
        for component in ordered:
            if isinstance(component, RequestBodyAdvice):
                request_advice.append(component)
                logger.info(
                    "request_body_advice_detected",
                    advice=type(component).__name__,
                    priority=advice_priority(component),
                    category="advice",
                )
            if isinstance(component, ResponseBodyAdvice):
                response_advice.append(component)
                logger.info(
                    "response_body_advice_detected",
                    advice=type(component).__name__,
                    priority=advice_priority(component),
                    category="advice",
                )

        return AdviceChain(
            request_advice=tuple(request_advice),
            response_advice=tuple(response_advice),
            handles=tuple(ordered),
        )


_advice_cache: dict[int, tuple[Any, AdviceChain]] = {}
_advice_lock = threading.Lock()


def get_body_advice(app_context: AdviceSource | None) -> AdviceChain:
    """Advice chain for ``app_context``, discovered on first call only."""
    if app_context is None:
        return EMPTY_CHAIN

    key = id(app_context)
    cached = _advice_cache.get(key)
    if cached is not None and cached[0] is app_context:
        return cached[1]

    with _advice_lock:
        cached = _advice_cache.get(key)
        if cached is not None and cached[0] is app_context:
            return cached[1]
        chain = AdviceDiscovery(app_context).discover()
        # keep the context alive so its id cannot be reused while cached
        _advice_cache[key] = (app_context, chain)
        return chain


def clear_advice_cache() -> None:
    """Forget every cached chain (tests)."""
    with _advice_lock:
        _advice_cache.clear()
