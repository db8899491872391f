"""Body advice: components customizing request/response body handling."""

from .discovery import (
    EMPTY_CHAIN,
    AdviceChain,
    AdviceDiscovery,
    advice_priority,
    clear_advice_cache,
    get_body_advice,
)
from .interfaces import (
    DEFAULT_PRIORITY,
    AdviceSource,
    RequestBodyAdvice,
    ResponseBodyAdvice,
)


__all__ = [
    "DEFAULT_PRIORITY",
    "EMPTY_CHAIN",
    "AdviceChain",
    "AdviceDiscovery",
    "AdviceSource",
    "RequestBodyAdvice",
    "ResponseBodyAdvice",
    "advice_priority",
    "clear_advice_cache",
    "get_body_advice",
]
