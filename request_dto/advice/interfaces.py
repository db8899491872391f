"""Body advice interfaces.

Advice components customize how request bodies are read and how response
bodies are written. A component may implement both interfaces.
"""

from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import Any, Protocol, runtime_checkable


__all__ = [
    "DEFAULT_PRIORITY",
    "AdviceSource",
    "RequestBodyAdvice",
    "ResponseBodyAdvice",
]


DEFAULT_PRIORITY = 500


class RequestBodyAdvice(ABC):
    """Pre/post-processes request bodies before they become input objects."""

    priority: int = DEFAULT_PRIORITY

    @abstractmethod
    def supports(self, target_type: type) -> bool:
        """Whether this advice applies when reading into ``target_type``."""

    def before_body_read(self, body: bytes, target_type: type) -> bytes:
        """Rewrite the raw body before it is deserialized."""
        return body

    def after_body_read(self, value: Any, target_type: type) -> Any:
        """Rewrite the deserialized value."""
        return value

    def handle_empty_body(self, target_type: type) -> Any | None:
        """Value to use when the body is empty; None keeps the default."""
        return None


class ResponseBodyAdvice(ABC):
    """Post-processes response values before they are serialized."""

    priority: int = DEFAULT_PRIORITY

    @abstractmethod
    def supports(self, value_type: type) -> bool:
        """Whether this advice applies when writing ``value_type``."""

    @abstractmethod
    def before_body_write(self, value: Any, value_type: type) -> Any:
        """Rewrite the value about to be serialized."""


@runtime_checkable
class AdviceSource(Protocol):
    """Application-wide component source advice is discovered from."""

    def list_components(self) -> Sequence[Any]:
        """Registered components, in registration order."""
        ...
