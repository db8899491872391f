"""Component registry resolving builders and validators by key.

Keys are stable identifiers: strings, or classes used purely as names.
"""

import threading
from collections.abc import Callable
from typing import Any, TypeVar, cast

import structlog

from request_dto.core.errors import ComponentNotFoundError, ConfigurationError

from .interfaces import DTOBuilder, DTOValidator


logger = structlog.get_logger(__name__)

T = TypeVar("T")


def _key_name(key: object) -> str:
    return key if isinstance(key, str) else getattr(key, "__qualname__", repr(key))


class ComponentRegistry:
    """Registry of builder, validator and advice components."""

    def __init__(self) -> None:
        self._components: dict[object, Any] = {}
        self._factories: dict[object, Callable[[], Any]] = {}
        self._order: list[object] = []
        self._lock = threading.Lock()

    def register(
        self,
        key: object,
        instance: Any | None = None,
        factory: Callable[[], Any] | None = None,
    ) -> None:
        """Register a component instance or a factory creating it once."""
        if instance is None and factory is None:
            raise ValueError("Either instance or factory must be provided")

        with self._lock:
            if key not in self._components and key not in self._factories:
                self._order.append(key)
            if instance is not None:
                self._components[key] = instance
                self._factories.pop(key, None)
            else:
                self._factories[key] = cast(Callable[[], Any], factory)
                self._components.pop(key, None)

        logger.debug(
            "component_registered",
            key=_key_name(key),
            lazy=instance is None,
            category="registry",
        )

    def __contains__(self, key: object) -> bool:
        return key in self._components or key in self._factories

    def get(self, key: object) -> Any:
        """Component registered under ``key``, creating it on first use.

        Raises:
            ComponentNotFoundError: If nothing is registered under ``key``
        """
        component = self._components.get(key)
        if component is not None:
            return component

        factory = self._factories.get(key)
        if factory is None:
            if key in self._components:
                return self._components[key]
            raise ComponentNotFoundError(key)

        # factories run without the lock held
        created = factory()
        with self._lock:
            component = self._components.setdefault(key, created)
            if self._factories.get(key) is factory:
                del self._factories[key]
        return component

    def get_typed(self, key: object, expected: type[T]) -> T:
        """Component under ``key``, checked to be an ``expected`` instance."""
        component = self.get(key)
        if not isinstance(component, expected):
            raise ConfigurationError(
                f"Component {_key_name(key)} is {type(component).__qualname__}, "
                f"not a {expected.__qualname__}",
                error_type="component_type_error",
                details={"key": _key_name(key), "expected": expected.__qualname__},
            )
        return component

    def get_builder(self, key: object) -> DTOBuilder[Any, Any]:
        return self.get_typed(key, DTOBuilder)

    def get_validator(self, key: object) -> DTOValidator[Any]:
        return self.get_typed(key, DTOValidator)

    def list_components(self) -> list[Any]:
        """Every registered component in registration order.

        Lazy components are created here and kept, so listing a registry
        instantiates everything registered in it.
        """
        return [self.get(key) for key in list(self._order)]
