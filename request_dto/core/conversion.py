"""String-to-type coercion used by the path and query extractors."""

import types
from enum import Enum
from functools import lru_cache
from typing import Any, Protocol, Union, get_args, get_origin, runtime_checkable

from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from .errors import ConversionError


@runtime_checkable
class ConversionService(Protocol):
    """Converts a raw request string into a value of the target type."""

    def convert(self, value: str, target_type: Any) -> Any:
        """Convert ``value`` or raise ConversionError."""
        ...


@lru_cache(maxsize=256)
def _adapter(target_type: Any) -> TypeAdapter[Any]:
    return TypeAdapter(target_type)


def _enum_type(target_type: Any) -> type[Enum] | None:
    """Enum class of ``target_type``, looking through ``Optional``."""
    if get_origin(target_type) in (Union, types.UnionType):
        args = [a for a in get_args(target_type) if a is not type(None)]
        if len(args) != 1:
            return None
        target_type = args[0]
    if isinstance(target_type, type) and issubclass(target_type, Enum):
        return target_type
    return None


class DefaultConversionService:
    """Generic coercion backed by pydantic's lax-mode validation.

    Handles int, float, bool ("true"/"false"/"1"/"0"/"yes"/"no"/"on"/"off"),
    str, Enum (by member name, then by value) and anything else pydantic
    can build from a string (Decimal, UUID, datetime, Optional[...]).
    """

    def convert(self, value: str, target_type: Any) -> Any:
        if target_type is str or target_type is Any:
            return value

        enum_type = _enum_type(target_type)
        if enum_type is not None:
            member = enum_type.__members__.get(value)
            if member is not None:
                return member

        try:
            return _adapter(target_type).validate_python(value)
        except PydanticValidationError as e:
            reason = "; ".join(err["msg"] for err in e.errors())
            raise ConversionError(value, target_type, reason) from e
        except TypeError as e:
            raise ConversionError(value, target_type, str(e)) from e
