"""Constraint validation of intermediate objects."""

import dataclasses
from functools import lru_cache
from typing import Any, Protocol, runtime_checkable

from pydantic import BaseModel, Field, TypeAdapter
from pydantic import ValidationError as PydanticValidationError


class Violation(BaseModel):
    """A single constraint violation."""

    field: str = Field(default="", description="Dotted path of the offending field")
    message: str = Field(description="Human-readable reason")
    code: str = Field(default="invalid", description="Machine-readable violation type")


@runtime_checkable
class ConstraintValidator(Protocol):
    """Checks an object against its declared constraints."""

    def validate(self, obj: Any) -> list[Violation]:
        """Return every violation; an empty list means valid."""
        ...


def violations_from_pydantic(error: PydanticValidationError) -> list[Violation]:
    """Convert a pydantic ValidationError into violations."""
    return [
        Violation(
            field=".".join(str(part) for part in err["loc"]),
            message=err["msg"],
            code=err["type"],
        )
        for err in error.errors()
    ]


@lru_cache(maxsize=256)
def _adapter(tp: type) -> TypeAdapter[Any]:
    return TypeAdapter(tp)


def _field_values(obj: Any) -> dict[str, Any] | None:
    """Current values of the declared fields of ``obj``, keyed by name."""
    if isinstance(obj, BaseModel):
        return {name: getattr(obj, name) for name in type(obj).model_fields}
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        return {f.name: getattr(obj, f.name) for f in dataclasses.fields(obj) if f.init}
    return None


class PydanticConstraintValidator:
    """Re-validates an object against its own pydantic schema.

    Works for pydantic models and standard dataclasses. Extractors write
    fields without validation, so this catches values they left invalid.
    Declared fields are read from the object as they are now, including
    fields excluded from serialization; computed fields are ignored.
    Objects of other types are accepted as-is.
    """

    def validate(self, obj: Any) -> list[Violation]:
        values = _field_values(obj)
        if values is None:
            return []

        adapter = _adapter(type(obj))
        try:
            adapter.validate_python(values, by_name=True)
        except PydanticValidationError as e:
            return violations_from_pydantic(e)
        return []
