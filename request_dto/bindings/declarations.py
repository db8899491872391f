"""Per-field binding declarations.

Attach one of these to a field of an intermediate type with
``typing.Annotated``::

    class CreateUserInput(BaseModel):
        name: str = ""
        trace_id: Annotated[str | None, Header("X-Trace-Id")] = None
        user_id: Annotated[int, PathVariable("id")] = 0
        active: Annotated[bool, QueryParam(required=False)] = False
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, ClassVar

from request_dto.core.conversion import ConversionService


class BindingKind(str, Enum):
    """Request source a field is bound to."""

    HEADER = "header"
    PATH_VARIABLE = "path_variable"
    QUERY_PARAM = "query_param"


@dataclass(frozen=True)
class Binding:
    """Base binding; ``key`` empty means derive from the field name."""

    key: str = ""

    kind: ClassVar[BindingKind]


@dataclass(frozen=True)
class Header(Binding):
    """Bind a field to a request header."""

    kind: ClassVar[BindingKind] = BindingKind.HEADER


@dataclass(frozen=True)
class PathVariable(Binding):
    """Bind a field to a path variable extracted by the router."""

    kind: ClassVar[BindingKind] = BindingKind.PATH_VARIABLE


@dataclass(frozen=True)
class QueryParam(Binding):
    """Bind a field to a query string parameter.

    Args:
        key: Parameter name; defaults to the field name
        required: Whether absence is diagnosed (True) or resets the field (False)
        conversion: ConversionService class or instance; None uses the default
    """

    required: bool = True
    conversion: type[ConversionService] | ConversionService | Any | None = None
    kind: ClassVar[BindingKind] = BindingKind.QUERY_PARAM
