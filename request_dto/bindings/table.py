"""Binding tables: which intermediate-object fields read which request source.

A table is built once per intermediate type, from the ``Annotated`` binding
declarations on its fields, and cached. Types that prefer not to be
introspected can install their own table with :func:`register_bindings`.
"""

import collections.abc
import threading
import types
import typing
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from typing import Annotated, Any, Union, get_args, get_origin

import structlog
from pydantic import ValidationError as PydanticValidationError

from request_dto.core.errors import BindingDeclarationError, FieldAssignmentError

from .declarations import Binding, BindingKind


logger = structlog.get_logger(__name__)

Setter = Callable[[Any, Any], None]

_FROZEN_ERROR_TYPES = frozenset({"frozen_instance", "frozen_field"})
_SEQUENCE_ORIGINS = (list, tuple, collections.abc.Sequence)
_ZERO_VALUES: dict[Any, Callable[[], Any]] = {
    str: str,
    int: int,
    float: float,
    bool: bool,
    list: list,
    dict: dict,
    set: set,
    frozenset: frozenset,
    tuple: tuple,
}


def header_name_from_field(field_name: str) -> str:
    """Translate a field identifier to a header name.

    ``xTestHeaderName`` and ``x_test_header_name`` both become
    ``x-test-header-name``.
    """
    chars: list[str] = []
    for i, c in enumerate(field_name):
        if c == "_":
            chars.append("-")
        elif c.isupper():
            if i > 0 and chars and chars[-1] != "-":
                chars.append("-")
            chars.append(c.lower())
        else:
            chars.append(c)
    return "".join(chars)


def _strip_optional(annotation: Any) -> tuple[Any, bool]:
    """Return the annotation without ``None`` and whether ``None`` was allowed."""
    origin = get_origin(annotation)
    if origin is Union or origin is types.UnionType:
        args = [a for a in get_args(annotation) if a is not type(None)]
        nullable = len(args) != len(get_args(annotation))
        if len(args) == 1:
            return args[0], nullable
        return annotation, nullable
    return annotation, annotation is type(None)


def empty_value(annotation: Any) -> Any:
    """Value an optional field is reset to when its source is absent."""
    if annotation is Any:
        return None
    inner, nullable = _strip_optional(annotation)
    if nullable:
        return None
    origin = get_origin(inner) or inner
    if origin is collections.abc.Sequence:
        origin = list
    factory = _ZERO_VALUES.get(origin)
    return factory() if factory is not None else None


@dataclass(frozen=True)
class FieldBinding:
    """One bound field of an intermediate type."""

    name: str
    binding: Binding
    annotation: Any = str
    setter: Setter | None = None

    @property
    def kind(self) -> BindingKind:
        return self.binding.kind

    @property
    def source_key(self) -> str:
        """Explicit key, else a name derived from the field identifier."""
        if self.binding.key:
            return self.binding.key
        if self.kind is BindingKind.HEADER:
            return header_name_from_field(self.name)
        return self.name

    @property
    def value_type(self) -> Any:
        """Annotation with ``Optional`` removed."""
        return _strip_optional(self.annotation)[0]

    @property
    def is_sequence_of_str(self) -> bool:
        inner = self.value_type
        origin = get_origin(inner)
        if origin not in _SEQUENCE_ORIGINS:
            return False
        args = get_args(inner)
        return bool(args) and args[0] is str

    @property
    def empty_value(self) -> Any:
        return empty_value(self.annotation)

    def sequence_value(self, values: Iterable[str]) -> Any:
        """Shape a list of raw strings for a sequence-of-str field."""
        if get_origin(self.value_type) is tuple:
            return tuple(values)
        return list(values)

    def assign(self, target: Any, value: Any) -> None:
        """Write ``value`` into ``target``.

        Raises:
            FieldAssignmentError: If the field cannot be written at all
        """
        try:
            if self.setter is not None:
                self.setter(target, value)
            else:
                setattr(target, self.name, value)
        except AttributeError as e:
            # also covers dataclasses.FrozenInstanceError
            raise FieldAssignmentError(type(target), self.name, e) from e
        except PydanticValidationError as e:
            if any(err["type"] in _FROZEN_ERROR_TYPES for err in e.errors()):
                raise FieldAssignmentError(type(target), self.name, e) from e
            raise


@dataclass(frozen=True)
class BindingTable:
    """All bound fields of one intermediate type."""

    owner: type
    fields: tuple[FieldBinding, ...] = field(default_factory=tuple)

    def of_kind(self, kind: BindingKind) -> tuple[FieldBinding, ...]:
        return tuple(f for f in self.fields if f.kind is kind)

    def __len__(self) -> int:
        return len(self.fields)


_tables: dict[type, BindingTable] = {}
_tables_lock = threading.Lock()


def _split_annotated(hint: Any) -> tuple[Any, tuple[Any, ...]]:
    if get_origin(hint) is Annotated:
        return hint.__origin__, tuple(hint.__metadata__)
    return hint, ()


def build_binding_table(owner: type) -> BindingTable:
    """Introspect ``owner``'s annotations once and build its table.

    Raises:
        BindingDeclarationError: If a field declares more than one binding kind
    """
    hints = typing.get_type_hints(owner, include_extras=True)
    fields: list[FieldBinding] = []
    for name, hint in hints.items():
        annotation, metadata = _split_annotated(hint)
        bindings = [m for m in metadata if isinstance(m, Binding)]
        if not bindings:
            continue
        kinds = {b.kind for b in bindings}
        if len(kinds) > 1:
            raise BindingDeclarationError(owner, name, sorted(k.value for k in kinds))
        fields.append(FieldBinding(name=name, binding=bindings[0], annotation=annotation))

    logger.debug(
        "binding_table_built",
        owner=owner.__qualname__,
        fields=[f.name for f in fields],
        category="binding",
    )
    return BindingTable(owner=owner, fields=tuple(fields))


def register_bindings(
    owner: type, fields: BindingTable | Iterable[FieldBinding]
) -> BindingTable:
    """Install an explicit binding table for ``owner``."""
    table = (
        fields
        if isinstance(fields, BindingTable)
        else BindingTable(owner=owner, fields=tuple(fields))
    )
    seen: dict[str, BindingKind] = {}
    for f in table.fields:
        if f.name in seen and seen[f.name] is not f.kind:
            raise BindingDeclarationError(owner, f.name, [seen[f.name].value, f.kind.value])
        seen[f.name] = f.kind
    with _tables_lock:
        _tables[owner] = table
    return table


def binding_table(owner: type) -> BindingTable:
    """Return the cached table for ``owner``, building it on first use."""
    table = _tables.get(owner)
    if table is not None:
        return table
    with _tables_lock:
        table = _tables.get(owner)
        if table is None:
            table = build_binding_table(owner)
            _tables[owner] = table
    return table


def clear_binding_tables() -> None:
    """Forget every cached table (tests)."""
    with _tables_lock:
        _tables.clear()
