"""Field binding declarations and per-type binding tables."""

from .declarations import Binding, BindingKind, Header, PathVariable, QueryParam
from .table import (
    BindingTable,
    FieldBinding,
    binding_table,
    build_binding_table,
    clear_binding_tables,
    empty_value,
    header_name_from_field,
    register_bindings,
)


__all__ = [
    "Binding",
    "BindingKind",
    "BindingTable",
    "FieldBinding",
    "Header",
    "PathVariable",
    "QueryParam",
    "binding_table",
    "build_binding_table",
    "clear_binding_tables",
    "empty_value",
    "header_name_from_field",
    "register_bindings",
]
