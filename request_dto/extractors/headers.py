"""Copy request headers into header-bound fields."""

from collections.abc import Mapping, Sequence
from typing import Any, TypeVar

import structlog

from request_dto.bindings import BindingKind, FieldBinding, binding_table
from request_dto.core.errors import FieldAssignmentError


logger = structlog.get_logger(__name__)

T = TypeVar("T")


def _header_values(headers: Any, name: str) -> list[str]:
    """Case-insensitive multi-value lookup; empty list when absent."""
    getlist = getattr(headers, "getlist", None)
    if getlist is not None:
        return list(getlist(name))
    lowered = name.lower()
    for key, values in headers.items():
        if key.lower() == lowered:
            if isinstance(values, str):
                return [values]
            return list(values)
    return []


class HeaderExtractor:
    """Writes header values into fields declared with ``Header``.

    Missing headers leave the field untouched. A field typed as a sequence
    of strings receives every value, any other field the first one.
    """

    def extract(self, target: T, headers: Mapping[str, Sequence[str]] | Any) -> T:
        for field in binding_table(type(target)).of_kind(BindingKind.HEADER):
            self._extract_field(target, field, headers)
        return target

    def _extract_field(self, target: Any, field: FieldBinding, headers: Any) -> None:
        header_name = field.source_key
        values = _header_values(headers, header_name)
        if not values:
            logger.warning(
                "header_missing",
                header=header_name,
                field=field.name,
                category="binding",
            )
            return

        value = field.sequence_value(values) if field.is_sequence_of_str else values[0]
        try:
            field.assign(target, value)
        except FieldAssignmentError:
            logger.error(
                "header_field_not_settable",
                header=header_name,
                field=field.name,
                category="binding",
            )
            raise
        except Exception as e:
            logger.warning(
                "header_assignment_failed",
                header=header_name,
                field=field.name,
                error=str(e),
                category="binding",
            )
