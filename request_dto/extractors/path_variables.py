"""Copy router-extracted path variables into path-bound fields."""

from collections.abc import Mapping
from typing import Any, TypeVar

import structlog

from request_dto.bindings import BindingKind, FieldBinding, binding_table
from request_dto.core.conversion import ConversionService, DefaultConversionService
from request_dto.core.errors import ConversionError, FieldAssignmentError


logger = structlog.get_logger(__name__)

T = TypeVar("T")


class PathVariableExtractor:
    """Writes path variables into fields declared with ``PathVariable``.

    Lenient: a missing variable or a value that does not convert to the
    field type is logged and the field keeps its current value.
    """

    def __init__(self, conversion_service: ConversionService | None = None) -> None:
        self._conversion = conversion_service or DefaultConversionService()

    def extract(self, target: T, path_params: Mapping[str, str] | None) -> T:
        path_params = path_params or {}
        for field in binding_table(type(target)).of_kind(BindingKind.PATH_VARIABLE):
            self._extract_field(target, field, path_params)
        return target

    def _extract_field(
        self, target: Any, field: FieldBinding, path_params: Mapping[str, str]
    ) -> None:
        name = field.source_key
        raw = path_params.get(name)
        if raw is None:
            logger.warning(
                "path_variable_missing",
                path_variable=name,
                field=field.name,
                category="binding",
            )
            return

        try:
            value = self._conversion.convert(raw, field.annotation)
        except ConversionError as e:
            logger.warning(
                "path_variable_conversion_failed",
                path_variable=name,
                field=field.name,
                value=raw,
                error=e.message,
                category="binding",
            )
            return

        try:
            field.assign(target, value)
        except FieldAssignmentError:
            raise
        except Exception as e:
            logger.warning(
                "path_variable_assignment_failed",
                path_variable=name,
                field=field.name,
                error=str(e),
                category="binding",
            )
