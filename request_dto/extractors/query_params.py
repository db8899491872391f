"""Copy query string parameters into query-bound fields."""

import threading
from collections.abc import Mapping
from typing import Any, TypeVar

import structlog

from request_dto.bindings import BindingKind, FieldBinding, QueryParam, binding_table
from request_dto.core.conversion import ConversionService, DefaultConversionService
from request_dto.core.errors import (
    ConversionError,
    FieldAssignmentError,
    MissingParameterError,
    RequestDTOError,
)


logger = structlog.get_logger(__name__)

T = TypeVar("T")


class QueryParamExtractor:
    """Writes query parameters into fields declared with ``QueryParam``.

    Stricter than header and path extraction: a present value that does not
    convert aborts resolution with ConversionError. A missing required
    parameter is only logged unless ``reject_missing_required`` is set; a
    missing optional parameter resets the field to its empty value.
    """

    def __init__(
        self,
        conversion_service: ConversionService | None = None,
        reject_missing_required: bool = False,
    ) -> None:
        self._default_conversion = conversion_service or DefaultConversionService()
        self._reject_missing_required = reject_missing_required
        self._strategies: dict[FieldBinding, ConversionService] = {}
        self._lock = threading.Lock()

    def extract(self, target: T, query_params: Mapping[str, str] | None) -> T:
        query_params = query_params or {}
        for field in binding_table(type(target)).of_kind(BindingKind.QUERY_PARAM):
            self._extract_field(target, field, query_params)
        return target

    def conversion_for(self, field: FieldBinding) -> ConversionService:
        """Conversion strategy of ``field``; custom classes are built once."""
        binding = field.binding
        strategy = binding.conversion if isinstance(binding, QueryParam) else None
        if strategy is None:
            return self._default_conversion
        if not isinstance(strategy, type):
            return strategy

        cached = self._strategies.get(field)
        if cached is None:
            with self._lock:
                cached = self._strategies.get(field)
                if cached is None:
                    cached = strategy()
                    self._strategies[field] = cached
        return cached

    def _extract_field(
        self, target: Any, field: FieldBinding, query_params: Mapping[str, str]
    ) -> None:
        binding = field.binding
        required = binding.required if isinstance(binding, QueryParam) else True
        name = field.source_key
        raw = query_params.get(name)

        if raw is None or not raw.strip():
            if required:
                logger.warning(
                    "query_param_missing",
                    query_param=name,
                    field=field.name,
                    category="binding",
                )
                if self._reject_missing_required:
                    raise MissingParameterError(name)
                return
            self._assign(target, field, field.empty_value, name)
            return

        conversion = self.conversion_for(field)
        try:
            value = conversion.convert(raw, field.annotation)
        except ConversionError as e:
            logger.warning(
                "query_param_conversion_failed",
                query_param=name,
                field=field.name,
                value=raw,
                error=e.message,
                category="binding",
            )
            raise
        except RequestDTOError:
            raise
        except Exception as e:
            logger.warning(
                "query_param_conversion_failed",
                query_param=name,
                field=field.name,
                value=raw,
                error=str(e),
                category="binding",
            )
            raise ConversionError(raw, field.annotation, str(e)) from e

        self._assign(target, field, value, name)

    def _assign(self, target: Any, field: FieldBinding, value: Any, name: str) -> None:
        try:
            field.assign(target, value)
        except FieldAssignmentError:
            raise
        except Exception as e:
            logger.warning(
                "query_param_assignment_failed",
                query_param=name,
                field=field.name,
                value=value,
                error=str(e),
                category="binding",
            )
