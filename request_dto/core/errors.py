"""Error taxonomy for request DTO resolution.

Every error carries a stable ``error_type`` and ``status_code`` so the host
framework can map it to a response without inspecting the message.
"""

from collections.abc import Iterable
from typing import TYPE_CHECKING, Any


if TYPE_CHECKING:
    from request_dto.validation import Violation


class RequestDTOError(Exception):
    """Base exception for request DTO resolution errors."""

    def __init__(
        self,
        message: str,
        error_type: str = "request_dto_error",
        status_code: int = 500,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.error_type = error_type
        self.status_code = status_code
        self.details = details or {}


# === Configuration errors ===


class ConfigurationError(RequestDTOError):
    """Declaration or wiring error; fails every request until fixed."""

    def __init__(
        self,
        message: str,
        error_type: str = "configuration_error",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message, error_type=error_type, status_code=500, details=details
        )


class BuilderInputTypeError(ConfigurationError):
    """Builder input type differs from the input type of the declaration."""

    def __init__(self, builder: str, declared: type, actual: Any) -> None:
        super().__init__(
            message=(
                f"Builder {builder} input type {_type_name(actual)} is not compatible "
                f"with declared input type {_type_name(declared)}"
            ),
            error_type="builder_input_type_error",
            details={
                "builder": builder,
                "declared": _type_name(declared),
                "actual": _type_name(actual),
            },
        )


class BuilderOutputTypeError(ConfigurationError):
    """Builder produced an object of an unexpected type."""

    def __init__(self, builder: str, expected: type, actual: type) -> None:
        super().__init__(
            message=(
                f"Builder {builder} produced {_type_name(actual)}, "
                f"expected {_type_name(expected)}"
            ),
            error_type="builder_output_type_error",
            details={
                "builder": builder,
                "expected": _type_name(expected),
                "actual": _type_name(actual),
            },
        )


class ValidatorTypeError(ConfigurationError):
    """Validator does not support the runtime type of the built DTO."""

    def __init__(self, validator: str, supported: Any, actual: type) -> None:
        super().__init__(
            message=(
                f"Validator {validator} supports {_type_name(supported)}, "
                f"got {_type_name(actual)}"
            ),
            error_type="validator_type_error",
            details={
                "validator": validator,
                "supported": _type_name(supported),
                "actual": _type_name(actual),
            },
        )


class BindingDeclarationError(ConfigurationError):
    """A field declares more than one binding kind."""

    def __init__(self, owner: type, field: str, kinds: Iterable[str]) -> None:
        kinds = list(kinds)
        super().__init__(
            message=(
                f"Field {_type_name(owner)}.{field} declares more than one binding: "
                f"{', '.join(kinds)}"
            ),
            error_type="binding_declaration_error",
            details={"owner": _type_name(owner), "field": field, "kinds": kinds},
        )


class ComponentNotFoundError(ConfigurationError):
    """Registry lookup failed."""

    def __init__(self, key: Any) -> None:
        super().__init__(
            message=f"Component {_key_name(key)} not registered",
            error_type="component_not_found_error",
            details={"key": _key_name(key)},
        )


class UnsupportedParameterError(ConfigurationError):
    """Parameter carries no request DTO declaration."""

    def __init__(self, parameter: Any) -> None:
        name = getattr(parameter, "name", None) or repr(parameter)
        super().__init__(
            message=f"Parameter {name} has no RequestDTO declaration",
            error_type="unsupported_parameter_error",
            details={"parameter": name},
        )


# === Extraction hard errors ===


class ExtractionError(RequestDTOError):
    """Fatal error while copying request data into the intermediate object."""

    def __init__(
        self,
        message: str,
        error_type: str = "extraction_error",
        status_code: int = 400,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            error_type=error_type,
            status_code=status_code,
            details=details,
        )


class ConversionError(ExtractionError):
    """A request value cannot be converted to the field type."""

    def __init__(self, value: str, target: Any, reason: str | None = None) -> None:
        message = f"Could not convert {value!r} to {_type_name(target)}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(
            message=message,
            error_type="conversion_error",
            details={"value": value, "target": _type_name(target)},
        )
        self.value = value
        self.target = target


class MissingParameterError(ExtractionError):
    """Required query parameter absent (only when rejection is enabled)."""

    def __init__(self, name: str) -> None:
        super().__init__(
            message=f"Required request parameter {name} is not present",
            error_type="missing_parameter_error",
            details={"parameter": name},
        )


class FieldAssignmentError(ExtractionError):
    """The intermediate object field exists but cannot be written."""

    def __init__(self, owner: type, field: str, cause: BaseException) -> None:
        super().__init__(
            message=f"Field {_type_name(owner)}.{field} is not settable: {cause}",
            error_type="field_assignment_error",
            status_code=500,
            details={"owner": _type_name(owner), "field": field},
        )
        self.cause = cause


class DeserializationError(RequestDTOError):
    """Request body cannot be decoded into the input type."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(
            message=message,
            error_type="deserialization_error",
            status_code=400,
            details=details,
        )


# === Validation errors ===


class ValidationFailure(RequestDTOError):
    """Aggregate validation failure carrying every violation found."""

    def __init__(
        self,
        message: str,
        violations: "Iterable[Violation]",
        error_type: str = "validation_error",
    ) -> None:
        self.violations = list(violations)
        super().__init__(
            message=message,
            error_type=error_type,
            status_code=422,
            details={"violations": [v.model_dump() for v in self.violations]},
        )


class ConstraintViolationError(ValidationFailure):
    """The intermediate object violates its constraints."""

    def __init__(self, owner: type, violations: "Iterable[Violation]") -> None:
        violations = list(violations)
        super().__init__(
            message=(
                f"{_type_name(owner)} has {len(violations)} constraint violation(s)"
            ),
            violations=violations,
            error_type="constraint_violation_error",
        )


class DTOValidationError(ValidationFailure):
    """The built DTO was rejected by its validator."""

    def __init__(
        self,
        violations: "Iterable[Violation]",
        message: str = "DTO validation failed",
    ) -> None:
        super().__init__(
            message=message, violations=violations, error_type="dto_validation_error"
        )


def _type_name(tp: Any) -> str:
    return getattr(tp, "__qualname__", None) or repr(tp)


def _key_name(key: Any) -> str:
    return key if isinstance(key, str) else _type_name(key)
