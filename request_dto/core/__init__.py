"""Core building blocks: errors, logging and value conversion."""

from .conversion import ConversionService, DefaultConversionService
from .errors import (
    BindingDeclarationError,
    BuilderInputTypeError,
    BuilderOutputTypeError,
    ComponentNotFoundError,
    ConfigurationError,
    ConstraintViolationError,
    ConversionError,
    DeserializationError,
    DTOValidationError,
    ExtractionError,
    FieldAssignmentError,
    MissingParameterError,
    RequestDTOError,
    UnsupportedParameterError,
    ValidationFailure,
    ValidatorTypeError,
)


__all__ = [
    "BindingDeclarationError",
    "BuilderInputTypeError",
    "BuilderOutputTypeError",
    "ComponentNotFoundError",
    "ConfigurationError",
    "ConstraintViolationError",
    "ConversionError",
    "ConversionService",
    "DefaultConversionService",
    "DeserializationError",
    "DTOValidationError",
    "ExtractionError",
    "FieldAssignmentError",
    "MissingParameterError",
    "RequestDTOError",
    "UnsupportedParameterError",
    "ValidationFailure",
    "ValidatorTypeError",
]
