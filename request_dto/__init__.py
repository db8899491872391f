"""Declarative resolution of HTTP requests into validated DTOs."""

from .advice import RequestBodyAdvice, ResponseBodyAdvice
from .assembler import IntermediateAssembler
from .bindings import Header, PathVariable, QueryParam
from .context import RequestContext
from .dto import ComponentRegistry, DTOBuilder, DTOValidator, RequestDTO
from .resolver import RequestDTOResolver
from .validation import Violation


__version__ = "0.1.0"

__all__ = [
    "ComponentRegistry",
    "DTOBuilder",
    "DTOValidator",
    "Header",
    "IntermediateAssembler",
    "PathVariable",
    "QueryParam",
    "RequestBodyAdvice",
    "RequestContext",
    "RequestDTO",
    "RequestDTOResolver",
    "ResponseBodyAdvice",
    "Violation",
    "__version__",
]
