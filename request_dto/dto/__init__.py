"""DTO declarations, builder/validator interfaces and their registry."""

from .declaration import ParameterDeclaration, RequestDTO, find_declaration
from .interfaces import DTOBuilder, DTOValidator
from .registry import ComponentRegistry


__all__ = [
    "ComponentRegistry",
    "DTOBuilder",
    "DTOValidator",
    "ParameterDeclaration",
    "RequestDTO",
    "find_declaration",
]
