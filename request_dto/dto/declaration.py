"""Handler parameter declarations."""

import inspect
from dataclasses import dataclass
from typing import Annotated, Any, get_origin


@dataclass(frozen=True)
class RequestDTO:
    """Declares how a handler parameter is resolved.

    Attach with ``Annotated[UserDTO, RequestDTO(input=UserInput, builder="users")]``.

    Args:
        input: Intermediate type the body and request sources are bound into
        builder: Registry key of the DTOBuilder
        validator: Registry key of an optional DTOValidator
    """

    input: type
    builder: Any
    validator: Any | None = None


@dataclass(frozen=True)
class ParameterDeclaration:
    """A located declaration together with the parameter's DTO type."""

    declaration: RequestDTO
    dto_type: type | None = None
    name: str | None = None


def find_declaration(parameter: Any) -> ParameterDeclaration | None:
    """Locate the RequestDTO declaration attached to ``parameter``.

    ``parameter`` may be an ``inspect.Parameter``, an ``Annotated`` type, a
    ParameterDeclaration or a bare RequestDTO.
    """
    if isinstance(parameter, ParameterDeclaration):
        return parameter
    if isinstance(parameter, RequestDTO):
        return ParameterDeclaration(declaration=parameter)

    name = None
    annotation = parameter
    if isinstance(parameter, inspect.Parameter):
        name = parameter.name
        annotation = parameter.annotation

    if get_origin(annotation) is not Annotated:
        return None

    for meta in annotation.__metadata__:
        if isinstance(meta, RequestDTO):
            dto_type = annotation.__origin__
            return ParameterDeclaration(
                declaration=meta,
                dto_type=dto_type if isinstance(dto_type, type) else None,
                name=name,
            )
    return None
