"""Resolution and dispatch of request DTO parameters.

Turns a declared handler parameter and a request into a DTO:

1. locate the ``RequestDTO`` declaration
2. resolve the builder and check its input type (cached per declaration)
3. deserialize the body into the intermediate object
4. extract headers, path variables and query parameters
5. constraint-validate the intermediate object
6. build the DTO and check its type
7. resolve and run the optional validator

Any failure aborts resolution; no partial DTO is ever returned.
"""

import inspect
import threading
from dataclasses import dataclass
from typing import Any

import structlog

from request_dto.assembler import IntermediateAssembler
from request_dto.config.resolver import ResolverSettings
from request_dto.context import RequestContext
from request_dto.core.errors import (
    BuilderInputTypeError,
    BuilderOutputTypeError,
    ConstraintViolationError,
    DTOValidationError,
    UnsupportedParameterError,
    ValidatorTypeError,
)
from request_dto.dto import (
    ComponentRegistry,
    DTOBuilder,
    DTOValidator,
    ParameterDeclaration,
    RequestDTO,
    find_declaration,
)
from request_dto.extractors import QueryParamExtractor
from request_dto.validation import ConstraintValidator, PydanticConstraintValidator


logger = structlog.get_logger(__name__)


def _name(key: Any) -> str:
    return key if isinstance(key, str) else getattr(key, "__qualname__", repr(key))


async def _maybe_await(result: Any) -> Any:
    if inspect.isawaitable(result):
        return await result
    return result


@dataclass(frozen=True)
class ResolutionPlan:
    """A declaration paired with its checked builder."""

    declaration: RequestDTO
    builder: DTOBuilder[Any, Any]

    @property
    def builder_name(self) -> str:
        return _name(self.declaration.builder)


class RequestDTOResolver:
    """Resolves parameters declared with ``RequestDTO`` into DTOs."""

    def __init__(
        self,
        registry: ComponentRegistry,
        assembler: IntermediateAssembler | None = None,
        constraint_validator: ConstraintValidator | None = None,
        settings: ResolverSettings | None = None,
    ) -> None:
        self.registry = registry
        self.settings = settings or ResolverSettings()
        self.assembler = assembler or IntermediateAssembler(
            query_extractor=QueryParamExtractor(
                reject_missing_required=self.settings.reject_missing_required_params
            )
        )
        self.constraint_validator = constraint_validator or PydanticConstraintValidator()
        self._plans: dict[RequestDTO, ResolutionPlan] = {}
        self._plans_lock = threading.Lock()

    def supports(self, parameter: Any) -> bool:
        """Whether ``parameter`` carries a RequestDTO declaration."""
        return find_declaration(parameter) is not None

    def plan(self, declaration: RequestDTO) -> ResolutionPlan:
        """Resolve and check the builder of ``declaration``.

        Successful plans are cached; a failing declaration is re-checked,
        and fails, on every call.

        Raises:
            ComponentNotFoundError: If the builder is not registered
            BuilderInputTypeError: If the builder consumes another input type
        """
        plan = self._plans.get(declaration)
        if plan is not None:
            return plan

        builder = self.registry.get_builder(declaration.builder)
        input_type = getattr(builder, "input_type", None)
        if input_type is not declaration.input:
            logger.warning(
                "builder_input_type_incompatible",
                builder=_name(declaration.builder),
                declared=_name(declaration.input),
                actual=_name(input_type),
                category="resolver",
            )
            raise BuilderInputTypeError(_name(declaration.builder), declaration.input, input_type)

        plan = ResolutionPlan(declaration=declaration, builder=builder)
        if self.settings.cache_plans:
            with self._plans_lock:
                self._plans.setdefault(declaration, plan)
        return plan

    async def resolve(self, parameter: Any, context: RequestContext) -> Any:
        """Resolve ``parameter`` against ``context`` into a DTO.

        Raises:
            UnsupportedParameterError: If the parameter has no declaration
            RequestDTOError: Any configuration, extraction or validation failure
        """
        located = find_declaration(parameter)
        if located is None:
            raise UnsupportedParameterError(parameter)

        declaration = located.declaration
        plan = self.plan(declaration)

        intermediate = await self.assembler.assemble(declaration.input, context)
        self._check_constraints(intermediate)

        dto = await self._build(plan, located, intermediate)

        if declaration.validator is not None:
            await self._run_validator(declaration.validator, dto)

        logger.debug(
            "request_dto_resolved",
            parameter=located.name,
            input_type=_name(declaration.input),
            dto_type=_name(type(dto)),
            category="resolver",
        )
        return dto

    def _check_constraints(self, intermediate: Any) -> None:
        violations = self.constraint_validator.validate(intermediate)
        if violations:
            logger.warning(
                "input_constraint_violations",
                input_type=_name(type(intermediate)),
                count=len(violations),
                fields=[v.field for v in violations],
                category="resolver",
            )
            raise ConstraintViolationError(type(intermediate), violations)

    async def _build(
        self, plan: ResolutionPlan, located: ParameterDeclaration, intermediate: Any
    ) -> Any:
        dto = await _maybe_await(plan.builder.build(intermediate))

        expected_types = [
            t for t in (getattr(plan.builder, "output_type", None), located.dto_type) if t
        ]
        for expected in expected_types:
            if not isinstance(dto, expected):
                logger.warning(
                    "builder_output_type_incompatible",
                    builder=plan.builder_name,
                    expected=_name(expected),
                    actual=_name(type(dto)),
                    category="resolver",
                )
                raise BuilderOutputTypeError(plan.builder_name, expected, type(dto))
        return dto

    async def _run_validator(self, key: Any, dto: Any) -> None:
        validator: DTOValidator[Any] = self.registry.get_validator(key)
        supported = getattr(validator, "supported_type", None)
        if supported is not type(dto):
            logger.warning(
                "validator_type_incompatible",
                validator=_name(key),
                supported=_name(supported),
                actual=_name(type(dto)),
                category="resolver",
            )
            raise ValidatorTypeError(_name(key), supported, type(dto))

        result = await _maybe_await(validator.validate(dto))
        violations = list(result or [])
        if violations:
            logger.info(
                "dto_validation_failed",
                validator=_name(key),
                count=len(violations),
                category="resolver",
            )
            raise DTOValidationError(violations)
