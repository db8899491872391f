"""Tests for request DTO resolution and dispatch."""

import inspect
from typing import Annotated

import pytest

from request_dto.config import ResolverSettings
from request_dto.core.errors import (
    BuilderInputTypeError,
    BuilderOutputTypeError,
    ComponentNotFoundError,
    ConstraintViolationError,
    ConversionError,
    DTOValidationError,
    MissingParameterError,
    UnsupportedParameterError,
    ValidatorTypeError,
)
from request_dto.dto import ComponentRegistry, DTOBuilder, RequestDTO
from request_dto.resolver import RequestDTOResolver
from tests.fixtures.models import (
    Admin,
    ConstrainedInput,
    User,
    UserBuilder,
    UserInput,
    UserValidator,
    make_context,
)


USER_DTO = RequestDTO(input=UserInput, builder="users", validator="user_validator")


def handler(user: Annotated[User, USER_DTO], plain: User) -> None:
    pass


def scenario_a_context(query_string: str = "active=true"):
    return make_context(
        body=b'{"name": "Ann"}',
        headers={"X-Trace-Id": "42"},
        path_params={"id": "7"},
        query_string=query_string,
    )


class AsyncUserBuilder(DTOBuilder[UserInput, User]):
    input_type = UserInput
    output_type = User

    async def build(self, input: UserInput) -> User:
        return User(id=input.id, name=input.name, trace_id=input.trace_id, active=input.active)


class AdminBuilder(DTOBuilder[UserInput, Admin]):
    input_type = UserInput
    output_type = Admin

    def build(self, input: UserInput) -> Admin:
        return Admin(id=input.id, name=input.name, trace_id=None, active=True)


class ConstrainedBuilder(DTOBuilder[ConstrainedInput, User]):
    input_type = ConstrainedInput

    def build(self, input: ConstrainedInput) -> User:
        return User(id=1, name=input.name, trace_id=None, active=True)


@pytest.fixture
def resolver(registry: ComponentRegistry) -> RequestDTOResolver:
    return RequestDTOResolver(registry)


class TestSupports:
    """Test applicability checks."""

    def test_supports_declared_parameter(self, resolver: RequestDTOResolver) -> None:
        parameters = inspect.signature(handler).parameters
        assert resolver.supports(parameters["user"])
        assert not resolver.supports(parameters["plain"])

    @pytest.mark.asyncio
    async def test_undeclared_parameter_is_rejected(self, resolver: RequestDTOResolver) -> None:
        context, _ = make_context()
        plain = inspect.signature(handler).parameters["plain"]
        with pytest.raises(UnsupportedParameterError):
            await resolver.resolve(plain, context)


class TestResolve:
    """Test the end-to-end resolution pipeline."""

    @pytest.mark.asyncio
    async def test_scenario_a_success(
        self,
        resolver: RequestDTOResolver,
        user_builder: UserBuilder,
        user_validator: UserValidator,
    ) -> None:
        context, reader = scenario_a_context()
        parameter = inspect.signature(handler).parameters["user"]

        dto = await resolver.resolve(parameter, context)

        assert dto == User(id=7, name="Ann", trace_id="42", active=True)
        assert user_builder.calls == 1
        assert user_validator.calls == 1
        assert reader.reads == 1

    @pytest.mark.asyncio
    async def test_scenario_b_unconvertible_required_query_param(
        self, resolver: RequestDTOResolver, user_builder: UserBuilder
    ) -> None:
        context, _ = scenario_a_context("active=maybe")

        with pytest.raises(ConversionError):
            await resolver.resolve(USER_DTO, context)

        assert user_builder.calls == 0

    @pytest.mark.asyncio
    async def test_scenario_c_builder_input_mismatch_before_body_read(
        self, resolver: RequestDTOResolver
    ) -> None:
        context, reader = scenario_a_context()
        declaration = RequestDTO(input=UserInput, builder="other")

        with pytest.raises(BuilderInputTypeError) as exc_info:
            await resolver.resolve(declaration, context)

        assert reader.reads == 0
        assert exc_info.value.details["actual"] == "OtherInput"

    @pytest.mark.asyncio
    async def test_input_mismatch_fails_every_request(self, resolver: RequestDTOResolver) -> None:
        declaration = RequestDTO(input=UserInput, builder="other")
        for _ in range(2):
            context, _ = make_context()
            with pytest.raises(BuilderInputTypeError):
                await resolver.resolve(declaration, context)

    @pytest.mark.asyncio
    async def test_required_missing_query_param_does_not_fail(
        self, resolver: RequestDTOResolver
    ) -> None:
        context, _ = scenario_a_context(query_string="")

        dto = await resolver.resolve(USER_DTO, context)

        assert dto.active is False

    @pytest.mark.asyncio
    async def test_required_missing_query_param_rejected_when_configured(
        self, registry: ComponentRegistry
    ) -> None:
        resolver = RequestDTOResolver(
            registry, settings=ResolverSettings(reject_missing_required_params=True)
        )
        context, _ = scenario_a_context(query_string="")

        with pytest.raises(MissingParameterError):
            await resolver.resolve(USER_DTO, context)

    @pytest.mark.asyncio
    async def test_unknown_builder(self, resolver: RequestDTOResolver) -> None:
        context, reader = make_context()
        with pytest.raises(ComponentNotFoundError):
            await resolver.resolve(RequestDTO(input=UserInput, builder="missing"), context)
        assert reader.reads == 0

    @pytest.mark.asyncio
    async def test_builder_output_mismatch(self, resolver: RequestDTOResolver) -> None:
        context, _ = scenario_a_context()
        with pytest.raises(BuilderOutputTypeError):
            await resolver.resolve(RequestDTO(input=UserInput, builder="wrong_output"), context)

    @pytest.mark.asyncio
    async def test_output_checked_against_parameter_type(
        self, resolver: RequestDTOResolver
    ) -> None:
        context, _ = scenario_a_context()
        declaration = RequestDTO(input=UserInput, builder="users")

        with pytest.raises(BuilderOutputTypeError) as exc_info:
            await resolver.resolve(Annotated[Admin, declaration], context)

        assert exc_info.value.details["expected"] == "Admin"

    @pytest.mark.asyncio
    async def test_async_builder(self, registry: ComponentRegistry) -> None:
        registry.register("async_users", instance=AsyncUserBuilder())
        context, _ = scenario_a_context()

        dto = await RequestDTOResolver(registry).resolve(
            RequestDTO(input=UserInput, builder="async_users"), context
        )

        assert dto.id == 7

    @pytest.mark.asyncio
    async def test_validator_type_must_match_runtime_type(
        self, registry: ComponentRegistry
    ) -> None:
        registry.register("admins", instance=AdminBuilder())
        resolver = RequestDTOResolver(registry)
        context, _ = scenario_a_context()

        with pytest.raises(ValidatorTypeError):
            await resolver.resolve(
                RequestDTO(input=UserInput, builder="admins", validator="user_validator"),
                context,
            )

    @pytest.mark.asyncio
    async def test_validator_supporting_subclass_runs(self, registry: ComponentRegistry) -> None:
        registry.register("admins", instance=AdminBuilder())
        context, _ = scenario_a_context()

        dto = await RequestDTOResolver(registry).resolve(
            RequestDTO(input=UserInput, builder="admins", validator="admin_validator"),
            context,
        )

        assert isinstance(dto, Admin)
        assert registry.get("admin_validator").calls == 1

    @pytest.mark.asyncio
    async def test_dto_validation_failure_reports_all_violations(
        self, resolver: RequestDTOResolver
    ) -> None:
        context, _ = make_context(query_string="active=true")

        with pytest.raises(DTOValidationError) as exc_info:
            await resolver.resolve(USER_DTO, context)

        assert {v.field for v in exc_info.value.violations} == {"name", "id"}
        assert exc_info.value.status_code == 422

    @pytest.mark.asyncio
    async def test_constraint_violations_abort_before_build(
        self, registry: ComponentRegistry
    ) -> None:
        registry.register("constrained", instance=ConstrainedBuilder())
        context, _ = make_context(body=b'{"name": "Ann"}', query_string="age=-5")

        with pytest.raises(ConstraintViolationError) as exc_info:
            await RequestDTOResolver(registry).resolve(
                RequestDTO(input=ConstrainedInput, builder="constrained"), context
            )

        assert [v.field for v in exc_info.value.violations] == ["age"]


class TestPlans:
    """Test caching of checked builder plans."""

    def test_successful_plan_is_cached(self, resolver: RequestDTOResolver) -> None:
        assert resolver.plan(USER_DTO) is resolver.plan(USER_DTO)

    def test_plan_cache_can_be_disabled(self, registry: ComponentRegistry) -> None:
        resolver = RequestDTOResolver(registry, settings=ResolverSettings(cache_plans=False))
        assert resolver.plan(USER_DTO) is not resolver.plan(USER_DTO)
