"""Tests for the path variable extractor."""

from typing import Annotated

import pytest
from pydantic import BaseModel, ConfigDict
from structlog.testing import capture_logs

from request_dto.bindings import PathVariable
from request_dto.core.errors import FieldAssignmentError
from request_dto.extractors import PathVariableExtractor
from tests.fixtures.models import Color


class PathInput(BaseModel):
    id: Annotated[int, PathVariable()] = 0
    userId: Annotated[str, PathVariable("user")] = ""
    ratio: Annotated[float, PathVariable()] = 1.0
    enabled: Annotated[bool, PathVariable()] = False
    color: Annotated[Color, PathVariable()] = Color.RED


class TestPathVariableExtractor:
    """Test path variable binding behaviour."""

    def test_converts_to_declared_types(self) -> None:
        target = PathInput()
        PathVariableExtractor().extract(
            target,
            {"id": "7", "user": "ann", "ratio": "0.5", "enabled": "true", "color": "green"},
        )

        assert target.id == 7
        assert target.userId == "ann"
        assert target.ratio == 0.5
        assert target.enabled is True
        assert target.color is Color.GREEN

    def test_field_name_is_not_transformed(self) -> None:
        target = PathInput()
        PathVariableExtractor().extract(target, {"user-id": "x", "userId": "y"})
        assert target.userId == ""

    def test_enum_by_member_name(self) -> None:
        target = PathInput()
        PathVariableExtractor().extract(target, {"color": "GREEN"})
        assert target.color is Color.GREEN

    def test_missing_variable_is_skipped_with_warning(self) -> None:
        target = PathInput(id=3)
        with capture_logs() as logs:
            PathVariableExtractor().extract(target, {})

        assert target.id == 3
        events = [log for log in logs if log["event"] == "path_variable_missing"]
        assert {log["path_variable"] for log in events} == {
            "id",
            "user",
            "ratio",
            "enabled",
            "color",
        }

    def test_conversion_failure_is_lenient(self) -> None:
        target = PathInput(id=3)
        with capture_logs() as logs:
            PathVariableExtractor().extract(target, {"id": "seven"})

        assert target.id == 3
        failures = [log for log in logs if log["event"] == "path_variable_conversion_failed"]
        assert len(failures) == 1
        assert failures[0]["value"] == "seven"

    def test_unsettable_field_propagates(self) -> None:
        class Frozen(BaseModel):
            model_config = ConfigDict(frozen=True)
            id: Annotated[int, PathVariable()] = 0

        with pytest.raises(FieldAssignmentError):
            PathVariableExtractor().extract(Frozen(), {"id": "1"})
