"""Tests for the header extractor."""

from typing import Annotated

import pytest
from pydantic import BaseModel, ConfigDict
from starlette.datastructures import Headers
from structlog.testing import capture_logs

from request_dto.bindings import Header
from request_dto.core.errors import FieldAssignmentError
from request_dto.extractors import HeaderExtractor


class HeaderInput(BaseModel):
    xTestHeaderName: Annotated[str | None, Header()] = None
    trace_id: Annotated[str, Header("X-Trace-Id")] = "default"
    accept: Annotated[list[str], Header()] = []
    untouched: str = "keep"


def raw_headers(*pairs: tuple[str, str]) -> Headers:
    return Headers(raw=[(k.lower().encode(), v.encode()) for k, v in pairs])


class TestHeaderExtractor:
    """Test header binding behaviour."""

    def test_derived_name_is_looked_up_case_insensitively(self) -> None:
        target = HeaderInput()
        HeaderExtractor().extract(target, raw_headers(("X-Test-Header-Name", "v1")))
        assert target.xTestHeaderName == "v1"

    def test_explicit_key(self) -> None:
        target = HeaderInput()
        HeaderExtractor().extract(target, raw_headers(("x-trace-id", "42")))
        assert target.trace_id == "42"

    def test_scalar_field_takes_first_value(self) -> None:
        target = HeaderInput()
        HeaderExtractor().extract(
            target, raw_headers(("X-Trace-Id", "first"), ("X-Trace-Id", "second"))
        )
        assert target.trace_id == "first"

    def test_sequence_field_takes_all_values(self) -> None:
        target = HeaderInput()
        HeaderExtractor().extract(
            target, raw_headers(("Accept", "text/html"), ("Accept", "application/json"))
        )
        assert target.accept == ["text/html", "application/json"]

    def test_plain_mapping_is_supported(self) -> None:
        target = HeaderInput()
        HeaderExtractor().extract(target, {"X-TRACE-ID": ["7"], "accept": ["a", "b"]})
        assert target.trace_id == "7"
        assert target.accept == ["a", "b"]

    def test_missing_header_keeps_default_and_warns(self) -> None:
        target = HeaderInput()
        with capture_logs() as logs:
            HeaderExtractor().extract(target, raw_headers())

        assert target.trace_id == "default"
        assert target.untouched == "keep"
        missing = [log for log in logs if log["event"] == "header_missing"]
        assert {log["header"] for log in missing} == {
            "x-test-header-name",
            "X-Trace-Id",
            "accept",
        }
        assert all(log["log_level"] == "warning" for log in missing)

    def test_rejected_assignment_is_logged_not_raised(self) -> None:
        class Validated(BaseModel):
            model_config = ConfigDict(validate_assignment=True)
            count: Annotated[int, Header("X-Count")] = 1

        target = Validated()
        with capture_logs() as logs:
            HeaderExtractor().extract(target, raw_headers(("X-Count", "many")))

        assert target.count == 1
        assert any(log["event"] == "header_assignment_failed" for log in logs)

    def test_unsettable_field_propagates(self) -> None:
        class Frozen(BaseModel):
            model_config = ConfigDict(frozen=True)
            token: Annotated[str, Header()] = ""

        with pytest.raises(FieldAssignmentError):
            HeaderExtractor().extract(Frozen(), raw_headers(("token", "abc")))
