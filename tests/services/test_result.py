"""Tests for MappingResult, MappingGap, and the ServiceResult envelope."""

from __future__ import annotations

import pydantic
import pytest

from objmap.services.result import (
    GapKind,
    MappingGap,
    MappingResult,
    ServiceError,
    ServiceResult,
)


class TestMappingGap:
    def test_str_with_detail(self) -> None:
        gap = MappingGap(kind=GapKind.EMPTY_RULE, path="Dest.a", detail="Dest::a")
        assert str(gap) == "Dest.a [empty_rule]: Dest::a"

    def test_str_without_detail(self) -> None:
        assert str(MappingGap(kind=GapKind.NOT_AN_ARRAY, path="Dest.a")) == "Dest.a [not_an_array]"

    def test_frozen(self) -> None:
        gap = MappingGap(kind=GapKind.EMPTY_RULE, path="Dest.a")
        with pytest.raises(pydantic.ValidationError):
            gap.path = "other"  # type: ignore[misc]

    def test_json_dump(self) -> None:
        gap = MappingGap(kind=GapKind.UNRESOLVED_TYPE, path="Dest.a")
        assert gap.model_dump(mode="json") == {
            "kind": "unresolved_type",
            "path": "Dest.a",
            "detail": "",
        }


class TestMappingResult:
    def test_complete(self) -> None:
        assert MappingResult(value=object()).complete

    def test_incomplete(self) -> None:
        result = MappingResult(
            value=None,
            gaps=[
                MappingGap(kind=GapKind.EMPTY_RULE, path="a"),
                MappingGap(kind=GapKind.NOT_AN_ARRAY, path="b"),
                MappingGap(kind=GapKind.EMPTY_RULE, path="c"),
            ],
        )
        assert not result.complete
        assert [g.path for g in result.gaps_of(GapKind.EMPTY_RULE)] == ["a", "c"]

    def test_value_is_kept_by_identity(self) -> None:
        value = object()
        assert MappingResult(value=value).value is value


class TestServiceResult:
    def test_ok_defaults(self) -> None:
        result = ServiceResult(ok=True, op="map")
        assert result.data == {}
        assert result.warnings == []
        assert result.error is None
        assert result.meta is None

    def test_error_payload(self) -> None:
        result = ServiceResult(
            ok=False, op="map", error=ServiceError(code="INCOMPLETE", message="gaps")
        )
        assert result.error is not None
        assert result.error.detail == {}
        assert result.model_dump()["error"]["code"] == "INCOMPLETE"
