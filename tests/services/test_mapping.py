"""Tests for MappingService: profile-driven mapping and profile checks."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from objmap.config.models import MapperConfig
from objmap.plugins.manager import PluginManager
from objmap.services.mapping import MappingService


@pytest.fixture
def service() -> MappingService:
    return MappingService(PluginManager())


def _write(path: Path, text: str) -> Path:
    path.write_text(text, encoding="utf-8")
    return path


class TestMapDocument:
    def test_maps_sample_document(
        self, service: MappingService, profile_path: Path, document_path: Path
    ) -> None:
        result = service.map_document(
            profile_path, document_path, into="CustomerView", source_type="Customer"
        )
        assert result.ok
        assert result.op == "map"
        assert result.data["type"] == "CustomerView"
        assert result.data["result"] == {
            "display_name": "Ada",
            "tags": "math, engines",
            "address": {"street": "12 St James's Square", "city": "London"},
            "orders": [
                {"number": "A1", "total": 10.5},
                {"number": "A2", "total": 4.0},
            ],
            "order_count": 2,
            "nickname": None,
        }

    def test_gaps_become_warnings(
        self, service: MappingService, profile_path: Path, document_path: Path
    ) -> None:
        result = service.map_document(
            profile_path, document_path, into="CustomerView", source_type="Customer"
        )
        assert result.warnings == ["CustomerView.nickname [missing_source_property]: nickname"]
        assert result.meta == {"gap_count": 1}

    def test_strict_turns_gaps_into_failure(
        self, service: MappingService, profile_path: Path, document_path: Path
    ) -> None:
        result = service.map_document(
            profile_path, document_path, into="CustomerView", source_type="Customer", strict=True
        )
        assert not result.ok
        assert result.error is not None
        assert result.error.code == "INCOMPLETE"
        assert result.error.detail["gaps"][0]["path"] == "CustomerView.nickname"

    def test_strict_from_config(self, profile_path: Path, document_path: Path) -> None:
        service = MappingService(PluginManager(), MapperConfig(strict=True))
        result = service.map_document(
            profile_path, document_path, into="CustomerView", source_type="Customer"
        )
        assert not result.ok
        lenient = service.map_document(
            profile_path, document_path, into="CustomerView", source_type="Customer", strict=False
        )
        assert lenient.ok

    def test_unknown_destination_type(
        self, service: MappingService, profile_path: Path, document_path: Path
    ) -> None:
        result = service.map_document(
            profile_path, document_path, into="Ghost", source_type="Customer"
        )
        assert not result.ok
        assert result.error is not None
        assert result.error.code == "UNKNOWN_TYPE"
        assert result.error.detail == {"type_name": "Ghost"}

    def test_unknown_source_type(
        self, service: MappingService, profile_path: Path, document_path: Path
    ) -> None:
        result = service.map_document(
            profile_path, document_path, into="CustomerView", source_type="Ghost"
        )
        assert result.error is not None
        assert result.error.code == "UNKNOWN_TYPE"

    def test_missing_document(self, service: MappingService, profile_path: Path, tmp_path: Path) -> None:
        result = service.map_document(
            profile_path, tmp_path / "nope.json", into="CustomerView", source_type="Customer"
        )
        assert result.error is not None
        assert result.error.code == "INVALID_INPUT"
        assert "Document not found" in result.error.message

    def test_invalid_profile(self, service: MappingService, tmp_path: Path, document_path: Path) -> None:
        profile = _write(tmp_path / "bad.toml", "[types.Customer\n")
        result = service.map_document(
            profile, document_path, into="CustomerView", source_type="Customer"
        )
        assert result.error is not None
        assert result.error.code == "INVALID_INPUT"

    def test_null_document_maps_to_null(
        self, service: MappingService, profile_path: Path, tmp_path: Path
    ) -> None:
        document = _write(tmp_path / "null.json", "null")
        result = service.map_document(
            profile_path, document, into="CustomerView", source_type="Customer"
        )
        assert result.ok
        assert result.data["result"] is None

    def test_cyclic_profile_types_are_not_a_problem_for_trees(
        self, service: MappingService, tmp_path: Path
    ) -> None:
        profile = _write(
            tmp_path / "tree.toml",
            '[types.Node]\nname = "string"\nchild = "Node"\n'
            '[types.NodeView]\nname = "string"\nchild = "NodeView"\n',
        )
        document = _write(
            tmp_path / "tree.json", json.dumps({"name": "a", "child": {"name": "b"}})
        )
        result = service.map_document(profile, document, into="NodeView", source_type="Node")
        assert result.data["result"] == {"name": "a", "child": {"name": "b", "child": None}}

    def test_depth_limit_is_reported(self, tmp_path: Path) -> None:
        profile = _write(
            tmp_path / "tree.toml",
            '[types.Node]\nname = "string"\nchild = "Node"\n'
            '[types.NodeView]\nname = "string"\nchild = "NodeView"\n',
        )
        document = _write(
            tmp_path / "tree.json",
            json.dumps({"name": "a", "child": {"name": "b", "child": {"name": "c"}}}),
        )
        service = MappingService(PluginManager(), MapperConfig(max_depth=2))
        result = service.map_document(profile, document, into="NodeView", source_type="Node")
        assert result.error is not None
        assert result.error.code == "GRAPH_SHAPE"
        assert result.error.detail["path"] == "NodeView.child.child"


class TestCheckProfile:
    def test_healthy_profile(self, service: MappingService, profile_path: Path) -> None:
        result = service.check_profile(profile_path)
        assert result.ok
        assert result.data["healthy"] is True
        assert result.data["issues"] == []
        assert [t["name"] for t in result.data["types"]] == [
            "Customer",
            "Address",
            "Order",
            "CustomerView",
        ]
        assert result.data["types"][1]["properties"] == {"street": "string", "city": "string"}
        assert result.data["rules"][1] == {
            "for": "CustomerView::tags",
            "from": "Customer::tags",
            "converter": "JoinConverter",
            "resolver": None,
        }

    def test_reports_issues(self, service: MappingService, tmp_path: Path) -> None:
        profile = _write(
            tmp_path / "broken.toml",
            '[types.Customer]\nname = "string"\nfriend = "Stranger"\n'
            '[types.CustomerView]\nname = "string"\n'
            '[[rules]]\nfor = "CustomerView::missing"\nfrom = "Customer::name"\n'
            '[[rules]]\nfor = "CustomerView::name"\nfrom = "Ghost::name"\n'
            '[[rules]]\nfor = "Elsewhere::name"\nfrom = "Customer::alias"\n',
        )
        result = service.check_profile(profile)
        assert result.ok
        assert result.data["healthy"] is False
        assert result.data["issues"] == [
            "Customer::friend: unknown declared type 'Stranger'",
            "CustomerView::missing: destination property is not declared",
            "Ghost::name: source type is not declared",
            "Elsewhere::name: destination type is not declared",
            "Customer::alias: source property is not declared",
        ]
        assert result.warnings == result.data["issues"]

    def test_wildcard_source_is_not_an_issue(self, service: MappingService, tmp_path: Path) -> None:
        profile = _write(
            tmp_path / "wild.toml",
            '[types.View]\nname = "string"\n[[rules]]\nfor = "View::name"\nfrom = "*::title"\n',
        )
        assert service.check_profile(profile).data["healthy"] is True

    def test_invalid_profile(self, service: MappingService, tmp_path: Path) -> None:
        result = service.check_profile(tmp_path / "missing.toml")
        assert not result.ok
        assert result.error is not None
        assert result.error.code == "INVALID_PROFILE"


class TestListCapabilities:
    def test_builtins_listed(self, service: MappingService) -> None:
        result = service.list_capabilities()
        assert result.ok
        assert result.op == "converters"
        assert result.data["converters"] == ["count", "join"]
        assert result.data["resolvers"] == []
        assert "builtin-converters" in result.data["plugins"]
