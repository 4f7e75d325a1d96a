"""Shared pytest fixtures and test helpers for objmap tests."""

from __future__ import annotations

import json
import logging
from collections.abc import Generator
from pathlib import Path
from typing import Any

import pytest
from click.testing import CliRunner

from objmap.config.logging import HANDLER_NAME
from objmap.domain.catalog import TypeCatalog
from tests.models import (
    Address,
    AddressView,
    Customer,
    CustomerView,
    LineView,
    Node,
    NodeView,
    OrderLine,
)

SAMPLE_PROFILE = """\
[types.Customer]
name = "string"
tags = "string[]"
address = "Address"
orders = "Order[]"

[types.Address]
street = "string"
city = "string"

[types.Order]
number = "string"
total = "float"

[types.CustomerView]
display_name = "string"
tags = "string"
address = "Address"
orders = "Order[]"
order_count = "int"
nickname = "string"

[[rules]]
for = "CustomerView::display_name"
from = "Customer::name"

[[rules]]
for = "CustomerView::tags"
from = "Customer::tags"
converter = "join"
converter_args = { delimiter = ", " }

[[rules]]
for = "CustomerView::order_count"
from = "Customer::orders"
converter = "count"
"""

SAMPLE_DOCUMENT: dict[str, Any] = {
    "name": "Ada",
    "tags": ["math", "engines"],
    "address": {"street": "12 St James's Square", "city": "London"},
    "orders": [
        {"number": "A1", "total": 10.5},
        {"number": "A2", "total": 4.0},
    ],
}


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def catalog() -> TypeCatalog:
    """Catalog with every sample dataclass registered from its annotations."""
    cat = TypeCatalog()
    for cls in (Address, AddressView, OrderLine, LineView, Customer, CustomerView, Node, NodeView):
        cat.register(cls)
    return cat


@pytest.fixture
def profile_path(tmp_path: Path) -> Path:
    """The sample mapping profile written to disk."""
    path = tmp_path / "views.toml"
    path.write_text(SAMPLE_PROFILE, encoding="utf-8")
    return path


@pytest.fixture
def document_path(tmp_path: Path) -> Path:
    """The sample customer document written to disk."""
    path = tmp_path / "customer.json"
    path.write_text(json.dumps(SAMPLE_DOCUMENT), encoding="utf-8")
    return path


@pytest.fixture
def _isolated_cwd(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Run from an empty directory with no objmap config in the environment.

    Use via ``@pytest.mark.usefixtures("_isolated_cwd")`` on CLI test classes.
    """
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("OBJMAP_CONFIG", raising=False)
    for name in ("OBJMAP_MAPPER__STRICT", "OBJMAP_PROFILE__PATH", "OBJMAP_PLUGINS__ENTRY_POINTS"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture(autouse=True)
def _drop_cli_log_handler() -> Generator[None]:
    """Remove the handler a CLI invocation installs on the root logger."""
    yield
    root = logging.getLogger()
    for handler in [h for h in root.handlers if h.get_name() == HANDLER_NAME]:
        root.removeHandler(handler)
