"""Pytest configuration and fixtures."""

from __future__ import annotations

from typing import Any
from unittest.mock import MagicMock

import pytest
from nebula3.common.ttypes import Value
from rich.console import Console


def _make_value(kind: str, payload: Any) -> Value:
    """Build a driver Value through its setter, e.g. make_value("iVal", 1)."""
    value = Value()
    getattr(value, f"set_{kind}")(payload)
    return value


def _make_result(
    succeeded: bool = True,
    keys: list[str] | None = None,
    rows: list[list[Value]] | None = None,
    latency: int = 100,
    space: str = "",
    comment: str = "",
    plan: Any = None,
    error_code: int = 0,
    error_msg: str = "",
) -> MagicMock:
    """Mock ResultSet exposing the accessors the console reads."""
    result = MagicMock()
    result.is_succeeded.return_value = succeeded
    result.error_code.return_value = error_code
    result.error_msg.return_value = error_msg
    result.latency.return_value = latency
    result.space_name.return_value = space
    result.comment.return_value = comment
    result.plan_desc.return_value = plan
    result.keys.return_value = keys or []
    result.rows.return_value = [MagicMock(values=row) for row in rows or []]
    return result


@pytest.fixture
def make_value():
    """Factory for driver Values."""
    return _make_value


@pytest.fixture
def make_result():
    """Factory for mock ResultSets."""
    return _make_result


@pytest.fixture
def console():
    """Wide, colorless console writing to sys.stdout (captured by capsys)."""
    return Console(width=200, color_system=None, force_terminal=False)
