"""Tests for GraphRunResult."""

from __future__ import annotations

import dataclasses

import pytest

from graphrun.dsl.results import GraphRunResult


def test_success_and_serialization() -> None:
    result = GraphRunResult(
        exit_code=0,
        state={"var": {}},
        nodes_executed=("start", "done"),
        duration_ms=12,
    )
    assert result.success
    assert result.to_dict() == {
        "exit_code": 0,
        "state": {"var": {}},
        "nodes_executed": ["start", "done"],
        "duration_ms": 12,
    }


def test_nonzero_exit_is_not_success() -> None:
    result = GraphRunResult(exit_code=2, state={}, nodes_executed=(), duration_ms=0)
    assert not result.success


def test_negative_duration_rejected() -> None:
    with pytest.raises(ValueError, match="duration_ms"):
        GraphRunResult(exit_code=0, state={}, nodes_executed=(), duration_ms=-1)


def test_frozen() -> None:
    result = GraphRunResult(exit_code=0, state={}, nodes_executed=(), duration_ms=0)
    with pytest.raises(dataclasses.FrozenInstanceError):
        result.exit_code = 1  # type: ignore[misc]
