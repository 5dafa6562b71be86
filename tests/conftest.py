"""Pytest fixtures for statewalk tests."""

from __future__ import annotations

import pytest
from helpers import chain_task_data, grid_task_data

from statewalk.core.task import Task


@pytest.fixture
def chain_task() -> Task:
    return Task.from_dict(chain_task_data(), name="chain")


@pytest.fixture
def long_chain_task() -> Task:
    return Task.from_dict(chain_task_data(length=4), name="long-chain")


@pytest.fixture
def stuck_task() -> Task:
    """A -op1-> B where B has no applicable operators and C is unreachable."""
    return Task.from_dict(
        {
            "variables": {"at": ["A", "B", "C"]},
            "initial": {"at": "A"},
            "goal": {"at": "C"},
            "operators": [{"name": "op1", "pre": {"at": "A"}, "eff": {"at": "B"}}],
        },
        name="stuck",
    )


@pytest.fixture
def cycle_task() -> Task:
    """A <-> B with an unreachable goal."""
    return Task.from_dict(
        {
            "variables": {"at": ["A", "B", "C"]},
            "initial": {"at": "A"},
            "goal": {"at": "C"},
            "operators": [
                {"name": "forth", "pre": {"at": "A"}, "eff": {"at": "B"}},
                {"name": "back", "pre": {"at": "B"}, "eff": {"at": "A"}},
            ],
        },
        name="cycle",
    )


@pytest.fixture
def grid_task() -> Task:
    return Task.from_dict(grid_task_data(), name="grid")


@pytest.fixture
def weighted_task() -> Task:
    """Two variables, operators of varying cost."""
    return Task.from_dict(
        {
            "variables": {"a": ["0", "1", "2"], "b": ["off", "on"]},
            "initial": {"a": "0", "b": "off"},
            "goal": {"a": "2", "b": "on"},
            "operators": [
                {"name": "step-a-1", "pre": {"a": "0"}, "eff": {"a": "1"}, "cost": 3},
                {"name": "step-a-2", "pre": {"a": "1"}, "eff": {"a": "2"}, "cost": 0},
                {"name": "switch-on", "pre": {"b": "off"}, "eff": {"b": "on"}, "cost": 2},
                {"name": "switch-off", "pre": {"b": "on"}, "eff": {"b": "off"}, "cost": 5},
                {"name": "reset", "pre": {"a": "2"}, "eff": {"a": "0"}, "cost": 1},
            ],
        },
        name="weighted",
    )


@pytest.fixture
def chain_yaml(tmp_path):
    path = tmp_path / "chain.yaml"
    path.write_text(
        "variables:\n"
        "  at: [A, B, C]\n"
        "initial: {at: A}\n"
        "goal: {at: C}\n"
        "operators:\n"
        "  - {name: op1, pre: {at: A}, eff: {at: B}}\n"
        "  - {name: op2, pre: {at: B}, eff: {at: C}, cost: 1}\n"
    )
    return path
