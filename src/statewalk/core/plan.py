"""Plan helpers: cost, replay and plan files."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from pathlib import Path

from statewalk.core.task import OperatorID, Task
from statewalk.errors import ErrorContext, InvariantViolationError

logger = logging.getLogger(__name__)

Plan = list[OperatorID]


def plan_cost(task: Task, plan: Sequence[OperatorID]) -> int:
    """Sum of the real costs of the operators in ``plan``."""
    return sum(task.get_operator(op_id).cost for op_id in plan)


def replay_plan(task: Task, plan: Sequence[OperatorID]) -> tuple[int, ...]:
    """Apply ``plan`` to the initial state and return the resulting values.

    Raises:
        InvariantViolationError: If an operator is not applicable where the
            plan uses it.
    """
    values = tuple(task.initial_values)
    for step, op_id in enumerate(plan):
        operator = task.get_operator(op_id)
        if not operator.is_applicable(values):
            raise InvariantViolationError(
                message=f"Plan step {step} ({operator.name}) is not applicable",
                context=ErrorContext(operator=operator.name),
            )
        values = operator.apply(values)
    return values


def format_plan(task: Task, plan: Sequence[OperatorID]) -> str:
    lines = [f"({task.get_operator(op_id).name})" for op_id in plan]
    cost_kind = "unit cost" if task.is_unit_cost else "general cost"
    lines.append(f"; cost = {plan_cost(task, plan)} ({cost_kind})")
    return "\n".join(lines) + "\n"


def save_plan(task: Task, plan: Sequence[OperatorID], path: str | Path) -> Path:
    """Write ``plan`` to ``path``, one operator per line plus a cost line."""
    path = Path(path)
    path.write_text(format_plan(task, plan))
    logger.info(f"Plan length: {len(plan)} step(s).")
    logger.info(f"Plan cost: {plan_cost(task, plan)}")
    logger.debug(f"Plan written to {path}")
    return path


__all__ = ["Plan", "plan_cost", "replay_plan", "format_plan", "save_plan"]
