"""Task builders and evaluators shared by the statewalk tests."""

from __future__ import annotations

from statewalk.core.evaluation import INFINITY, EvaluationContext, EvaluationResult, Heuristic
from statewalk.core.task import Task


def chain_task_data(length: int = 3, cost: int = 1) -> dict:
    """A -op1-> B -op2-> C ... with the last location as goal."""
    locations = [chr(ord("A") + i) for i in range(length)]
    return {
        "variables": {"at": locations},
        "initial": {"at": locations[0]},
        "goal": {"at": locations[-1]},
        "operators": [
            {
                "name": f"op{i + 1}",
                "pre": {"at": locations[i]},
                "eff": {"at": locations[i + 1]},
                "cost": cost,
            }
            for i in range(length - 1)
        ],
    }


GRID_SIZE = 4


def grid_task_data() -> dict:
    """A GRID_SIZE x GRID_SIZE grid with moves in all four directions."""
    cells = [str(i) for i in range(GRID_SIZE)]
    operators = []
    for var in ("x", "y"):
        for i in range(GRID_SIZE - 1):
            operators.append(
                {"name": f"inc-{var}-{i}", "pre": {var: str(i)}, "eff": {var: str(i + 1)}}
            )
            operators.append(
                {"name": f"dec-{var}-{i + 1}", "pre": {var: str(i + 1)}, "eff": {var: str(i)}}
            )
    return {
        "variables": {"x": cells, "y": cells},
        "initial": {"x": "0", "y": "0"},
        "goal": {"x": cells[-1], "y": cells[-1]},
        "operators": operators,
    }


class ChainDistance(Heuristic):
    """Distance to the last location of a chain task."""

    name = "chain"

    def compute(self, context: EvaluationContext) -> EvaluationResult:
        position = context.state.values[0]
        goal = len(self.task.variables[0].domain) - 1
        preferred = tuple(
            op_id
            for op_id, op in enumerate(self.task.operators)
            if op.is_applicable(context.state.values)
        )
        return EvaluationResult(goal - position, preferred)


class DeadEndAt(Heuristic):
    """Reports INFINITY in states where variable 0 has the given value."""

    name = "deadend"

    def __init__(self, task: Task, value: int, reliable: bool = True) -> None:
        super().__init__(task)
        self.value = value
        self.reliable = reliable

    def dead_ends_are_reliable(self) -> bool:
        return self.reliable

    def compute(self, context: EvaluationContext) -> EvaluationResult:
        if context.state.values[0] == self.value:
            return EvaluationResult(INFINITY)
        return EvaluationResult(0)



def two_axis_task_data(size: int = 6) -> dict:
    """Counters x and y that only go up; the goal is the last x value."""
    cells = [str(i) for i in range(size)]
    operators = [
        {"name": f"inc-{var}-{i}", "pre": {var: str(i)}, "eff": {var: str(i + 1)}}
        for var in ("x", "y")
        for i in range(size - 1)
    ]
    return {
        "variables": {"x": cells, "y": cells},
        "initial": {"x": "0", "y": "0"},
        "goal": {"x": cells[-1]},
        "operators": operators,
    }


class AxisDistance(Heuristic):
    """Distance along variable 0; prefers the operators that advance it."""

    name = "axis"

    def compute(self, context: EvaluationContext) -> EvaluationResult:
        position = context.state.values[0]
        preferred = tuple(
            op_id
            for op_id, op in enumerate(self.task.operators)
            if (0, position + 1) in op.effects and op.is_applicable(context.state.values)
        )
        return EvaluationResult(len(self.task.variables[0].domain) - 1 - position, preferred)
