"""Successor generation - which operators apply in a state."""

from __future__ import annotations

from statewalk.core.state import State
from statewalk.core.task import OperatorID, Task


class SuccessorGenerator:
    """Enumerates the operators applicable in a state.

    Operators are checked in task order, so the result is deterministic for
    a given task and state.
    """

    def __init__(self, task: Task) -> None:
        self.task = task

    def generate_applicable_ops(self, state: State) -> list[OperatorID]:
        """Get the ids of all operators whose preconditions hold in ``state``."""
        return [
            op_id
            for op_id, op in enumerate(self.task.operators)
            if op.is_applicable(state.values)
        ]


__all__ = ["SuccessorGenerator"]
