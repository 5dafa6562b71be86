"""State and StateRegistry."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass

from statewalk.core.task import Operator, StateID, Task
from statewalk.errors import ErrorContext, InvariantViolationError


@dataclass(frozen=True)
class State:
    """Immutable snapshot of all variable values.

    State identity is the registry-assigned ``id``. Two states with identical
    values registered in the same StateRegistry share the same id.
    """

    id: StateID
    values: tuple[int, ...]

    def __getitem__(self, var: int) -> int:
        return self.values[var]

    def __len__(self) -> int:
        return len(self.values)


class StateRegistry:
    """Canonical storage of the states of one task.

    The registry is an arena: value tuples are stored once, in registration
    order, and addressed by their index. Successor states are deduplicated
    by content, so revisiting a configuration yields the existing id.
    """

    def __init__(self, task: Task) -> None:
        self.task = task
        self._values: list[tuple[int, ...]] = []
        self._ids: dict[tuple[int, ...], StateID] = {}
        self._initial_state: State | None = None

    def _register(self, values: tuple[int, ...]) -> State:
        state_id = self._ids.get(values)
        if state_id is None:
            state_id = len(self._values)
            self._values.append(values)
            self._ids[values] = state_id
        return State(id=state_id, values=values)

    def get_initial_state(self) -> State:
        """Get (registering on first use) the task's initial state."""
        if self._initial_state is None:
            self._initial_state = self._register(tuple(self.task.initial_values))
        return self._initial_state

    def lookup_state(self, state_id: StateID) -> State:
        """Get a registered state by id."""
        return State(id=state_id, values=self._values[state_id])

    def get_successor_state(self, predecessor: State, operator: Operator) -> State:
        """Apply ``operator`` to ``predecessor`` and register the result.

        Raises:
            InvariantViolationError: If the operator is not applicable in the
                predecessor. Successor generators must never hand out such
                operators.
        """
        if not operator.is_applicable(predecessor.values):
            raise InvariantViolationError(
                message=f"Operator '{operator.name}' is not applicable in state {predecessor.id}",
                context=ErrorContext(state_id=predecessor.id, operator=operator.name),
            )
        return self._register(operator.apply(predecessor.values))

    def __contains__(self, state_id: object) -> bool:
        return isinstance(state_id, int) and 0 <= state_id < len(self._values)

    def __iter__(self) -> Iterator[State]:
        for state_id, values in enumerate(self._values):
            yield State(id=state_id, values=values)

    def __len__(self) -> int:
        return len(self._values)


__all__ = ["State", "StateRegistry"]
