"""SearchSpace - per-state search bookkeeping and path reconstruction."""

from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Iterator
from dataclasses import dataclass
from enum import Enum

from statewalk.core.state import State
from statewalk.core.task import NO_OPERATOR, NO_STATE, Operator, OperatorID, StateID
from statewalk.errors import ErrorContext, InvariantViolationError

logger = logging.getLogger(__name__)


class NodeStatus(Enum):
    """Lifecycle of a search node.

    Transitions are monotone: NEW -> OPEN -> CLOSED, or NEW -> DEAD_END.
    """

    NEW = "new"
    OPEN = "open"
    CLOSED = "closed"
    DEAD_END = "dead_end"


@dataclass
class SearchNodeInfo:
    status: NodeStatus = NodeStatus.NEW
    g: int = -1
    real_g: int = -1
    parent_state_id: StateID = NO_STATE
    creating_operator_id: OperatorID = NO_OPERATOR


class SearchNode:
    """View of the search metadata of one state.

    Nodes are handed out by SearchSpace.get_node(); all mutation goes through
    the transition methods below so illegal status changes are caught.
    """

    def __init__(self, state: State, info: SearchNodeInfo) -> None:
        self.state = state
        self.info = info

    @property
    def state_id(self) -> StateID:
        return self.state.id

    @property
    def status(self) -> NodeStatus:
        return self.info.status

    @property
    def g(self) -> int:
        return self.info.g

    @property
    def real_g(self) -> int:
        return self.info.real_g

    @property
    def parent_state_id(self) -> StateID:
        return self.info.parent_state_id

    @property
    def creating_operator_id(self) -> OperatorID:
        return self.info.creating_operator_id

    def is_new(self) -> bool:
        return self.info.status is NodeStatus.NEW

    def is_open(self) -> bool:
        return self.info.status is NodeStatus.OPEN

    def is_closed(self) -> bool:
        return self.info.status is NodeStatus.CLOSED

    def is_dead_end(self) -> bool:
        return self.info.status is NodeStatus.DEAD_END

    def _require(self, expected: NodeStatus, action: str) -> None:
        if self.info.status is not expected:
            raise InvariantViolationError(
                message=(
                    f"Cannot {action} node of state {self.state_id}: status is "
                    f"{self.info.status.value}, expected {expected.value}"
                ),
                context=ErrorContext(state_id=self.state_id),
            )

    def open_initial(self) -> None:
        """Open the root node with g = real_g = 0 and no parent."""
        self._require(NodeStatus.NEW, "open")
        self.info.status = NodeStatus.OPEN
        self.info.g = 0
        self.info.real_g = 0
        self.info.parent_state_id = NO_STATE
        self.info.creating_operator_id = NO_OPERATOR

    def open(self, parent: SearchNode, op_id: OperatorID, operator: Operator, adjusted_cost: int) -> None:
        """Open this node as a successor of ``parent`` reached via ``op_id``."""
        self._require(NodeStatus.NEW, "open")
        self.info.status = NodeStatus.OPEN
        self.info.g = parent.g + adjusted_cost
        self.info.real_g = parent.real_g + operator.cost
        self.info.parent_state_id = parent.state_id
        self.info.creating_operator_id = op_id

    def close(self) -> None:
        self._require(NodeStatus.OPEN, "close")
        self.info.status = NodeStatus.CLOSED

    def mark_as_dead_end(self) -> None:
        self._require(NodeStatus.NEW, "mark as dead end")
        self.info.status = NodeStatus.DEAD_END

    def __repr__(self) -> str:
        return (
            f"SearchNode(state={self.state_id}, status={self.info.status.value}, "
            f"g={self.info.g}, real_g={self.info.real_g})"
        )


class SearchSpace:
    """Holds the SearchNode of every state the engine has looked at.

    Nodes are created lazily on first lookup and are never removed during
    a run.
    """

    def __init__(self) -> None:
        self._infos: dict[StateID, SearchNodeInfo] = {}
        self._states: dict[StateID, State] = {}

    def get_node(self, state: State) -> SearchNode:
        info = self._infos.get(state.id)
        if info is None:
            info = SearchNodeInfo()
            self._infos[state.id] = info
            self._states[state.id] = state
        return SearchNode(state, info)

    def trace_path(self, state: State) -> list[OperatorID]:
        """Get the operators leading from the root to ``state``.

        Follows parent pointers of opened nodes back to the root. Returns an
        empty plan for the root itself.
        """
        path: list[OperatorID] = []
        info = self._infos.get(state.id)
        if info is None or info.status in (NodeStatus.NEW, NodeStatus.DEAD_END):
            raise InvariantViolationError(
                message=f"Cannot trace a path to state {state.id}: it was never opened",
                context=ErrorContext(state_id=state.id),
            )
        while info.creating_operator_id != NO_OPERATOR:
            path.append(info.creating_operator_id)
            info = self._infos[info.parent_state_id]
        path.reverse()
        return path

    def iter_nodes(self) -> Iterator[SearchNode]:
        for state_id, info in self._infos.items():
            yield SearchNode(self._states[state_id], info)

    def count_by_status(self) -> dict[NodeStatus, int]:
        counts = Counter(info.status for info in self._infos.values())
        return {status: counts.get(status, 0) for status in NodeStatus}

    def print_statistics(self) -> None:
        logger.info(f"Number of registered states: {len(self._infos)}")
        for status, count in self.count_by_status().items():
            logger.debug(f"  {status.value}: {count}")

    def __len__(self) -> int:
        return len(self._infos)


__all__ = ["NodeStatus", "SearchNodeInfo", "SearchNode", "SearchSpace"]
