"""Edge open lists - prioritized (predecessor, operator) pairs.

An edge open list holds transitions that have been generated but not yet
followed. The ordering key of an edge is computed from an evaluation
context when the edge is inserted; the entry itself only stores the pair.

Implementations:
- BestFirstOpenList: one evaluator, lowest value first, FIFO among ties
- AlternationOpenList: round-robin over sub-lists, biased by priorities
  that boost_preferred() lowers for sub-lists of preferred edges
"""

from __future__ import annotations

import heapq
import itertools
import logging
from abc import ABC, abstractmethod
from collections.abc import Sequence

from statewalk.core.evaluation import EvaluationContext, Evaluator
from statewalk.core.task import OperatorID, StateID
from statewalk.errors import InvariantViolationError

logger = logging.getLogger(__name__)

EdgeOpenListEntry = tuple[StateID, OperatorID]


class EdgeOpenList(ABC):
    """Base class for edge open lists."""

    def __init__(self, only_preferred: bool = False) -> None:
        self.only_preferred = only_preferred

    def insert(self, context: EvaluationContext, entry: EdgeOpenListEntry) -> None:
        """Insert ``entry`` scored by ``context``.

        Non-preferred edges are ignored by lists that only hold preferred
        edges, and edges whose context is a dead end are dropped.
        """
        if self.only_preferred and not context.is_preferred:
            return
        if self.is_dead_end(context):
            return
        self._do_insertion(context, entry)

    @abstractmethod
    def _do_insertion(self, context: EvaluationContext, entry: EdgeOpenListEntry) -> None: ...

    @abstractmethod
    def remove_min(self) -> EdgeOpenListEntry:
        """Remove and return the best entry.

        Raises:
            InvariantViolationError: If the list is empty.
        """
        ...

    @abstractmethod
    def is_empty(self) -> bool: ...

    @abstractmethod
    def clear(self) -> None: ...

    @abstractmethod
    def is_dead_end(self, context: EvaluationContext) -> bool:
        """Check whether any evaluator of this list rules out ``context``."""
        ...

    @abstractmethod
    def is_reliable_dead_end(self, context: EvaluationContext) -> bool: ...

    def boost_preferred(self) -> None:
        """Bias future pops towards preferred edges. No-op by default."""

    def only_contains_preferred_entries(self) -> bool:
        return self.only_preferred

    @abstractmethod
    def __len__(self) -> int: ...


class BestFirstOpenList(EdgeOpenList):
    """Orders edges by the value of a single evaluator."""

    def __init__(self, evaluator: Evaluator, only_preferred: bool = False) -> None:
        super().__init__(only_preferred)
        self.evaluator = evaluator
        self._heap: list[tuple[float, int, EdgeOpenListEntry]] = []
        self._counter = itertools.count()

    def _do_insertion(self, context: EvaluationContext, entry: EdgeOpenListEntry) -> None:
        key = context.get_evaluator_value(self.evaluator)
        heapq.heappush(self._heap, (key, next(self._counter), entry))

    def remove_min(self) -> EdgeOpenListEntry:
        if not self._heap:
            raise InvariantViolationError(message="remove_min() on an empty open list")
        _, _, entry = heapq.heappop(self._heap)
        return entry

    def is_empty(self) -> bool:
        return not self._heap

    def clear(self) -> None:
        self._heap.clear()

    def is_dead_end(self, context: EvaluationContext) -> bool:
        return context.is_evaluator_value_infinite(self.evaluator)

    def is_reliable_dead_end(self, context: EvaluationContext) -> bool:
        return self.is_dead_end(context) and self.evaluator.dead_ends_are_reliable()

    def __len__(self) -> int:
        return len(self._heap)

    def __repr__(self) -> str:
        kind = "preferred" if self.only_preferred else "standard"
        return f"BestFirstOpenList({self.evaluator.name}, {kind}, size={len(self)})"


class AlternationOpenList(EdgeOpenList):
    """Alternates between sub-lists.

    Every sub-list has a priority, initially 0. remove_min() pops from the
    non-empty sub-list with the lowest priority (lowest index among ties)
    and increments that priority. boost_preferred() lowers the priority of
    every preferred-only sub-list by ``boost``.
    """

    def __init__(self, sublists: Sequence[EdgeOpenList], boost: int = 0) -> None:
        super().__init__(only_preferred=False)
        if not sublists:
            raise ValueError("AlternationOpenList needs at least one sub-list")
        self.sublists = list(sublists)
        self.boost = boost
        self.priorities = [0] * len(self.sublists)
        self.boost_count = 0

    def _do_insertion(self, context: EvaluationContext, entry: EdgeOpenListEntry) -> None:
        for sublist in self.sublists:
            sublist.insert(context, entry)

    def remove_min(self) -> EdgeOpenListEntry:
        best: int | None = None
        for i, sublist in enumerate(self.sublists):
            if sublist.is_empty():
                continue
            if best is None or self.priorities[i] < self.priorities[best]:
                best = i
        if best is None:
            raise InvariantViolationError(message="remove_min() on an empty open list")
        self.priorities[best] += 1
        return self.sublists[best].remove_min()

    def is_empty(self) -> bool:
        return all(sublist.is_empty() for sublist in self.sublists)

    def clear(self) -> None:
        for sublist in self.sublists:
            sublist.clear()

    def is_dead_end(self, context: EvaluationContext) -> bool:
        # A reliable verdict from one sub-list is enough; otherwise all must agree.
        if any(sublist.is_reliable_dead_end(context) for sublist in self.sublists):
            return True
        return all(sublist.is_dead_end(context) for sublist in self.sublists)

    def is_reliable_dead_end(self, context: EvaluationContext) -> bool:
        return any(sublist.is_reliable_dead_end(context) for sublist in self.sublists)

    def boost_preferred(self) -> None:
        for i, sublist in enumerate(self.sublists):
            if sublist.only_contains_preferred_entries():
                self.priorities[i] -= self.boost
        self.boost_count += 1
        logger.debug(f"Boosted preferred queues by {self.boost}: priorities={self.priorities}")

    def __len__(self) -> int:
        return sum(len(sublist) for sublist in self.sublists)

    def __repr__(self) -> str:
        return f"AlternationOpenList(sublists={self.sublists!r}, priorities={self.priorities})"


def create_greedy_open_list(
    evaluators: Sequence[Evaluator],
    preferred_evaluators: Sequence[Evaluator] = (),
    boost: int = 0,
) -> EdgeOpenList:
    """Build the open list of a greedy search.

    A single evaluator without preferred evaluators gives a plain best-first
    list. Otherwise each evaluator gets a standard sub-list and, when
    preferred evaluators are configured, a preferred-only sub-list, all
    combined in an alternation list.
    """
    if not evaluators:
        raise ValueError("create_greedy_open_list needs at least one evaluator")
    if len(evaluators) == 1 and not preferred_evaluators:
        return BestFirstOpenList(evaluators[0])

    sublists: list[EdgeOpenList] = []
    for evaluator in evaluators:
        sublists.append(BestFirstOpenList(evaluator, only_preferred=False))
        if preferred_evaluators:
            sublists.append(BestFirstOpenList(evaluator, only_preferred=True))
    return AlternationOpenList(sublists, boost=boost)


__all__ = [
    "EdgeOpenListEntry",
    "EdgeOpenList",
    "BestFirstOpenList",
    "AlternationOpenList",
    "create_greedy_open_list",
]
