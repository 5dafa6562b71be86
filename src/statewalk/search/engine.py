"""SearchEngine - shared lifecycle of step-driven search engines.

An engine is driven either step by step::

    engine.initialize()
    while engine.step() is SearchStatus.IN_PROGRESS:
        pass

or through the search() driver, which adds an optional step cap and
returns a SearchResult.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Protocol, runtime_checkable

from statewalk.core.evaluation import INFINITY, EvaluationContext
from statewalk.core.plan import Plan, plan_cost
from statewalk.core.search_space import SearchSpace
from statewalk.core.state import State, StateRegistry
from statewalk.core.statistics import SearchStatistics
from statewalk.core.successor import SuccessorGenerator
from statewalk.core.task import Operator, OperatorCost, Task, get_adjusted_action_cost, operator_names
from statewalk.errors import ConfigValidationError, EngineStateError, ErrorCode, ErrorContext
from statewalk.search.result import SearchResult, SearchStatus, Termination

logger = logging.getLogger(__name__)


@runtime_checkable
class Searcher(Protocol):
    """What a driver needs from an engine."""

    def initialize(self) -> None: ...

    def step(self) -> SearchStatus: ...

    def print_statistics(self) -> None: ...


class SearchEngine(ABC):
    """Base class for search engines.

    Owns the task-level collaborators (state registry, successor generator,
    search space, statistics) and the status lifecycle. Subclasses implement
    _initialize() and _step(); step() enforces that it is only called while
    the engine is IN_PROGRESS.

    The cursor (current_state, current_g, current_real_g) is maintained by
    subclasses and reported in the SearchResult.
    """

    name: str = "search"

    def __init__(
        self,
        task: Task,
        cost_type: OperatorCost = OperatorCost.NORMAL,
        bound: int | None = None,
    ) -> None:
        if bound is not None and bound < 0:
            raise ConfigValidationError(
                message=f"Bound must be non-negative, got {bound}",
                field="bound",
                value=bound,
                expected="a non-negative integer or None",
            )
        self.task = task
        self.cost_type = OperatorCost(cost_type)
        self.bound: float = INFINITY if bound is None else bound
        self.status = SearchStatus.INITIALIZING
        self.termination: Termination | None = None
        self.plan: Plan | None = None
        self.step_count = 0

        self.statistics = SearchStatistics()
        self.state_registry = StateRegistry(task)
        self.successor_generator = SuccessorGenerator(task)
        self.search_space = SearchSpace()

        self.current_state: State | None = None
        self.current_g = 0
        self.current_real_g = 0

        self._result: SearchResult | None = None

    def get_adjusted_cost(self, operator: Operator) -> int:
        return get_adjusted_action_cost(operator, self.cost_type, self.task.is_unit_cost)

    def initialize(self) -> None:
        """Prepare the first step.

        Raises:
            EngineStateError: If the engine was already initialized.
        """
        if self.status is not SearchStatus.INITIALIZING:
            raise EngineStateError(
                message=f"{self.name} is already initialized (status: {self.status.value})",
                context=ErrorContext(engine=self.name),
            )
        self._result = SearchResult(engine=self.name)
        self._initialize()
        self.status = SearchStatus.IN_PROGRESS

    def step(self) -> SearchStatus:
        """Advance the search by one step.

        Raises:
            EngineStateError: Before initialize() or after a terminal status.
        """
        if self.status is SearchStatus.INITIALIZING:
            raise EngineStateError(
                message=f"step() called before initialize() on {self.name}",
                error_code=ErrorCode.ENGINE_NOT_INITIALIZED,
                context=ErrorContext(engine=self.name),
            )
        if self.status.is_terminal:
            raise EngineStateError(
                message=f"step() called on {self.name} after it finished ({self.status.value})",
                context=ErrorContext(engine=self.name),
            )
        self.step_count += 1
        self.status = self._step()
        return self.status

    @abstractmethod
    def _initialize(self) -> None: ...

    @abstractmethod
    def _step(self) -> SearchStatus: ...

    @abstractmethod
    def print_statistics(self) -> None: ...

    def terminate(self, termination: Termination, plan: Plan) -> SearchStatus:
        """Record how the run ended and the plan to the final state."""
        self.termination = termination
        self.plan = list(plan)
        logger.info(f"Search terminated: {termination.value} (plan length {len(plan)})")
        return SearchStatus.SOLVED

    def check_goal_and_set_plan(self, state: State) -> bool:
        if not self.task.is_goal(state.values):
            return False
        logger.info("Solution found!")
        self.terminate(Termination.GOAL_REACHED, self.search_space.trace_path(state))
        return True

    def print_initial_evaluator_values(self, context: EvaluationContext) -> None:
        for evaluator, result in context.iter_results():
            if evaluator.used_for_reporting_minima:
                logger.info(f"Initial heuristic value for {evaluator.name}: {result.value}")

    def search(self, max_steps: int | None = None) -> SearchResult:
        """Run the engine until it terminates or ``max_steps`` steps were taken.

        Hitting the step cap is the only way a run ends FAILED.
        """
        self.initialize()
        while not self.status.is_terminal:
            if max_steps is not None and self.step_count >= max_steps:
                logger.info(f"Step limit of {max_steps} reached")
                self.status = SearchStatus.FAILED
                self.termination = Termination.STEP_LIMIT
                break
            self.step()
        return self.get_result()

    def get_result(self) -> SearchResult:
        """Snapshot the current outcome as a SearchResult."""
        if self._result is None:
            raise EngineStateError(
                message=f"{self.name} has not been initialized",
                error_code=ErrorCode.ENGINE_NOT_INITIALIZED,
                context=ErrorContext(engine=self.name),
            )
        result = self._result
        result.status = self.status
        result.termination = self.termination
        result.plan = list(self.plan or [])
        result.plan_names = operator_names(self.task, result.plan)
        result.plan_cost = plan_cost(self.task, result.plan)
        result.final_state = (
            self.task.describe(self.current_state.values) if self.current_state is not None else []
        )
        result.final_g = self.current_g
        result.final_real_g = self.current_real_g
        result.steps = self.step_count
        result.statistics = self.statistics.to_dict()
        if self.status.is_terminal and result.finished_at is None:
            result.finish()
        return result


__all__ = ["Searcher", "SearchEngine"]
