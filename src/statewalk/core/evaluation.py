"""Evaluators and the evaluation context they are computed in.

An Evaluator scores a state (lower is better). Results are computed lazily
through an EvaluationContext, which caches one result per evaluator so an
open list with several sub-queues never evaluates the same state twice.

Evaluators are resolved by name through an EvaluatorRegistry. The default
registry knows:
- blind: 0 in goal states, the cheapest operator cost elsewhere
- goalcount: number of unsatisfied goal facts, with preferred operators
- g: the accumulated cost of the context
- const: a constant value
"""

from __future__ import annotations

import logging
import math
from abc import ABC, abstractmethod
from collections.abc import Callable, Iterator
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from statewalk.core.state import State
from statewalk.core.task import OperatorID, Task
from statewalk.errors import ConfigValidationError

if TYPE_CHECKING:
    from statewalk.core.statistics import SearchStatistics

logger = logging.getLogger(__name__)

INFINITY = math.inf


@dataclass(frozen=True)
class EvaluationResult:
    """Value of one evaluator on one context.

    ``value`` is INFINITY when the evaluator considers the state a dead end.
    """

    value: float
    preferred_operators: tuple[OperatorID, ...] = ()

    @property
    def is_infinite(self) -> bool:
        return self.value == INFINITY


class Evaluator(ABC):
    """Base class for state evaluators.

    Subclasses implement compute(). The flags tell the search which role the
    evaluator plays:
    - used_for_reporting_minima: new best values are logged
    - used_for_boosting: a new best value counts as progress
    - depends_on_g: the value changes with the context's g, so results are
      not shared between contexts of the same state
    """

    name: str = "evaluator"
    used_for_reporting_minima: bool = False
    used_for_boosting: bool = False
    counts_evaluations: bool = False
    depends_on_g: bool = False

    def dead_ends_are_reliable(self) -> bool:
        return True

    @abstractmethod
    def compute(self, context: EvaluationContext) -> EvaluationResult:
        """Evaluate the state of ``context``."""
        ...

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.name!r})"


class Heuristic(Evaluator):
    """An evaluator estimating the remaining cost to a goal."""

    used_for_reporting_minima = True
    used_for_boosting = True
    counts_evaluations = True

    def __init__(self, task: Task, name: str | None = None) -> None:
        self.task = task
        if name is not None:
            self.name = name


class BlindEvaluator(Heuristic):
    name = "blind"

    def __init__(self, task: Task, name: str | None = None) -> None:
        super().__init__(task, name)
        self._min_cost = min((op.cost for op in task.operators), default=0)

    def compute(self, context: EvaluationContext) -> EvaluationResult:
        if self.task.is_goal(context.state.values):
            return EvaluationResult(0)
        return EvaluationResult(self._min_cost)


class GoalCountEvaluator(Heuristic):
    """Counts unsatisfied goal facts.

    Preferred operators are the applicable operators that achieve at least
    one unsatisfied goal fact.
    """

    name = "goalcount"

    def compute(self, context: EvaluationContext) -> EvaluationResult:
        values = context.state.values
        unsatisfied = {(var, val) for var, val in self.task.goal if values[var] != val}
        preferred = tuple(
            op_id
            for op_id, op in enumerate(self.task.operators)
            if op.is_applicable(values) and any(eff in unsatisfied for eff in op.effects)
        )
        return EvaluationResult(len(unsatisfied), preferred)


class GEvaluator(Evaluator):
    name = "g"
    depends_on_g = True

    def __init__(self, task: Task | None = None, name: str | None = None) -> None:
        if name is not None:
            self.name = name

    def compute(self, context: EvaluationContext) -> EvaluationResult:
        return EvaluationResult(context.g)


class ConstEvaluator(Evaluator):
    name = "const"

    def __init__(self, task: Task | None = None, value: int = 1, name: str | None = None) -> None:
        self.value = value
        if name is not None:
            self.name = name

    def compute(self, context: EvaluationContext) -> EvaluationResult:
        return EvaluationResult(self.value)


class EvaluationContext:
    """A state, its g value and a lazy cache of evaluator results.

    Example::

        ctx = EvaluationContext(state, g=0, is_preferred=True, statistics=stats)
        h = ctx.get_evaluator_value(goalcount)
        edge_ctx = EvaluationContext.derive(ctx, g=1, is_preferred=False)
    """

    def __init__(
        self,
        state: State,
        g: int,
        is_preferred: bool = False,
        statistics: SearchStatistics | None = None,
        cache: dict[Evaluator, EvaluationResult] | None = None,
    ) -> None:
        self.state = state
        self.g = g
        self.is_preferred = is_preferred
        self.statistics = statistics
        self._cache: dict[Evaluator, EvaluationResult] = cache if cache is not None else {}

    @classmethod
    def derive(
        cls,
        parent: EvaluationContext,
        g: int,
        is_preferred: bool,
        statistics: SearchStatistics | None = None,
    ) -> EvaluationContext:
        """Create a context for the same state with a new g value.

        Results of evaluators that do not depend on g are carried over.
        """
        cache = {ev: res for ev, res in parent._cache.items() if not ev.depends_on_g}
        return cls(parent.state, g, is_preferred, statistics, cache)

    def get_result(self, evaluator: Evaluator) -> EvaluationResult:
        result = self._cache.get(evaluator)
        if result is None:
            result = evaluator.compute(self)
            self._cache[evaluator] = result
            if self.statistics is not None and evaluator.counts_evaluations:
                self.statistics.inc_evaluations()
        return result

    def get_evaluator_value(self, evaluator: Evaluator) -> float:
        return self.get_result(evaluator).value

    def is_evaluator_value_infinite(self, evaluator: Evaluator) -> bool:
        return self.get_result(evaluator).is_infinite

    def get_preferred_operators(self, evaluator: Evaluator) -> tuple[OperatorID, ...]:
        return self.get_result(evaluator).preferred_operators

    def iter_results(self) -> Iterator[tuple[Evaluator, EvaluationResult]]:
        """Iterate over the results computed so far."""
        yield from list(self._cache.items())

    def __contains__(self, evaluator: object) -> bool:
        return evaluator in self._cache


EvaluatorFactory = Callable[[Task], Evaluator]


@dataclass
class EvaluatorRegistry:
    """Maps evaluator names to factories.

    Passed explicitly to engines at startup; nothing registers itself on
    import.
    """

    _factories: dict[str, EvaluatorFactory] = field(default_factory=dict)
    _descriptions: dict[str, str] = field(default_factory=dict)

    def register(self, name: str, factory: EvaluatorFactory, description: str = "") -> None:
        if name in self._factories:
            logger.warning(f"Replacing evaluator factory '{name}'")
        self._factories[name] = factory
        self._descriptions[name] = description

    def create(self, name: str, task: Task) -> Evaluator:
        """Build the evaluator registered as ``name`` for ``task``.

        Raises:
            ConfigValidationError: If no evaluator is registered as ``name``.
        """
        factory = self._factories.get(name)
        if factory is None:
            raise ConfigValidationError(
                message=f"Unknown evaluator '{name}'",
                field="evals",
                value=name,
                expected=f"one of {self.names()}",
            )
        return factory(task)

    def names(self) -> list[str]:
        return sorted(self._factories)

    def describe(self, name: str) -> str:
        return self._descriptions.get(name, "")

    def __contains__(self, name: object) -> bool:
        return name in self._factories


def default_evaluators() -> EvaluatorRegistry:
    registry = EvaluatorRegistry()
    registry.register("blind", BlindEvaluator, "0 in goal states, cheapest operator cost elsewhere")
    registry.register("goalcount", GoalCountEvaluator, "number of unsatisfied goal facts")
    registry.register("g", GEvaluator, "accumulated cost")
    registry.register("const", ConstEvaluator, "constant value 1")
    return registry


__all__ = [
    "INFINITY",
    "EvaluationResult",
    "Evaluator",
    "Heuristic",
    "BlindEvaluator",
    "GoalCountEvaluator",
    "GEvaluator",
    "ConstEvaluator",
    "EvaluationContext",
    "EvaluatorRegistry",
    "EvaluatorFactory",
    "default_evaluators",
]
