"""SearchProgress - tracks the best evaluator values seen so far."""

from __future__ import annotations

import logging

from statewalk.core.evaluation import EvaluationContext, Evaluator

logger = logging.getLogger(__name__)


class SearchProgress:
    """Remembers the lowest value of each reporting or boosting evaluator.

    check_progress() is called with a freshly evaluated context. Only
    results already cached in the context are looked at, so it never
    triggers additional evaluations.
    """

    def __init__(self) -> None:
        self._best: dict[Evaluator, float] = {}

    def _process(self, evaluator: Evaluator, value: float) -> bool:
        best = self._best.get(evaluator)
        if best is not None and value >= best:
            return False
        self._best[evaluator] = value
        return True

    def check_progress(self, context: EvaluationContext) -> bool:
        """Record new best values in ``context``.

        Returns:
            True if an evaluator used for boosting reached a new best value.
        """
        boost = False
        for evaluator, result in context.iter_results():
            if not (evaluator.used_for_reporting_minima or evaluator.used_for_boosting):
                continue
            if self._process(evaluator, result.value):
                if evaluator.used_for_reporting_minima:
                    logger.info(f"New best heuristic value for {evaluator.name}: {result.value}")
                if evaluator.used_for_boosting:
                    boost = True
        return boost

    def best_value(self, evaluator: Evaluator) -> float | None:
        return self._best.get(evaluator)

    def best_values(self) -> dict[str, float]:
        return {evaluator.name: value for evaluator, value in self._best.items()}


__all__ = ["SearchProgress"]
