"""Search statistics counters."""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass

logger = logging.getLogger(__name__)


@dataclass
class SearchStatistics:
    """Counters maintained by a search engine during a run.

    Attributes:
        expanded: States whose successors were generated.
        evaluated: States looked at for the first time.
        evaluations: Evaluator computations (cache misses).
        generated: Edges inserted into the open list.
        dead_ends: States marked as dead ends.
        reopened: Closed states reopened (always 0 for a random walk).
        progress_rewards: Times progress was rewarded with a boost.
    """

    expanded: int = 0
    evaluated: int = 0
    evaluations: int = 0
    generated: int = 0
    dead_ends: int = 0
    reopened: int = 0
    progress_rewards: int = 0

    def inc_expanded(self, count: int = 1) -> None:
        self.expanded += count

    def inc_evaluated_states(self, count: int = 1) -> None:
        self.evaluated += count

    def inc_evaluations(self, count: int = 1) -> None:
        self.evaluations += count

    def inc_generated(self, count: int = 1) -> None:
        self.generated += count

    def inc_dead_ends(self, count: int = 1) -> None:
        self.dead_ends += count

    def inc_progress_rewards(self, count: int = 1) -> None:
        self.progress_rewards += count

    def print_checkpoint_line(self, g: int) -> None:
        logger.info(
            f"g={g}, {self.evaluated} evaluated, {self.expanded} expanded"
        )

    def print_detailed_statistics(self) -> None:
        logger.info(f"Expanded {self.expanded} state(s).")
        logger.info(f"Reopened {self.reopened} state(s).")
        logger.info(f"Evaluated {self.evaluated} state(s).")
        logger.info(f"Evaluations: {self.evaluations}")
        logger.info(f"Generated {self.generated} state(s).")
        logger.info(f"Dead ends: {self.dead_ends} state(s).")
        logger.info(f"Progress rewards: {self.progress_rewards}")

    def to_dict(self) -> dict[str, int]:
        return asdict(self)


__all__ = ["SearchStatistics"]
