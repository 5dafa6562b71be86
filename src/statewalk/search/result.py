"""SearchResult - Output of a search run."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any


class SearchStatus(Enum):
    """Lifecycle of a search engine.

    INITIALIZING -> IN_PROGRESS -> SOLVED | FAILED
    """

    INITIALIZING = "initializing"
    IN_PROGRESS = "in_progress"
    SOLVED = "solved"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (SearchStatus.SOLVED, SearchStatus.FAILED)


class Termination(Enum):
    """Why a run stopped.

    A random walk reports SOLVED for every natural end of the walk; the
    termination tells a reached goal apart from an exhausted frontier or a
    cost bound.
    """

    GOAL_REACHED = "goal_reached"
    FRONTIER_EXHAUSTED = "frontier_exhausted"
    BOUND_REACHED = "bound_reached"
    STEP_LIMIT = "step_limit"


@dataclass
class SearchResult:
    """The complete output of a search run.

    Example::

        result = engine.search(max_steps=1000)

        if result.reached_goal:
            print(f"Plan: {result.plan_names} (cost {result.plan_cost})")
        else:
            print(f"Walk ended ({result.termination.value}) after {result.steps} steps")

    Attributes:
        engine: Name of the engine that produced the result.
        status: Final status (SOLVED or FAILED).
        termination: Why the run stopped.
        plan: Operator ids from the initial state to the final state.
        plan_names: Operator names matching ``plan``.
        plan_cost: Sum of the real costs of ``plan``.
        final_state: Facts of the state the engine stopped on.
        final_g: Adjusted cost of the final state.
        final_real_g: Real cost of the final state.
        steps: Number of step() calls.
        statistics: Counter values at the end of the run.
        started_at: When the run started.
        finished_at: When the run finished.
        duration_ms: Total run time in milliseconds.
    """

    engine: str
    status: SearchStatus = SearchStatus.INITIALIZING
    termination: Termination | None = None
    plan: list[int] = field(default_factory=list)
    plan_names: list[str] = field(default_factory=list)
    plan_cost: int = 0
    final_state: list[str] = field(default_factory=list)
    final_g: int = 0
    final_real_g: int = 0
    steps: int = 0
    statistics: dict[str, int] = field(default_factory=dict)
    started_at: datetime = field(default_factory=datetime.now)
    finished_at: datetime | None = None
    duration_ms: float = 0.0

    @property
    def reached_goal(self) -> bool:
        """True only if the final state was verified to be a goal state."""
        return self.status is SearchStatus.SOLVED and self.termination is Termination.GOAL_REACHED

    @property
    def plan_length(self) -> int:
        return len(self.plan)

    def finish(self) -> None:
        """Mark the run as finished and compute duration."""
        self.finished_at = datetime.now()
        self.duration_ms = (self.finished_at - self.started_at).total_seconds() * 1000

    def summary(self) -> dict[str, Any]:
        """Get a summary of the run as a dict."""
        return {
            "engine": self.engine,
            "status": self.status.value,
            "termination": self.termination.value if self.termination else None,
            "reached_goal": self.reached_goal,
            "plan_length": self.plan_length,
            "plan_cost": self.plan_cost,
            "steps": self.steps,
            "expanded": self.statistics.get("expanded", 0),
            "evaluated": self.statistics.get("evaluated", 0),
            "duration_ms": round(self.duration_ms, 2),
        }

    def to_dict(self) -> dict[str, Any]:
        data = self.summary()
        data.update(
            {
                "plan": list(self.plan),
                "plan_names": list(self.plan_names),
                "final_state": list(self.final_state),
                "final_g": self.final_g,
                "final_real_g": self.final_real_g,
                "statistics": dict(self.statistics),
                "started_at": self.started_at.isoformat(),
                "finished_at": self.finished_at.isoformat() if self.finished_at else None,
            }
        )
        return data


__all__ = ["SearchStatus", "Termination", "SearchResult"]
