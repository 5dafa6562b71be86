"""statewalk - random walks over finite-domain transition systems.

Load a task, configure a walk and run it.

Quick Start:
    from statewalk import WalkConfig, RandomWalk, load_task

    task = load_task("task.yaml")
    config = WalkConfig(evals=["goalcount"], random_seed=42)
    result = RandomWalk.from_config(task, config).search()

    if result.reached_goal:
        print(result.plan_names)
"""

from __future__ import annotations

from statewalk.config import WalkConfig, load_config
from statewalk.core import (
    INFINITY,
    EvaluationContext,
    EvaluationResult,
    Evaluator,
    EvaluatorRegistry,
    NodeStatus,
    Operator,
    OperatorCost,
    SearchSpace,
    SearchStatistics,
    State,
    StateRegistry,
    SuccessorGenerator,
    Task,
    Variable,
    default_evaluators,
    load_task,
    replay_plan,
    save_plan,
)
from statewalk.errors import (
    ConfigValidationError,
    EngineStateError,
    InvariantViolationError,
    StatewalkError,
    TaskLoadError,
)
from statewalk.search import (
    AlternationOpenList,
    BestFirstOpenList,
    EngineRegistry,
    RandomWalk,
    SearchEngine,
    Searcher,
    SearchResult,
    SearchStatus,
    Termination,
    create_greedy_open_list,
    default_registry,
)

__version__ = "0.1.0"

__all__ = [
    "__version__",
    # Task
    "Task",
    "Variable",
    "Operator",
    "OperatorCost",
    "load_task",
    "State",
    "StateRegistry",
    "SuccessorGenerator",
    # Search
    "RandomWalk",
    "SearchEngine",
    "Searcher",
    "SearchResult",
    "SearchStatus",
    "Termination",
    "SearchSpace",
    "NodeStatus",
    "SearchStatistics",
    "BestFirstOpenList",
    "AlternationOpenList",
    "create_greedy_open_list",
    "EngineRegistry",
    "default_registry",
    # Evaluation
    "INFINITY",
    "Evaluator",
    "EvaluationResult",
    "EvaluationContext",
    "EvaluatorRegistry",
    "default_evaluators",
    # Plans
    "replay_plan",
    "save_plan",
    # Config
    "WalkConfig",
    "load_config",
    # Errors
    "StatewalkError",
    "ConfigValidationError",
    "TaskLoadError",
    "EngineStateError",
    "InvariantViolationError",
]
