"""Core data model: tasks, states, search nodes and evaluation."""

from statewalk.core.evaluation import (
    INFINITY,
    BlindEvaluator,
    ConstEvaluator,
    EvaluationContext,
    EvaluationResult,
    Evaluator,
    EvaluatorRegistry,
    GEvaluator,
    GoalCountEvaluator,
    Heuristic,
    default_evaluators,
)
from statewalk.core.plan import Plan, format_plan, plan_cost, replay_plan, save_plan
from statewalk.core.progress import SearchProgress
from statewalk.core.search_space import NodeStatus, SearchNode, SearchSpace
from statewalk.core.state import State, StateRegistry
from statewalk.core.statistics import SearchStatistics
from statewalk.core.successor import SuccessorGenerator
from statewalk.core.task import (
    NO_OPERATOR,
    NO_STATE,
    Operator,
    OperatorCost,
    OperatorID,
    StateID,
    Task,
    Variable,
    get_adjusted_action_cost,
    load_task,
    operator_names,
)

__all__ = [
    # Task
    "Task",
    "Variable",
    "Operator",
    "OperatorCost",
    "get_adjusted_action_cost",
    "StateID",
    "OperatorID",
    "NO_STATE",
    "NO_OPERATOR",
    "load_task",
    "operator_names",
    # States
    "State",
    "StateRegistry",
    "SuccessorGenerator",
    # Search space
    "NodeStatus",
    "SearchNode",
    "SearchSpace",
    # Evaluation
    "INFINITY",
    "Evaluator",
    "Heuristic",
    "EvaluationResult",
    "EvaluationContext",
    "BlindEvaluator",
    "GoalCountEvaluator",
    "GEvaluator",
    "ConstEvaluator",
    "EvaluatorRegistry",
    "default_evaluators",
    "SearchProgress",
    "SearchStatistics",
    # Plans
    "Plan",
    "plan_cost",
    "replay_plan",
    "format_plan",
    "save_plan",
]
