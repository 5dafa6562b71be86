"""RandomWalk - stochastic trajectory sampling on a best-first skeleton.

The walk keeps the machinery of a lazy best-first search (edge open list,
search space, progress tracking, preferred-operator boosting) but every
expansion queues a randomly chosen applicable operator instead of all of
them. It stops when it reaches a goal, runs out of edges, or exceeds the
cost bound.
"""

from __future__ import annotations

import logging
import random
from collections.abc import Sequence

from statewalk.config.settings import WalkConfig
from statewalk.core.evaluation import (
    INFINITY,
    EvaluationContext,
    Evaluator,
    EvaluatorRegistry,
    default_evaluators,
)
from statewalk.core.plan import Plan
from statewalk.core.progress import SearchProgress
from statewalk.core.task import NO_OPERATOR, NO_STATE, OperatorCost, OperatorID, StateID, Task
from statewalk.search.engine import SearchEngine
from statewalk.search.open_list import EdgeOpenList, create_greedy_open_list
from statewalk.search.result import SearchStatus, Termination

logger = logging.getLogger(__name__)


class RandomWalk(SearchEngine):
    """Random walk over a task's transition system.

    Example::

        open_list = create_greedy_open_list([GoalCountEvaluator(task)])
        walk = RandomWalk(task, open_list, random_seed=42)
        result = walk.search()

    Args:
        task: The task to walk.
        open_list: Edge open list ordering the queued transitions.
        preferred_evaluators: Evaluators whose preferred operators mark the
            edges they generate as preferred.
        reopen_closed: Accepted for configuration compatibility. A random
            walk never reopens closed nodes.
        randomize_successors: Shuffle the applicable operators before
            selecting.
        preferred_successors_first: Queue preferred edges before the others.
        successors_per_step: Number of distinct operators sampled per
            expansion.
        random_seed: Seed of the private RNG. None draws from OS entropy.
        cost_type: Adjusted cost semantics.
        bound: Real-cost ceiling. None means unbounded.
    """

    name = "random_walk"

    def __init__(
        self,
        task: Task,
        open_list: EdgeOpenList,
        preferred_evaluators: Sequence[Evaluator] = (),
        reopen_closed: bool = False,
        randomize_successors: bool = False,
        preferred_successors_first: bool = False,
        successors_per_step: int = 1,
        random_seed: int | None = None,
        cost_type: OperatorCost = OperatorCost.NORMAL,
        bound: int | None = None,
    ) -> None:
        super().__init__(task, cost_type=cost_type, bound=bound)
        if successors_per_step < 1:
            raise ValueError(f"successors_per_step must be at least 1, got {successors_per_step}")
        self.open_list = open_list
        self.preferred_evaluators = list(preferred_evaluators)
        self.reopen_closed = reopen_closed
        self.randomize_successors = randomize_successors
        self.preferred_successors_first = preferred_successors_first
        self.successors_per_step = successors_per_step
        self.random_seed = random_seed
        self.rng = random.Random(random_seed)
        self.search_progress = SearchProgress()

        self.current_predecessor_id: StateID = NO_STATE
        self.current_operator_id: OperatorID = NO_OPERATOR
        self.current_eval_context: EvaluationContext | None = None
        self._applicable_ops: list[OperatorID] = []

        if reopen_closed:
            logger.info("reopen_closed is set; a random walk never reopens closed nodes")

    @classmethod
    def from_config(
        cls,
        task: Task,
        config: WalkConfig,
        evaluator_registry: EvaluatorRegistry | None = None,
    ) -> RandomWalk:
        """Build a walk from a validated configuration.

        Evaluator names are resolved through ``evaluator_registry``. A name
        used both in ``evals`` and ``preferred`` resolves to one evaluator
        instance, so its results are computed once per context.

        Raises:
            ConfigValidationError: If an evaluator name is not registered.
        """
        registry = evaluator_registry or default_evaluators()
        instances: dict[str, Evaluator] = {}

        def resolve(name: str) -> Evaluator:
            if name not in instances:
                instances[name] = registry.create(name, task)
            return instances[name]

        evaluators = [resolve(name) for name in config.evals]
        preferred = [resolve(name) for name in config.preferred]
        open_list = create_greedy_open_list(evaluators, preferred, boost=config.boost)
        return cls(
            task,
            open_list,
            preferred_evaluators=preferred,
            reopen_closed=config.reopen_closed,
            randomize_successors=config.randomize_successors,
            preferred_successors_first=config.preferred_successors_first,
            successors_per_step=config.successors_per_step,
            random_seed=config.random_seed,
            cost_type=config.cost_type,
            bound=config.bound,
        )

    def _initialize(self) -> None:
        if self.bound == INFINITY:
            logger.info("Conducting random walk")
        else:
            logger.info(f"Conducting random walk, (real) bound = {self.bound}")
        self.current_state = self.state_registry.get_initial_state()
        self.current_predecessor_id = NO_STATE
        self.current_operator_id = NO_OPERATOR
        self.current_g = 0
        self.current_real_g = 0
        self.current_eval_context = EvaluationContext(
            self.current_state, 0, is_preferred=True, statistics=self.statistics
        )

    def _step(self) -> SearchStatus:
        state = self.current_state
        context = self.current_eval_context
        node = self.search_space.get_node(state)
        is_root = self.current_predecessor_id == NO_STATE

        if node.is_new():
            self.statistics.inc_evaluated_states()
            self._applicable_ops = self.successor_generator.generate_applicable_ops(state)
            is_goal = self.task.is_goal(state.values)
            dead_end = self.open_list.is_dead_end(context) or (
                not self._applicable_ops and not is_goal
            )

            if dead_end:
                node.mark_as_dead_end()
                self.statistics.inc_dead_ends()
                logger.debug(f"State {state.id} is a dead end")
            else:
                if is_root:
                    node.open_initial()
                    if self.search_progress.check_progress(context):
                        self.statistics.print_checkpoint_line(self.current_g)
                else:
                    parent = self.search_space.get_node(
                        self.state_registry.lookup_state(self.current_predecessor_id)
                    )
                    operator = self.task.get_operator(self.current_operator_id)
                    node.open(parent, self.current_operator_id, operator, self.get_adjusted_cost(operator))
                node.close()

                if self.check_goal_and_set_plan(state):
                    return SearchStatus.SOLVED
                if self.search_progress.check_progress(context):
                    self.statistics.print_checkpoint_line(self.current_g)
                    self.reward_progress()
                self.generate_successors()
                self.statistics.inc_expanded()

            if is_root:
                self.print_initial_evaluator_values(context)

        return self.fetch_next_state()

    def _preferred_operators(self) -> set[OperatorID]:
        preferred: set[OperatorID] = set()
        for evaluator in self.preferred_evaluators:
            preferred.update(self.current_eval_context.get_preferred_operators(evaluator))
        return preferred

    def generate_successors(self) -> None:
        """Queue edges for randomly selected applicable operators."""
        ops = list(self._applicable_ops)
        if self.randomize_successors:
            self.rng.shuffle(ops)

        if self.successors_per_step == 1:
            chosen = [self.rng.choice(ops)]
        else:
            chosen = self.rng.sample(ops, min(self.successors_per_step, len(ops)))

        preferred = self._preferred_operators()
        if self.preferred_successors_first:
            chosen.sort(key=lambda op_id: op_id not in preferred)

        for op_id in chosen:
            operator = self.task.get_operator(op_id)
            new_g = self.current_g + self.get_adjusted_cost(operator)
            is_preferred = op_id in preferred
            edge_context = EvaluationContext.derive(self.current_eval_context, new_g, is_preferred)
            self.open_list.insert(edge_context, (self.current_state.id, op_id))
            logger.debug(
                f"Chose {operator.name} in state {self.current_state.id}"
                + (" (preferred)" if is_preferred else "")
            )
        self.statistics.inc_generated(len(chosen))

    def fetch_next_state(self) -> SearchStatus:
        """Advance the cursor along the next queued edge."""
        if self.open_list.is_empty():
            logger.info("Random walk finished")
            self.task.dump_state(self.current_state.values)
            self.terminate(Termination.FRONTIER_EXHAUSTED, self.trace_current_path())
            return SearchStatus.SOLVED

        predecessor_id, op_id = self.open_list.remove_min()
        predecessor = self.state_registry.lookup_state(predecessor_id)
        predecessor_node = self.search_space.get_node(predecessor)
        operator = self.task.get_operator(op_id)
        # Raises if the open list handed out an inapplicable edge.
        successor = self.state_registry.get_successor_state(predecessor, operator)

        self.current_predecessor_id = predecessor_id
        self.current_operator_id = op_id
        self.current_state = successor
        self.current_g = predecessor_node.g + self.get_adjusted_cost(operator)
        self.current_real_g = predecessor_node.real_g + operator.cost

        if self.current_real_g >= self.bound:
            logger.info(f"Bound reached: real g = {self.current_real_g} >= {self.bound}")
            self.task.dump_state(self.current_state.values)
            self.terminate(Termination.BOUND_REACHED, self.trace_current_path())
            return SearchStatus.SOLVED

        self.current_eval_context = EvaluationContext(
            self.current_state, self.current_g, is_preferred=True, statistics=self.statistics
        )
        return SearchStatus.IN_PROGRESS

    def trace_current_path(self) -> Plan:
        """Get the operators leading from the initial state to the cursor.

        The path runs through the predecessor the cursor was reached from,
        so it matches current_real_g even when the cursor state had been
        reached before along a different path.
        """
        if self.current_predecessor_id == NO_STATE:
            return []
        predecessor = self.state_registry.lookup_state(self.current_predecessor_id)
        return self.search_space.trace_path(predecessor) + [self.current_operator_id]

    def reward_progress(self) -> None:
        """Bias the open list towards preferred edges."""
        self.open_list.boost_preferred()
        self.statistics.inc_progress_rewards()

    def print_statistics(self) -> None:
        self.statistics.print_detailed_statistics()
        self.search_space.print_statistics()


__all__ = ["RandomWalk"]
