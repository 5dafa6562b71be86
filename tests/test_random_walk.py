"""Tests for the random walk engine."""

import logging

import pytest
from helpers import AxisDistance, ChainDistance, DeadEndAt, two_axis_task_data

from statewalk.config import WalkConfig
from statewalk.core.evaluation import GEvaluator, GoalCountEvaluator, default_evaluators
from statewalk.core.plan import plan_cost, replay_plan
from statewalk.core.search_space import NodeStatus
from statewalk.core.task import OperatorCost, Task, get_adjusted_action_cost
from statewalk.errors import (
    ConfigValidationError,
    EngineStateError,
    ErrorCode,
    InvariantViolationError,
)
from statewalk.search import (
    AlternationOpenList,
    BestFirstOpenList,
    RandomWalk,
    SearchEngine,
    Searcher,
    SearchStatus,
    Termination,
    create_greedy_open_list,
)
from statewalk.search.open_list import EdgeOpenList


def make_walk(task, seed=0, **kwargs):
    open_list = create_greedy_open_list([GoalCountEvaluator(task)])
    return RandomWalk(task, open_list, random_seed=seed, **kwargs)


def trajectory(walk):
    """Run ``walk`` step by step and record the cursor after every step."""
    walk.initialize()
    states = [walk.current_state.id]
    while walk.step() is SearchStatus.IN_PROGRESS:
        states.append(walk.current_state.id)
    return states


class TestChainScenario:
    def test_reaches_goal(self, chain_task):
        walk = make_walk(chain_task, bound=10)
        walk.initialize()

        assert walk.step() is SearchStatus.IN_PROGRESS
        assert walk.current_state.values == (1,)
        assert (walk.current_g, walk.current_real_g) == (1, 1)

        assert walk.step() is SearchStatus.IN_PROGRESS
        assert walk.current_state.values == (2,)
        assert (walk.current_g, walk.current_real_g) == (2, 2)

        assert walk.step() is SearchStatus.SOLVED
        assert walk.termination is Termination.GOAL_REACHED
        assert walk.plan == [0, 1]

    def test_result(self, chain_task):
        result = make_walk(chain_task).search()
        assert result.status is SearchStatus.SOLVED
        assert result.reached_goal
        assert result.plan_names == ["op1", "op2"]
        assert result.plan_cost == 2
        assert result.final_state == ["at=C"]
        assert result.steps == 3
        assert result.statistics["expanded"] == 2
        assert result.statistics["evaluated"] == 3
        assert result.statistics["generated"] == 2
        assert result.finished_at is not None

    def test_bound_stops_before_goal(self, chain_task):
        result = make_walk(chain_task, bound=1).search()
        assert result.status is SearchStatus.SOLVED
        assert result.termination is Termination.BOUND_REACHED
        assert not result.reached_goal
        assert result.plan == [0]
        assert result.final_real_g == 1
        assert result.final_state == ["at=B"]

    def test_bound_zero_stops_at_first_edge(self, chain_task):
        result = make_walk(chain_task, bound=0).search()
        assert result.termination is Termination.BOUND_REACHED
        assert result.plan == [0]

    def test_initial_goal(self):
        task = Task.from_dict(
            {"variables": {"at": ["A"]}, "initial": {"at": "A"}, "goal": {"at": "A"}}
        )
        result = make_walk(task).search()
        assert result.reached_goal
        assert result.plan == []
        assert result.steps == 1


class TestDeadEnds:
    def test_state_without_operators(self, stuck_task):
        walk = make_walk(stuck_task)
        result = walk.search()
        assert result.status is SearchStatus.SOLVED
        assert result.termination is Termination.FRONTIER_EXHAUSTED
        assert not result.reached_goal
        assert result.plan == [0]
        assert result.statistics["dead_ends"] == 1
        b = walk.state_registry.lookup_state(1)
        assert walk.search_space.get_node(b).is_dead_end()

    def test_root_without_operators(self):
        task = Task.from_dict(
            {"variables": {"at": ["A", "B"]}, "initial": {"at": "A"}, "goal": {"at": "B"}}
        )
        result = make_walk(task).search()
        assert result.termination is Termination.FRONTIER_EXHAUSTED
        assert result.plan == []
        assert result.statistics["dead_ends"] == 1
        assert result.statistics["expanded"] == 0

    def test_evaluator_dead_end(self, chain_task):
        # B (value 1) is reported as a dead end
        open_list = create_greedy_open_list([DeadEndAt(chain_task, value=1)])
        walk = RandomWalk(chain_task, open_list, random_seed=0)
        result = walk.search()
        assert result.termination is Termination.FRONTIER_EXHAUSTED
        assert result.plan == [0]
        assert result.statistics["dead_ends"] == 1

    def test_revisit_ends_walk(self, cycle_task):
        walk = make_walk(cycle_task)
        result = walk.search()
        assert result.termination is Termination.FRONTIER_EXHAUSTED
        assert walk.current_state.values == (0,)
        # the walk went forth and back
        assert result.plan == [0, 1]
        assert result.final_real_g == 2
        assert result.statistics["expanded"] == 2


class TestInvariants:
    @pytest.mark.parametrize("seed", range(10))
    def test_deterministic_for_fixed_seed(self, grid_task, seed):
        first = make_walk(grid_task, seed=seed)
        second = make_walk(grid_task, seed=seed)
        assert trajectory(first) == trajectory(second)
        assert first.plan == second.plan
        assert first.termination == second.termination

    @pytest.mark.parametrize("seed", range(10))
    def test_plan_replays_to_final_state(self, grid_task, seed):
        walk = make_walk(grid_task, seed=seed, randomize_successors=True)
        walk.search()
        assert replay_plan(grid_task, walk.plan) == walk.current_state.values

    @pytest.mark.parametrize("cost_type", list(OperatorCost))
    @pytest.mark.parametrize("seed", range(5))
    def test_g_values_follow_parent_chain(self, weighted_task, cost_type, seed):
        walk = make_walk(weighted_task, seed=seed, cost_type=cost_type)
        walk.search()
        for node in walk.search_space.iter_nodes():
            if node.status is not NodeStatus.CLOSED:
                continue
            path = walk.search_space.trace_path(node.state)
            operators = [weighted_task.get_operator(op_id) for op_id in path]
            assert node.real_g == sum(op.cost for op in operators)
            assert node.g == sum(
                get_adjusted_action_cost(op, cost_type, weighted_task.is_unit_cost)
                for op in operators
            )

    @pytest.mark.parametrize("seed", range(10))
    def test_no_state_expanded_twice(self, grid_task, seed):
        walk = make_walk(grid_task, seed=seed)
        result = walk.search()
        closed = walk.search_space.count_by_status()[NodeStatus.CLOSED]
        assert result.statistics["expanded"] == closed

    @pytest.mark.parametrize("bound", [1, 3, 4, 6])
    @pytest.mark.parametrize("seed", range(5))
    def test_bound_is_first_crossing(self, weighted_task, bound, seed):
        walk = make_walk(weighted_task, seed=seed, bound=bound)
        result = walk.search()
        if result.termination is not Termination.BOUND_REACHED:
            return
        assert result.final_real_g >= bound
        assert plan_cost(weighted_task, result.plan) == result.final_real_g
        assert plan_cost(weighted_task, result.plan[:-1]) < bound

    def test_inapplicable_edge_is_a_defect(self, chain_task):
        class BrokenOpenList(BestFirstOpenList):
            def remove_min(self):
                super().remove_min()
                return (0, 1)  # op2 is not applicable in A

        walk = RandomWalk(chain_task, BrokenOpenList(GoalCountEvaluator(chain_task)), random_seed=0)
        walk.initialize()
        with pytest.raises(InvariantViolationError) as exc_info:
            walk.step()
        assert exc_info.value.error_code == ErrorCode.INVARIANT_VIOLATED


class TestLifecycle:
    def test_step_before_initialize(self, chain_task):
        walk = make_walk(chain_task)
        with pytest.raises(EngineStateError) as exc_info:
            walk.step()
        assert exc_info.value.error_code == ErrorCode.ENGINE_NOT_INITIALIZED

    def test_step_after_termination(self, chain_task):
        walk = make_walk(chain_task)
        walk.search()
        with pytest.raises(EngineStateError) as exc_info:
            walk.step()
        assert exc_info.value.error_code == ErrorCode.ENGINE_TERMINATED

    def test_initialize_twice(self, chain_task):
        walk = make_walk(chain_task)
        walk.initialize()
        with pytest.raises(EngineStateError):
            walk.initialize()

    def test_step_limit(self, long_chain_task):
        result = make_walk(long_chain_task).search(max_steps=2)
        assert result.status is SearchStatus.FAILED
        assert result.termination is Termination.STEP_LIMIT
        assert not result.reached_goal
        assert result.steps == 2

    def test_negative_bound(self, chain_task):
        with pytest.raises(ConfigValidationError):
            make_walk(chain_task, bound=-1)

    def test_successors_per_step_must_be_positive(self, chain_task):
        with pytest.raises(ValueError):
            make_walk(chain_task, successors_per_step=0)

    def test_satisfies_searcher_protocol(self, chain_task):
        walk = make_walk(chain_task)
        assert isinstance(walk, Searcher)
        assert isinstance(walk, SearchEngine)

    def test_logs(self, chain_task, caplog):
        walk = make_walk(chain_task, bound=1)
        with caplog.at_level(logging.INFO, logger="statewalk"):
            walk.search()
            walk.print_statistics()
        assert "Conducting random walk, (real) bound = 1" in caplog.text
        assert "Initial heuristic value for goalcount: 1" in caplog.text
        assert "Fact at=B" in caplog.text
        assert "Expanded 1 state(s)." in caplog.text


class TestSuccessorPolicy:
    def test_one_edge_per_expansion(self, grid_task):
        walk = make_walk(grid_task, seed=3)
        result = walk.search()
        assert result.statistics["generated"] == result.statistics["expanded"]

    def test_several_successors_per_step(self, grid_task):
        walk = make_walk(grid_task, seed=1, successors_per_step=2)
        walk.initialize()
        walk.step()
        # both operators applicable in the corner were queued, one was popped
        assert walk.statistics.generated == 2
        assert len(walk.open_list) == 1

    def test_preferred_successors_first(self, weighted_task):
        goalcount = GoalCountEvaluator(weighted_task)
        open_list = AlternationOpenList(
            [BestFirstOpenList(goalcount), BestFirstOpenList(goalcount, only_preferred=True)]
        )
        walk = RandomWalk(
            weighted_task,
            open_list,
            preferred_evaluators=[goalcount],
            successors_per_step=2,
            preferred_successors_first=True,
            random_seed=0,
        )
        walk.initialize()
        walk.step()
        # switch-on is the only preferred operator in the initial state
        assert walk.statistics.generated == 2
        assert len(open_list.sublists[1]) == 1
        assert walk.current_operator_id == 2


class TestProgressRewards:
    def test_rewards_match_boosts(self, long_chain_task):
        chain = ChainDistance(long_chain_task)
        open_list = create_greedy_open_list([chain], [chain], boost=1000)
        walk = RandomWalk(long_chain_task, open_list, preferred_evaluators=[chain], random_seed=0)
        result = walk.search()
        assert result.reached_goal
        # B (h=2) and C (h=1) improve on the root's h=3; D is the goal
        assert result.statistics["progress_rewards"] == 2
        assert open_list.boost_count == 2

    def test_no_rewards_without_boosting_evaluator(self, long_chain_task):
        walk = RandomWalk(
            long_chain_task, create_greedy_open_list([GEvaluator()]), random_seed=0
        )
        result = walk.search()
        assert result.reached_goal
        assert result.statistics["progress_rewards"] == 0

    @staticmethod
    def _count_off_axis_moves(task, boost, seed):
        axis = AxisDistance(task)
        open_list = create_greedy_open_list([axis], [axis], boost=boost)
        walk = RandomWalk(
            task, open_list, preferred_evaluators=[axis], successors_per_step=2, random_seed=seed
        )
        walk.initialize()
        moves = 0
        while walk.step() is SearchStatus.IN_PROGRESS:
            if task.get_operator(walk.current_operator_id).name.startswith("inc-y"):
                moves += 1
        assert walk.termination is Termination.GOAL_REACHED
        assert walk.statistics.progress_rewards == open_list.boost_count
        return moves

    def test_boost_shifts_selection_to_preferred_edges(self):
        task = Task.from_dict(two_axis_task_data(), name="two-axis")
        boosted = sum(self._count_off_axis_moves(task, 1000, seed) for seed in range(20))
        unboosted = sum(self._count_off_axis_moves(task, 0, seed) for seed in range(20))
        assert boosted < unboosted


class TestFromConfig:
    def test_builds_open_list(self, chain_task):
        config = WalkConfig(evals=["goalcount"], preferred=["goalcount"], boost=5, random_seed=1)
        walk = RandomWalk.from_config(chain_task, config)
        assert isinstance(walk.open_list, AlternationOpenList)
        assert walk.open_list.boost == 5
        # one evaluator instance shared between evals and preferred
        assert walk.open_list.sublists[0].evaluator is walk.preferred_evaluators[0]

    def test_single_evaluator_config(self, chain_task):
        walk = RandomWalk.from_config(chain_task, WalkConfig(evals=["blind"], bound=3))
        assert isinstance(walk.open_list, BestFirstOpenList)
        assert walk.bound == 3

    def test_unknown_evaluator(self, chain_task):
        with pytest.raises(ConfigValidationError):
            RandomWalk.from_config(chain_task, WalkConfig(evals=["ff"]))

    def test_custom_registry(self, long_chain_task):
        registry = default_evaluators()
        registry.register("chain", ChainDistance)
        walk = RandomWalk.from_config(long_chain_task, WalkConfig(evals=["chain"]), registry)
        assert walk.search().reached_goal

    def test_same_seed_same_result(self, grid_task):
        config = WalkConfig(evals=["goalcount"], preferred=["goalcount"], boost=2, random_seed=11)
        first = RandomWalk.from_config(grid_task, config).search()
        second = RandomWalk.from_config(grid_task, config).search()
        assert first.plan == second.plan
        assert first.statistics == second.statistics


class TestOpenListContract:
    def test_custom_open_list(self, chain_task):
        class FifoOpenList(EdgeOpenList):
            def __init__(self):
                super().__init__()
                self.entries = []

            def _do_insertion(self, context, entry):
                self.entries.append(entry)

            def remove_min(self):
                return self.entries.pop(0)

            def is_empty(self):
                return not self.entries

            def clear(self):
                self.entries.clear()

            def is_dead_end(self, context):
                return False

            def is_reliable_dead_end(self, context):
                return False

            def __len__(self):
                return len(self.entries)

        result = RandomWalk(chain_task, FifoOpenList(), random_seed=0).search()
        assert result.reached_goal
        assert result.plan == [0, 1]
