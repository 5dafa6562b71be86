"""Task - finite-domain transition system definition.

A Task describes the state space a search engine walks over:
- Variables, each with a finite domain of named values
- An initial assignment and a partial goal assignment
- Operators with preconditions, effects and a non-negative cost

States are plain tuples of value indices, one per variable. Operators are
addressed by their position in ``Task.operators`` (an OperatorID).
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, ValidationError

from statewalk.errors import TaskLoadError

logger = logging.getLogger(__name__)

StateID = int
OperatorID = int

NO_STATE: StateID = -1
NO_OPERATOR: OperatorID = -1

# (variable index, value index)
Fact = tuple[int, int]


@dataclass(frozen=True)
class Variable:
    """A finite-domain state variable."""

    name: str
    domain: tuple[str, ...]

    def index_of(self, value: str) -> int:
        """Get the index of a named value in this variable's domain."""
        return self.domain.index(value)


@dataclass(frozen=True)
class Operator:
    """A grounded action: applicable when all preconditions hold.

    Operators are immutable. ``cost`` is the real cost; search engines derive
    an adjusted cost from it according to their cost semantics.
    """

    name: str
    preconditions: tuple[Fact, ...] = ()
    effects: tuple[Fact, ...] = ()
    cost: int = 1

    def is_applicable(self, values: Sequence[int]) -> bool:
        """Check whether every precondition holds in ``values``."""
        return all(values[var] == val for var, val in self.preconditions)

    def apply(self, values: Sequence[int]) -> tuple[int, ...]:
        """Return the values obtained by applying the effects to ``values``."""
        successor = list(values)
        for var, val in self.effects:
            successor[var] = val
        return tuple(successor)


class OperatorCost(str, Enum):
    """How a search engine derives the adjusted cost of an operator.

    - normal: the operator's cost
    - one: every operator costs 1
    - plusone: cost + 1, except on unit-cost tasks where it stays 1
    """

    NORMAL = "normal"
    ONE = "one"
    PLUSONE = "plusone"


def get_adjusted_action_cost(operator: Operator, cost_type: OperatorCost, is_unit_cost: bool) -> int:
    if cost_type is OperatorCost.NORMAL:
        return operator.cost
    if cost_type is OperatorCost.ONE:
        return 1
    if is_unit_cost:
        return 1
    return operator.cost + 1


@dataclass
class Task:
    """A complete planning task over finite-domain variables.

    Example::

        task = Task.from_dict({
            "variables": {"at": ["A", "B", "C"]},
            "initial": {"at": "A"},
            "goal": {"at": "C"},
            "operators": [
                {"name": "op1", "pre": {"at": "A"}, "eff": {"at": "B"}},
                {"name": "op2", "pre": {"at": "B"}, "eff": {"at": "C"}},
            ],
        })
    """

    variables: tuple[Variable, ...]
    operators: tuple[Operator, ...]
    initial_values: tuple[int, ...]
    goal: tuple[Fact, ...]
    name: str = "task"
    _unit_cost: bool | None = field(default=None, init=False, repr=False)

    def __post_init__(self) -> None:
        if len(self.initial_values) != len(self.variables):
            raise TaskLoadError(
                message=(
                    f"Initial state assigns {len(self.initial_values)} values "
                    f"for {len(self.variables)} variables"
                ),
                field="initial",
            )

    def get_operator(self, op_id: OperatorID) -> Operator:
        """Get an operator by id."""
        return self.operators[op_id]

    def is_goal(self, values: Sequence[int]) -> bool:
        """Check whether all goal facts hold in ``values``."""
        return all(values[var] == val for var, val in self.goal)

    @property
    def is_unit_cost(self) -> bool:
        """True if every operator costs exactly 1."""
        if self._unit_cost is None:
            self._unit_cost = all(op.cost == 1 for op in self.operators)
        return self._unit_cost

    def fact_name(self, fact: Fact) -> str:
        var, val = fact
        variable = self.variables[var]
        return f"{variable.name}={variable.domain[val]}"

    def describe(self, values: Sequence[int]) -> list[str]:
        """Render every variable assignment of ``values`` as 'name=value'."""
        return [self.fact_name((var, val)) for var, val in enumerate(values)]

    def dump_state(self, values: Sequence[int], level: int = logging.INFO) -> None:
        """Log one line per fact of a state."""
        for fact in self.describe(values):
            logger.log(level, f"Fact {fact}")

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], name: str = "task") -> Task:
        """Build a task from the mapping layout used by task files.

        Raises:
            TaskLoadError: If the layout is malformed or references unknown
                variables or values.
        """
        try:
            spec = TaskSpec.model_validate(data)
        except ValidationError as e:
            raise TaskLoadError(
                message=f"Malformed task definition: {e.error_count()} error(s)",
                cause=e,
                errors=[
                    {"loc": list(err["loc"]), "msg": err["msg"]} for err in e.errors()
                ],
            ) from e
        return spec.build(name=name)


class OperatorSpec(BaseModel):
    """Operator entry of a task file."""

    name: str
    pre: dict[str, Any] = Field(default_factory=dict)
    eff: dict[str, Any] = Field(default_factory=dict)
    cost: int = Field(default=1, ge=0)


class TaskSpec(BaseModel):
    """Schema of a task file."""

    variables: dict[str, list[Any]]
    initial: dict[str, Any]
    goal: dict[str, Any] = Field(default_factory=dict)
    operators: list[OperatorSpec] = Field(default_factory=list)

    def build(self, name: str = "task") -> Task:
        variables = tuple(
            Variable(name=var_name, domain=tuple(str(v) for v in domain))
            for var_name, domain in self.variables.items()
        )
        index = {var.name: i for i, var in enumerate(variables)}

        def to_facts(assignment: Mapping[str, Any], where: str) -> tuple[Fact, ...]:
            facts = []
            for var_name, value in assignment.items():
                if var_name not in index:
                    raise TaskLoadError(
                        message=f"Unknown variable '{var_name}' in {where}",
                        field=where,
                        value=var_name,
                        expected=f"one of {sorted(index)}",
                    )
                variable = variables[index[var_name]]
                value = str(value)
                if value not in variable.domain:
                    raise TaskLoadError(
                        message=f"Value '{value}' is not in the domain of '{var_name}' ({where})",
                        field=where,
                        value=value,
                        expected=f"one of {list(variable.domain)}",
                    )
                facts.append((index[var_name], variable.index_of(value)))
            return tuple(sorted(facts))

        missing = [var.name for var in variables if var.name not in self.initial]
        if missing:
            raise TaskLoadError(
                message=f"Initial state does not assign {missing}",
                field="initial",
                value=missing,
            )
        initial = dict(to_facts(self.initial, "initial"))
        operators = tuple(
            Operator(
                name=op.name,
                preconditions=to_facts(op.pre, f"operator '{op.name}' pre"),
                effects=to_facts(op.eff, f"operator '{op.name}' eff"),
                cost=op.cost,
            )
            for op in self.operators
        )
        return Task(
            variables=variables,
            operators=operators,
            initial_values=tuple(initial[i] for i in range(len(variables))),
            goal=to_facts(self.goal, "goal"),
            name=name,
        )


def load_task(path: str | Path) -> Task:
    """Load a task from a YAML (or JSON) file.

    Raises:
        TaskLoadError: If the file is missing, unparsable or malformed.
    """
    path = Path(path)
    if not path.exists():
        raise TaskLoadError(message=f"Task file not found: {path}", field="path", value=str(path))

    try:
        with open(path) as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise TaskLoadError(message=f"Could not parse {path}: {e}", cause=e) from e

    if not isinstance(data, dict):
        raise TaskLoadError(
            message=f"Task file {path} must contain a mapping, got {type(data).__name__}",
            field="path",
            value=str(path),
        )

    task = Task.from_dict(data, name=path.stem)
    logger.debug(
        f"Loaded task {task.name}: {len(task.variables)} variables, "
        f"{len(task.operators)} operators"
    )
    return task


def operator_names(task: Task, plan: Iterable[OperatorID]) -> list[str]:
    """Map a sequence of operator ids to operator names."""
    return [task.get_operator(op_id).name for op_id in plan]


__all__ = [
    "StateID",
    "OperatorID",
    "NO_STATE",
    "NO_OPERATOR",
    "Fact",
    "Variable",
    "Operator",
    "OperatorCost",
    "get_adjusted_action_cost",
    "Task",
    "TaskSpec",
    "OperatorSpec",
    "load_task",
    "operator_names",
]
