"""Engine registry - explicit name to factory mapping.

Engines are registered on a registry value that is built at startup and
passed to whoever needs to construct engines, e.g. the CLI::

    registry = default_registry()
    engine = registry.create("random_walk", task, config)
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field

from statewalk.config.settings import WalkConfig
from statewalk.core.evaluation import EvaluatorRegistry, default_evaluators
from statewalk.core.task import Task
from statewalk.errors import ConfigValidationError
from statewalk.search.engine import SearchEngine
from statewalk.search.random_walk import RandomWalk

logger = logging.getLogger(__name__)

EngineFactory = Callable[[Task, WalkConfig, EvaluatorRegistry], SearchEngine]


@dataclass
class EngineRegistry:
    """Maps engine names to factories and carries the evaluator registry."""

    evaluators: EvaluatorRegistry = field(default_factory=default_evaluators)
    _factories: dict[str, EngineFactory] = field(default_factory=dict)
    _descriptions: dict[str, str] = field(default_factory=dict)

    def register(self, name: str, factory: EngineFactory, description: str = "") -> None:
        if name in self._factories:
            logger.warning(f"Replacing engine factory '{name}'")
        self._factories[name] = factory
        self._descriptions[name] = description

    def create(self, name: str, task: Task, config: WalkConfig) -> SearchEngine:
        """Build the engine registered as ``name``.

        Raises:
            ConfigValidationError: If no engine is registered as ``name`` or
                the configuration names an unknown evaluator.
        """
        factory = self._factories.get(name)
        if factory is None:
            raise ConfigValidationError(
                message=f"Unknown search engine '{name}'",
                field="engine",
                value=name,
                expected=f"one of {self.names()}",
            )
        return factory(task, config, self.evaluators)

    def names(self) -> list[str]:
        return sorted(self._factories)

    def describe(self, name: str) -> str:
        return self._descriptions.get(name, "")

    def __contains__(self, name: object) -> bool:
        return name in self._factories


def default_registry() -> EngineRegistry:
    registry = EngineRegistry()
    registry.register(
        "random_walk",
        RandomWalk.from_config,
        "Random walk: expands one randomly chosen successor per state",
    )
    return registry


__all__ = ["EngineRegistry", "EngineFactory", "default_registry"]
