"""Search engines, open lists and the engine registry."""

from statewalk.search.engine import SearchEngine, Searcher
from statewalk.search.open_list import (
    AlternationOpenList,
    BestFirstOpenList,
    EdgeOpenList,
    EdgeOpenListEntry,
    create_greedy_open_list,
)
from statewalk.search.random_walk import RandomWalk
from statewalk.search.registry import EngineRegistry, default_registry
from statewalk.search.result import SearchResult, SearchStatus, Termination

__all__ = [
    "Searcher",
    "SearchEngine",
    "SearchResult",
    "SearchStatus",
    "Termination",
    "RandomWalk",
    "EdgeOpenList",
    "EdgeOpenListEntry",
    "BestFirstOpenList",
    "AlternationOpenList",
    "create_greedy_open_list",
    "EngineRegistry",
    "default_registry",
]
