"""Console reporter for terminal output."""

from __future__ import annotations

from itertools import groupby
from typing import TextIO

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from statewalk.search.result import SearchResult, Termination


class ConsoleReporter:
    """Formats SearchResult for terminal output.

    Features:
    - Status header distinguishing a reached goal from an ended walk
    - Summary table of the search counters
    - Plan with repeated operators collapsed (e.g. "move ×3")
    """

    _TERMINATION_TEXT = {
        Termination.GOAL_REACHED: ("GOAL REACHED", "green"),
        Termination.FRONTIER_EXHAUSTED: ("WALK ENDED (no more edges)", "yellow"),
        Termination.BOUND_REACHED: ("WALK ENDED (cost bound reached)", "yellow"),
        Termination.STEP_LIMIT: ("STOPPED (step limit)", "red"),
    }

    def __init__(self, file: TextIO | None = None, color: bool = True) -> None:
        self.file = file
        self.color = color
        self.console = Console(file=file, no_color=not color, highlight=False, soft_wrap=True)

    def _collapse_plan(self, names: list[str]) -> str:
        """Collapse repeated consecutive operators.

        Example: ['a', 'b', 'b', 'b', 'c'] -> 'a → b ×3 → c'
        """
        collapsed = []
        for name, group in groupby(names):
            count = len(list(group))
            collapsed.append(f"{name} ×{count}" if count > 1 else name)
        return " → ".join(collapsed)

    def report(self, result: SearchResult) -> None:
        """Output the search result to the console."""
        text, style = self._TERMINATION_TEXT.get(
            result.termination, (result.status.value.upper(), "white")
        )
        self.console.print(
            Panel(f"[bold {style}]{text}[/]", title=f"statewalk: {result.engine}", expand=False)
        )

        table = Table(show_header=False, box=None, padding=(0, 2))
        table.add_column("key", style="dim")
        table.add_column("value")
        table.add_row("Status", result.status.value)
        table.add_row("Steps", str(result.steps))
        for key in ("expanded", "evaluated", "generated", "dead_ends", "progress_rewards"):
            table.add_row(key.replace("_", " ").capitalize(), str(result.statistics.get(key, 0)))
        table.add_row("Final g / real g", f"{result.final_g} / {result.final_real_g}")
        table.add_row("Duration", f"{result.duration_ms:.0f}ms")
        self.console.print(table)

        self.console.print()
        if result.plan_names:
            self.console.print(
                f"[bold]Plan[/] ({result.plan_length} steps, cost {result.plan_cost}): "
                f"{self._collapse_plan(result.plan_names)}"
            )
        else:
            self.console.print("[bold]Plan[/]: (empty)")

        if result.final_state:
            self.console.print(f"[bold]Final state[/]: {', '.join(result.final_state)}")


__all__ = ["ConsoleReporter"]
