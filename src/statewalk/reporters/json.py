"""JSON reporter for machine-readable output."""

from __future__ import annotations

import json
from typing import Any

from statewalk.search.result import SearchResult


class JSONReporter:
    """Formats SearchResult as JSON."""

    def __init__(self, indent: int | None = 2) -> None:
        self.indent = indent

    def report(self, result: SearchResult) -> str:
        """Generate JSON report."""
        data = self._to_dict(result)
        return json.dumps(data, indent=self.indent, default=str)

    def _to_dict(self, result: SearchResult) -> dict[str, Any]:
        return {
            "summary": result.summary(),
            "plan": [
                {"id": op_id, "name": name}
                for op_id, name in zip(result.plan, result.plan_names, strict=True)
            ],
            "final_state": {
                "facts": list(result.final_state),
                "g": result.final_g,
                "real_g": result.final_real_g,
            },
            "statistics": dict(result.statistics),
            "started_at": result.started_at.isoformat(),
            "finished_at": result.finished_at.isoformat() if result.finished_at else None,
        }
