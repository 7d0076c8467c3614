"""Per-page run telemetry written next to the scrape outputs."""

from __future__ import annotations

import json
import time
import uuid
from collections import Counter
from pathlib import Path
from typing import Any, Dict, List, Optional

from . import config


class RunTelemetry:
    """Record what happened to each grid page and dump it as JSON.

    Every entry carries a ``status`` (``scraped``, ``skipped``,
    ``unconfirmed`` or ``failed``) plus a short ``reason``; the summary
    counts entries per status and totals the extracted records.
    """

    def __init__(self, output_dir: Path, run_id: Optional[str] = None) -> None:
        self.run_id = run_id or f"{time.strftime('%Y%m%d_%H%M%S')}_{uuid.uuid4().hex[:8]}"
        self.runs_dir = Path(output_dir) / config.RUNS_DIR_NAME
        self.started_at = time.time()
        self.entries: List[Dict[str, Any]] = []
        self._status_counts: Counter = Counter()
        self._records_total = 0

    def add(self, status: str, reason: str, meta: Dict[str, Any]) -> None:
        self.entries.append({"status": status, "reason": reason, **meta})
        self._status_counts[status] += 1
        self._records_total += int(meta.get("records", 0) or 0)

    @property
    def summary(self) -> Dict[str, int]:
        return {f"count_{status}": n for status, n in sorted(self._status_counts.items())}

    def finalize(self, extra: Optional[Dict[str, Any]] = None) -> str:
        """Write ``runs/run_<id>.json`` and return its path."""

        payload = {
            "run_id": self.run_id,
            "started_at": self.started_at,
            "ended_at": time.time(),
            "summary": self.summary,
            "records_from_pages": self._records_total,
            "entries": self.entries,
            **(extra or {}),
        }
        self.runs_dir.mkdir(parents=True, exist_ok=True)
        path = self.runs_dir / f"run_{self.run_id}.json"
        path.write_text(json.dumps(payload, ensure_ascii=False, indent=2, default=str), encoding="utf-8")
        return str(path)


__all__ = ["RunTelemetry"]
