"""Offline replay of a saved ``Scraper_*.html`` snapshot log.

The snapshot holds each page's raw grid markup behind a ``<!-- Page N data -->``
comment. Replaying re-extracts the records without a browser, which lets a
partial or interrupted run be exported to CSV after the fact.
"""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from .logging_utils import _scraper_event
from .models import JobRecord
from .output import CSV_PREFIX, HTML_PREFIX, write_records_csv
from .parser import parse_table_html
from .utils import log_line

PAGE_COMMENT = re.compile(r"<!--\s*Page\s+(\d+)\s+data\s*-->")


@dataclass
class ReplayConfig:
    snapshot_path: Path
    csv_path: Optional[Path] = None


@dataclass
class ReplayResult:
    csv_path: Path
    pages: List[int] = field(default_factory=list)
    records: List[JobRecord] = field(default_factory=list)


def split_snapshot_pages(snapshot_html: str) -> List[Tuple[int, str]]:
    """Return ``(page, markup)`` pairs in file order."""

    matches = list(PAGE_COMMENT.finditer(snapshot_html))
    pages: List[Tuple[int, str]] = []
    for idx, match in enumerate(matches):
        end = matches[idx + 1].start() if idx + 1 < len(matches) else len(snapshot_html)
        chunk = snapshot_html[match.end():end]
        chunk = chunk.replace("</body></html>", "")
        pages.append((int(match.group(1)), chunk.strip()))
    return pages


def _default_csv_path(snapshot_path: Path) -> Path:
    stem = snapshot_path.stem
    if stem.startswith(HTML_PREFIX):
        stem = stem[len(HTML_PREFIX):]
    return snapshot_path.with_name(f"{CSV_PREFIX}{stem}.csv")


def run_replay(config_obj: ReplayConfig) -> ReplayResult:
    snapshot_path = Path(config_obj.snapshot_path)
    text = snapshot_path.read_text(encoding="utf-8")
    csv_path = Path(config_obj.csv_path) if config_obj.csv_path else _default_csv_path(snapshot_path)

    _scraper_event("replay", phase="start", snapshot=str(snapshot_path))

    result = ReplayResult(csv_path=csv_path)
    for page, markup in split_snapshot_pages(text):
        page_records = parse_table_html(markup)
        log_line(f"[REPLAY] Page {page}: {len(page_records)} records")
        result.pages.append(page)
        result.records.extend(page_records)

    write_records_csv(result.records, csv_path)

    summary: Dict[str, Any] = {"pages": len(result.pages), "records": len(result.records)}
    _scraper_event("replay", phase="end", snapshot=str(snapshot_path), csv=str(csv_path), **summary)
    return result


__all__ = ["ReplayConfig", "ReplayResult", "run_replay", "split_snapshot_pages"]
