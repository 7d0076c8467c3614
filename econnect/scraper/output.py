"""Output files for a scrape run: the raw HTML snapshot log and the CSV export."""
from __future__ import annotations

import csv
import logging
from pathlib import Path
from typing import IO, Iterable, Optional

from .models import CSV_HEADERS, JobRecord
from .utils import LOGGER

HTML_PREFIX = "Scraper_"
CSV_PREFIX = "JobRecords_"
PAGE_MARKER = "<!-- Page {page} data -->"


def html_log_path(output_dir: Path, timestamp: str) -> Path:
    return Path(output_dir) / f"{HTML_PREFIX}{timestamp}.html"


def csv_path(output_dir: Path, timestamp: str) -> Path:
    return Path(output_dir) / f"{CSV_PREFIX}{timestamp}.csv"


class HtmlSnapshotLog:
    """Append-only HTML file receiving each page's raw grid markup.

    Every page write is flushed so a crash loses at most the page in flight.
    """

    def __init__(self, path: Path) -> None:
        self.path = Path(path)
        self.pages_written = 0
        self._handle: Optional[IO[str]] = None

    def open(self) -> "HtmlSnapshotLog":
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self._handle = self.path.open("a", encoding="utf-8")
        self._handle.write("<html><body>\n")
        self._handle.flush()
        return self

    def write_page(self, page: int, markup: str) -> None:
        if self._handle is None:
            raise RuntimeError("snapshot log is not open")
        self._handle.write(PAGE_MARKER.format(page=page) + "\n")
        self._handle.write(markup + "\n")
        self._handle.flush()
        self.pages_written += 1

    def close(self) -> None:
        if self._handle is None:
            return
        try:
            self._handle.write("</body></html>\n")
        finally:
            self._handle.close()
            self._handle = None

    @property
    def closed(self) -> bool:
        return self._handle is None

    def __enter__(self) -> "HtmlSnapshotLog":
        return self.open()

    def __exit__(self, *_exc) -> None:
        self.close()


def write_records_csv(
    records: Iterable[JobRecord],
    path: Path,
    logger: Optional[logging.Logger] = None,
) -> int:
    """Write ``records`` to ``path`` with a fixed header; return the row count.

    Fields holding a comma, quote or line break are quoted and embedded quotes
    doubled.
    """
    logger = logger or LOGGER
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    count = 0
    with path.open("w", encoding="utf-8", newline="") as handle:
        writer = csv.writer(handle, quoting=csv.QUOTE_MINIMAL, lineterminator="\r\n")
        writer.writerow(CSV_HEADERS)
        for record in records:
            writer.writerow(record.as_row())
            count += 1
    logger.info("CSV data saved to %s (%s rows)", path, count)
    return count


__all__ = [
    "HtmlSnapshotLog",
    "write_records_csv",
    "html_log_path",
    "csv_path",
    "PAGE_MARKER",
]
