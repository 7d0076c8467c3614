"""Row extraction for the eConnect job grid.

Two entry points share the same row policy: the header row is skipped, only
a row's own cells count (cells of a table nested inside a cell do not), rows
with fewer than fifteen cells are dropped, and cell text is trimmed.

* :func:`extract_table_records` works on a live Selenium table element.
* :func:`parse_table_html` works on saved table markup (BeautifulSoup).
"""
from __future__ import annotations

import logging
from typing import Any, List, Optional

from bs4 import BeautifulSoup
from selenium.webdriver.common.by import By

from .error_codes import ErrorCode
from .logging_utils import _scraper_event
from .models import MIN_CELLS, JobRecord
from .utils import LOGGER


def extract_table_records(table: Any, logger: Optional[logging.Logger] = None) -> List[JobRecord]:
    """Return one :class:`JobRecord` per well-formed data row of ``table``.

    Args:
        table: Located grid ``WebElement``.
        logger: Logger receiving per-row failures.

    Returns:
        Records in row order. A row that raises while being read is logged
        with its index and skipped; later rows are still extracted.
    """
    logger = logger or LOGGER
    records: List[JobRecord] = []
    rows = table.find_elements(By.TAG_NAME, "tr")

    for index, row in enumerate(rows[1:], start=1):
        try:
            cells = row.find_elements(By.XPATH, "./td")
            if len(cells) < MIN_CELLS:
                continue
            records.append(JobRecord.from_cells([cell.text for cell in cells]))
        except Exception as exc:  # noqa: BLE001
            logger.error("Error extracting row %s: %s", index, exc)
            _scraper_event(
                "error",
                phase="extract",
                logger=logger,
                level=logging.ERROR,
                error_code=ErrorCode.ROW_EXTRACTION,
                row=index,
                error=str(exc),
            )

    return records


def parse_table_html(markup: str) -> List[JobRecord]:
    """Parse saved grid markup into records using the live-row rules."""

    soup = BeautifulSoup(markup, "html5lib")
    table = soup.find("table")
    if table is None:
        return []

    records: List[JobRecord] = []
    for row in table.find_all("tr")[1:]:
        # Nested pager tables carry their own rows; only direct cells count.
        cells = row.find_all("td", recursive=False)
        if len(cells) < MIN_CELLS:
            continue
        records.append(JobRecord.from_cells([cell.get_text() for cell in cells]))
    return records


__all__ = ["extract_table_records", "parse_table_html"]
