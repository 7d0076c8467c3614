"""Page-by-page traversal of the eConnect job grid.

Each iteration locates the grid, extracts its rows, persists the raw markup
and the records, then (unless on the last page) advances through the pager.
The controller keeps the records it has collected on ``self.records`` so a
caller can still export them when a fatal error escapes :meth:`run`.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Optional

from selenium.webdriver.common.by import By

from .config import ScraperSettings
from .error_codes import ErrorCode, NextControlNotFound, ScraperError, TableNotFound
from .locators import NoMatch, locate_next_control
from .logging_utils import _scraper_event
from .models import JobRecord
from .output import HtmlSnapshotLog
from .page_change import confirm_page_change
from .parser import extract_table_records
from .polling import poll
from .selectors_econnect import ECONNECT_SELECTORS, SiteSelectors
from .selenium_client import (
    find_table,
    outer_html,
    reload_page,
    save_screenshot,
    scripted_click,
    scroll_into_view,
    wait_for_document_ready,
)
from .telemetry import RunTelemetry
from .utils import LOGGER, fingerprint, wait_seconds


class ControllerState(str, Enum):
    LOCATING_TABLE = "locating_table"
    EXTRACTING = "extracting"
    PERSISTING = "persisting"
    ADVANCING_PAGE = "advancing_page"
    FINISHED = "finished"
    ABORTED = "aborted"


@dataclass
class PaginationOutcome:
    state: ControllerState
    pages_visited: int
    advance_attempts: int
    records: List[JobRecord] = field(default_factory=list)


class PaginationController:
    def __init__(
        self,
        driver: Any,
        sink: HtmlSnapshotLog,
        *,
        settings: ScraperSettings,
        selectors: SiteSelectors = ECONNECT_SELECTORS,
        logger: Optional[logging.Logger] = None,
        telemetry: Optional[RunTelemetry] = None,
    ) -> None:
        self.driver = driver
        self.sink = sink
        self.settings = settings
        self.selectors = selectors
        self.logger = logger or LOGGER
        self.telemetry = telemetry
        self.records: List[JobRecord] = []
        self.pages_visited = 0
        self.advance_attempts = 0
        self.state: Optional[ControllerState] = None
        self.transitions: List[ControllerState] = []

    def _enter(self, state: ControllerState) -> None:
        self.state = state
        self.transitions.append(state)

    def _record(self, status: str, reason: str, **meta: Any) -> None:
        if self.telemetry is not None:
            self.telemetry.add(status, reason, meta)

    def outcome(self) -> PaginationOutcome:
        return PaginationOutcome(
            state=self.state or ControllerState.FINISHED,
            pages_visited=self.pages_visited,
            advance_attempts=self.advance_attempts,
            records=list(self.records),
        )

    def run(self, total_pages: int) -> PaginationOutcome:
        """Scrape pages ``1..total_pages``.

        Raises:
            TableNotFound: the grid is missing even after the reload recovery.
        """
        for page in range(1, total_pages + 1):
            self.logger.info("Scraping page %s...", page)

            self._enter(ControllerState.LOCATING_TABLE)
            try:
                table = self.locate_table(page)
            except TableNotFound:
                self._enter(ControllerState.ABORTED)
                raise

            self._enter(ControllerState.EXTRACTING)
            markup = outer_html(table)
            page_fingerprint = fingerprint(markup)
            row_count = len(table.find_elements(By.TAG_NAME, "tr")) - 1
            self.pages_visited += 1

            if row_count <= 0:
                self.logger.warning("No data rows found on page %s", page)
                self._record("skipped", "no_rows", page=page)
            else:
                page_records = extract_table_records(table, self.logger)
                self.logger.info("Extracted %s records from page %s", len(page_records), page)

                self._enter(ControllerState.PERSISTING)
                self.sink.write_page(page, markup)
                self.records.extend(page_records)
                self.logger.info(
                    "Successfully saved table from page %s with %s records",
                    page,
                    len(page_records),
                )
                self._record("scraped", "ok", page=page, records=len(page_records))

            if page >= total_pages:
                break

            self._enter(ControllerState.ADVANCING_PAGE)
            if not self.advance(page, page_fingerprint):
                break

        self._enter(ControllerState.FINISHED)
        return self.outcome()

    def _visible_table(self, driver: Any) -> Any:
        element = find_table(driver, self.selectors)
        return element if element.is_displayed() else False

    def locate_table(self, page: int) -> Any:
        """Wait for the grid to be present and displayed, reloading once."""
        result = poll(
            self.driver,
            self._visible_table,
            timeout=self.settings.wait_timeout,
            interval=self.settings.poll_interval,
        )
        if result.ok:
            return result.value

        self.logger.warning("Table not found on page %s. Retrying...", page)
        _scraper_event(
            "table",
            phase="locate",
            logger=self.logger,
            level=logging.WARNING,
            step="reload_retry",
            page=page,
        )
        reload_page(self.driver)
        wait_seconds(self.settings.reload_settle)

        result = poll(
            self.driver,
            lambda d: find_table(d, self.selectors),
            timeout=self.settings.wait_timeout,
            interval=self.settings.poll_interval,
        )
        if not result.ok:
            self.logger.error("Table still missing on page %s after reload", page)
            raise TableNotFound(f"table {self.selectors.table_id!r} not found on page {page}")
        return result.value

    def advance(self, page: int, page_fingerprint: str) -> bool:
        """Move the grid from ``page`` to ``page + 1``.

        Returns ``False`` when pagination has to stop. An unconfirmed page
        change is recovered with a reload and does not stop the loop.
        """
        next_page = page + 1
        self.advance_attempts += 1
        output_dir = self.settings.output_dir

        try:
            self.logger.info("Attempting to navigate to page %s...", next_page)
            match = locate_next_control(
                self.driver, next_page, selectors=self.selectors, logger=self.logger
            )
            if isinstance(match, NoMatch):
                raise NextControlNotFound(
                    f"no next page control for page {next_page} (tried {', '.join(match.tried)})"
                )

            scroll_into_view(self.driver, match.element)
            wait_seconds(self.settings.click_settle)
            if self.settings.debug_screenshots:
                save_screenshot(self.driver, output_dir, f"page{page}_before_click.png", self.logger)

            self.logger.info("Clicking next page link using JavaScript")
            scripted_click(self.driver, match.element)

            self.logger.info("Waiting for page load to complete...")
            if not wait_for_document_ready(
                self.driver,
                self.settings.document_ready_timeout,
                self.settings.poll_interval,
            ):
                raise ScraperError(
                    ErrorCode.NAVIGATION_ERROR,
                    f"document not ready after clicking to page {next_page}",
                )

            result = confirm_page_change(
                self.driver,
                next_page,
                page_fingerprint,
                settings=self.settings,
                selectors=self.selectors,
                logger=self.logger,
            )
            if result.confirmed:
                self.logger.info("Successfully navigated to page %s", next_page)
                return True

            self.logger.error(
                "Could not confirm page change to page %s after %s attempts",
                next_page,
                result.attempts,
            )
            self._record(
                "unconfirmed",
                ErrorCode.PAGE_CHANGE_UNCONFIRMED,
                page=page,
                next_page=next_page,
                attempts=result.attempts,
            )
            save_screenshot(
                self.driver, output_dir, f"page_change_failed_to_{next_page}.png", self.logger
            )
            reload_page(self.driver)
            wait_seconds(self.settings.recovery_settle)
            return True
        except Exception as exc:  # noqa: BLE001
            error_code = getattr(exc, "error_code", ErrorCode.NAVIGATION_ERROR)
            self.logger.error(
                "Critical error navigating to page %s: %s", next_page, exc, exc_info=True
            )
            _scraper_event(
                "error",
                phase="advance",
                logger=self.logger,
                level=logging.ERROR,
                error_code=error_code,
                page=page,
                next_page=next_page,
                error=str(exc),
            )
            self._record("failed", error_code, page=page, next_page=next_page, error=str(exc))
            save_screenshot(
                self.driver,
                output_dir,
                f"navigation_error_page_{page}_to_{next_page}.png",
                self.logger,
            )
            return False


__all__ = ["PaginationController", "PaginationOutcome", "ControllerState"]
