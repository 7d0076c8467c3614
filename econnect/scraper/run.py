"""Selenium-based scraper for the eConnect job grid.

Workflow:

- Log in with the configured credentials and read "No. of jobs" to size the
  grid (100 rows per page by default).
- Walk the grid page by page through its ``__doPostBack`` pager, appending
  each page's raw table markup to ``Scraper_<ts>.html``.
- Export every extracted row to ``JobRecords_<ts>.csv`` (and optionally an
  ``.xlsx`` workbook), even when the run stops early.

This is wired to the ``econnect-scrape`` console script via _cli_entrypoint().
"""

from __future__ import annotations

import argparse
import logging
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, List, Optional

from .config import ScraperSettings
from .config_validation import validate_runtime_config
from .error_codes import ErrorCode
from .export_excel import export_records_to_excel
from .logging_utils import _scraper_event
from .models import JobRecord
from .output import HtmlSnapshotLog, csv_path, html_log_path, write_records_csv
from .pagination import ControllerState, PaginationController
from .replay_harness import ReplayConfig, run_replay
from .selenium_client import make_driver
from .session import SessionBootstrap
from .telemetry import RunTelemetry
from .utils import LOGGER, ensure_dirs, run_timestamp, setup_run_logger

STATUS_FAILED = "failed"


@dataclass
class RunResult:
    status: str
    total_jobs: int = 0
    total_pages: int = 0
    pages_visited: int = 0
    records: int = 0
    html_path: Optional[Path] = None
    csv_path: Optional[Path] = None
    xlsx_path: Optional[Path] = None
    telemetry_path: Optional[str] = None
    error: Optional[str] = None
    error_code: Optional[str] = None


def _short_error_message(exc: Exception, max_length: int = 200) -> str:
    message = str(exc).strip() or exc.__class__.__name__
    if len(message) > max_length:
        return message[: max_length - 3] + "..."
    return message


def _export_outputs(
    records: List[JobRecord],
    result: RunResult,
    settings: ScraperSettings,
    timestamp: str,
    logger: logging.Logger,
) -> None:
    """Write the CSV (and workbook when enabled) for whatever was collected."""

    target = csv_path(settings.output_dir, timestamp)
    try:
        write_records_csv(records, target, logger)
        result.csv_path = target
    except Exception as exc:  # noqa: BLE001
        logger.error("Error saving CSV %s: %s", target, exc, exc_info=True)

    if not settings.export_xlsx:
        return

    xlsx_target = target.with_suffix(".xlsx")
    try:
        result.xlsx_path = export_records_to_excel(records, xlsx_target)
        logger.info("Workbook saved to %s", xlsx_target)
    except Exception as exc:  # noqa: BLE001
        logger.error("Error saving workbook %s: %s", xlsx_target, exc, exc_info=True)


def run_scrape(
    settings: Optional[ScraperSettings] = None,
    *,
    driver_factory: Callable[[ScraperSettings], Any] = make_driver,
    logger: Optional[logging.Logger] = None,
    now: Optional[datetime] = None,
) -> RunResult:
    """Run one full scrape and return a summary.

    Failures after the browser starts are contained here: they are logged,
    the browser is closed and the records collected so far are still
    exported.
    """

    settings = settings or ScraperSettings.from_config()
    logger = logger or LOGGER
    logger.info("Starting scraper...")
    ensure_dirs(settings.output_dir)

    timestamp = run_timestamp(now)
    sink = HtmlSnapshotLog(html_log_path(settings.output_dir, timestamp))
    telemetry = RunTelemetry(settings.output_dir, run_id=timestamp)
    result = RunResult(status=STATUS_FAILED)
    controller: Optional[PaginationController] = None
    driver: Any = None

    try:
        driver = driver_factory(settings)
        session = SessionBootstrap(driver, settings, logger=logger).start()
        result.total_jobs = session.total_jobs
        result.total_pages = session.total_pages

        sink.open()
        result.html_path = sink.path
        controller = PaginationController(
            driver, sink, settings=settings, logger=logger, telemetry=telemetry
        )
        outcome = controller.run(session.total_pages)
        result.status = outcome.state.value
        logger.info("Scraping completed. Total records: %s", len(outcome.records))
        logger.info("Output saved to %s", sink.path)
    except Exception as exc:  # noqa: BLE001
        logger.error("Critical error in scraping process: %s", exc, exc_info=True)
        if controller is not None and controller.state == ControllerState.ABORTED:
            result.status = ControllerState.ABORTED.value
        result.error = _short_error_message(exc)
        result.error_code = getattr(exc, "error_code", ErrorCode.INTERNAL)
        _scraper_event(
            "error",
            phase="run",
            logger=logger,
            level=logging.ERROR,
            error_code=result.error_code,
            error=result.error,
        )
    finally:
        try:
            sink.close()
        except Exception as exc:  # noqa: BLE001
            logger.error("Failed to close snapshot log %s: %s", sink.path, exc)
        if driver is not None:
            try:
                driver.quit()
            except Exception as exc:  # noqa: BLE001
                logger.warning("Failed to close browser cleanly: %s", exc)
            logger.info("Browser closed.")

    records = controller.records if controller is not None else []
    if controller is not None:
        result.pages_visited = controller.pages_visited
    result.records = len(records)
    _export_outputs(records, result, settings, timestamp, logger)

    result.telemetry_path = telemetry.finalize(
        {
            "status": result.status,
            "total_jobs": result.total_jobs,
            "total_pages": result.total_pages,
            "pages_visited": result.pages_visited,
            "records": result.records,
            "error_code": result.error_code,
        }
    )
    return result


def _cli_entrypoint(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Scrape eConnect job records")
    parser.add_argument("--output-dir", default=None, help="Directory for HTML/CSV output")
    parser.add_argument("--log-dir", default=None, help="Directory for the rolling log file")
    parser.add_argument("--page-size", type=int, default=None)
    parser.add_argument("--login-url", default=None)
    parser.add_argument(
        "--xlsx",
        action="store_true",
        help="Also export the records to an Excel workbook",
    )
    parser.add_argument(
        "--replay",
        metavar="SNAPSHOT",
        default=None,
        help="Re-export a saved Scraper_*.html snapshot to CSV instead of scraping",
    )

    args = parser.parse_args(argv)
    setup_run_logger(Path(args.log_dir) if args.log_dir else None)

    if args.replay:
        run_replay(ReplayConfig(snapshot_path=Path(args.replay)))
        return 0

    settings = ScraperSettings.from_config(
        output_dir=args.output_dir,
        page_size=args.page_size,
        login_url=args.login_url,
        export_xlsx=True if args.xlsx else None,
    )
    try:
        validate_runtime_config(settings, "cli")
    except ValueError as exc:
        parser.error(str(exc))

    result = run_scrape(settings)
    return 0 if result.status == ControllerState.FINISHED.value else 1


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(_cli_entrypoint())

__all__ = ["run_scrape", "RunResult", "_cli_entrypoint"]
