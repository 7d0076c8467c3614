"""Login and job-count discovery for an eConnect session."""
from __future__ import annotations

import logging
import math
import re
from dataclasses import dataclass
from typing import Any, Optional

from selenium.webdriver.common.by import By

from .config import ScraperSettings
from .error_codes import NavigationTimeout
from .logging_utils import _scraper_event
from .polling import poll
from .selectors_econnect import ECONNECT_SELECTORS, SiteSelectors
from .utils import LOGGER

JOB_COUNT_PATTERN = re.compile(r"No\. of jobs: <b>(\d+)</b>")


def get_total_jobs(page_source: str) -> int:
    """Return the job count shown in the page's job-count label, or ``0``."""

    match = JOB_COUNT_PATTERN.search(page_source or "")
    return int(match.group(1)) if match else 0


def calculate_total_pages(total_records: int, per_page: int) -> int:
    """Return ``ceil(total_records / per_page)``."""

    if per_page <= 0:
        raise ValueError("per_page must be positive")
    return math.ceil(total_records / per_page)


@dataclass
class SessionInfo:
    total_jobs: int
    total_pages: int


class SessionBootstrap:
    """Log into eConnect and size the job grid."""

    def __init__(
        self,
        driver: Any,
        settings: ScraperSettings,
        *,
        selectors: SiteSelectors = ECONNECT_SELECTORS,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.driver = driver
        self.settings = settings
        self.selectors = selectors
        self.logger = logger or LOGGER

    def _await(self, description: str, predicate) -> Any:
        result = poll(
            self.driver,
            predicate,
            timeout=self.settings.wait_timeout,
            interval=self.settings.poll_interval,
        )
        if not result.ok:
            _scraper_event(
                "error",
                phase="login",
                logger=self.logger,
                level=logging.ERROR,
                step="wait_timeout",
                condition=description,
                timeout=self.settings.wait_timeout,
            )
            raise NavigationTimeout(
                f"timed out after {self.settings.wait_timeout}s waiting for {description}"
            )
        return result.value

    def login(self) -> None:
        """Submit the credentials and wait for the landing page."""

        driver = self.driver
        selectors = self.selectors
        driver.get(self.settings.login_url)
        self.logger.info("Navigated to login page.")

        driver.find_element(By.ID, selectors.username_input_id).send_keys(self.settings.username)
        driver.find_element(By.ID, selectors.password_input_id).send_keys(self.settings.password)
        driver.find_element(By.ID, selectors.submit_id).click()
        self.logger.info("Login submitted.")

        self._await(
            f"URL containing {selectors.landing_path!r}",
            lambda d: selectors.landing_path in (d.current_url or ""),
        )
        self._await(
            f"element #{selectors.job_count_label_id}",
            lambda d: d.find_element(By.ID, selectors.job_count_label_id),
        )

    def start(self) -> SessionInfo:
        """Log in and return the job count and page count."""

        self.login()
        total_jobs = get_total_jobs(self.driver.page_source)
        total_pages = calculate_total_pages(total_jobs, self.settings.page_size)
        self.logger.info("Total jobs: %s, Total pages: %s", total_jobs, total_pages)
        return SessionInfo(total_jobs=total_jobs, total_pages=total_pages)


__all__ = [
    "SessionBootstrap",
    "SessionInfo",
    "get_total_jobs",
    "calculate_total_pages",
]
