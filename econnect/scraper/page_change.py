"""Confirm that a postback actually moved the grid to the expected page.

The grid gives no completion signal, so confirmation is inferred from three
independent checks, strongest first:

1. the pager label shows the expected page number;
2. the URL carries a ``page``/``PageIndex`` query parameter with that value;
3. the table markup fingerprint differs from the one taken before the click.

The third check only proves that *something* changed. Each check that raises
is treated as inconclusive for that attempt.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional
from urllib.parse import parse_qs, urlparse

from selenium.webdriver.common.by import By

from .config import ScraperSettings
from .polling import poll
from .selectors_econnect import ECONNECT_SELECTORS, SiteSelectors
from .selenium_client import find_table, outer_html
from .utils import LOGGER, fingerprint

SIGNAL_PAGER_LABEL = "pager_label"
SIGNAL_URL_PARAMETER = "url_parameter"
SIGNAL_CONTENT_CHANGE = "content_change"
_EXHAUSTED = "exhausted"


@dataclass
class ConfirmationResult:
    confirmed: bool
    signal: Optional[str] = None
    attempts: int = 0


def pager_label_matches(driver: Any, expected_page: str, selectors: SiteSelectors) -> bool:
    label = driver.find_element(By.CSS_SELECTOR, selectors.pager_label_css).text
    return (label or "").strip() == expected_page


def url_parameter_matches(driver: Any, expected_page: str, selectors: SiteSelectors) -> bool:
    query = parse_qs(urlparse(driver.current_url or "").query)
    wanted = {name.lower() for name in selectors.page_query_params}
    for key, values in query.items():
        if key.lower() in wanted and expected_page in values:
            return True
    return False


def table_fingerprint_changed(
    driver: Any, previous_fingerprint: str, selectors: SiteSelectors
) -> bool:
    current = fingerprint(outer_html(find_table(driver, selectors)))
    return current != previous_fingerprint


def confirm_page_change(
    driver: Any,
    expected_page: int | str,
    previous_fingerprint: str,
    *,
    settings: ScraperSettings,
    selectors: SiteSelectors = ECONNECT_SELECTORS,
    logger: Optional[logging.Logger] = None,
) -> ConfirmationResult:
    """Poll the three signals until one confirms the move to ``expected_page``."""

    logger = logger or LOGGER
    expected = str(expected_page)
    checks: list[tuple[str, Callable[[Any], bool]]] = [
        (SIGNAL_PAGER_LABEL, lambda d: pager_label_matches(d, expected, selectors)),
        (SIGNAL_URL_PARAMETER, lambda d: url_parameter_matches(d, expected, selectors)),
        (
            SIGNAL_CONTENT_CHANGE,
            lambda d: table_fingerprint_changed(d, previous_fingerprint, selectors),
        ),
    ]
    max_attempts = settings.page_change_attempts
    attempt = 0

    def _attempt(d: Any) -> Optional[str]:
        nonlocal attempt
        attempt += 1
        for signal, check in checks:
            try:
                if check(d):
                    return signal
            except Exception as exc:  # noqa: BLE001
                logger.debug("Page change check %s inconclusive: %s", signal, exc)
        logger.info(
            "Still waiting for page change confirmation (attempt %s/%s)",
            attempt,
            max_attempts,
        )
        # Ends the poll early; the timeout below is only an outer bound.
        return _EXHAUSTED if attempt >= max_attempts else None

    result = poll(
        driver,
        _attempt,
        timeout=settings.page_change_timeout + settings.page_change_interval,
        interval=settings.page_change_interval,
        ignored=(),
    )
    if result.ok and result.value != _EXHAUSTED:
        logger.info("Page change to %s confirmed via %s", expected, result.value)
        return ConfirmationResult(confirmed=True, signal=result.value, attempts=attempt)
    return ConfirmationResult(confirmed=False, attempts=attempt)


__all__ = [
    "ConfirmationResult",
    "confirm_page_change",
    "pager_label_matches",
    "url_parameter_matches",
    "table_fingerprint_changed",
    "SIGNAL_PAGER_LABEL",
    "SIGNAL_URL_PARAMETER",
    "SIGNAL_CONTENT_CHANGE",
]
