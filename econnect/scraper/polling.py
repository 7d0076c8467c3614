"""Bounded polling shared by login, table location and page confirmation."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Iterable, Optional

from selenium.common.exceptions import (
    NoSuchElementException,
    StaleElementReferenceException,
    TimeoutException,
)
from selenium.webdriver.support.ui import WebDriverWait

DEFAULT_IGNORED: tuple[type[BaseException], ...] = (
    NoSuchElementException,
    StaleElementReferenceException,
)

# WebDriverWait treats a zero poll frequency as "use the default"; keep tiny
# intervals tiny instead.
MIN_INTERVAL_SECONDS = 0.001


@dataclass
class PollResult:
    ok: bool
    value: Any = None
    attempts: int = 0


def poll(
    driver: Any,
    predicate: Callable[[Any], Any],
    *,
    timeout: float,
    interval: float = 0.5,
    ignored: Optional[Iterable[type[BaseException]]] = None,
) -> PollResult:
    """Re-evaluate ``predicate(driver)`` until truthy or ``timeout`` elapses.

    Exceptions listed in ``ignored`` count as a falsy evaluation. The
    predicate is always evaluated at least once.
    """

    attempts = 0

    def _counted(d: Any) -> Any:
        nonlocal attempts
        attempts += 1
        return predicate(d)

    wait = WebDriverWait(
        driver,
        max(timeout, 0),
        poll_frequency=max(interval, MIN_INTERVAL_SECONDS),
        ignored_exceptions=tuple(ignored) if ignored is not None else DEFAULT_IGNORED,
    )
    try:
        value = wait.until(_counted)
    except TimeoutException:
        return PollResult(ok=False, attempts=attempts)
    return PollResult(ok=True, value=value, attempts=attempts)


__all__ = ["poll", "PollResult"]
