"""Ordered strategies for finding the grid's "next page" control."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, List, Optional, Sequence, Union

from selenium.common.exceptions import NoSuchElementException
from selenium.webdriver.common.by import By

from .selectors_econnect import ECONNECT_SELECTORS, SiteSelectors
from .utils import LOGGER


@dataclass(frozen=True)
class LocatorStrategy:
    name: str
    build: Callable[[SiteSelectors, str], str]

    def xpath(self, selectors: SiteSelectors, target_page: str) -> str:
        return self.build(selectors, target_page)


@dataclass(frozen=True)
class LocatorMatch:
    element: Any
    strategy: str
    xpath: str


@dataclass(frozen=True)
class NoMatch:
    target_page: str
    tried: tuple[str, ...]


LocateResult = Union[LocatorMatch, NoMatch]


def _exact_page_link(selectors: SiteSelectors, target_page: str) -> str:
    return f"//a[contains(@href, '{selectors.postback_marker}') and text()='{target_page}']"


def _page_link_containing(selectors: SiteSelectors, target_page: str) -> str:
    return f"//a[contains(@href, '{selectors.postback_marker}') and contains(text(), '{target_page}')]"


def _generic_next_link(selectors: SiteSelectors, _target_page: str) -> str:
    return (
        f"//a[contains(@href, '{selectors.postback_marker}') "
        f"and contains(@class, '{selectors.next_control_class}')]"
    )


NEXT_CONTROL_STRATEGIES: tuple[LocatorStrategy, ...] = (
    LocatorStrategy("exact_page_number", _exact_page_link),
    LocatorStrategy("page_number_contains", _page_link_containing),
    # Numbered links run out far into a long pager; fall back to "next".
    LocatorStrategy("generic_next", _generic_next_link),
)


def locate_next_control(
    driver: Any,
    target_page: int | str,
    *,
    selectors: SiteSelectors = ECONNECT_SELECTORS,
    strategies: Sequence[LocatorStrategy] = NEXT_CONTROL_STRATEGIES,
    logger: Optional[logging.Logger] = None,
) -> LocateResult:
    """Return the first strategy's match for ``target_page`` or :class:`NoMatch`.

    Only ``NoSuchElementException`` moves on to the next strategy; any other
    driver error propagates to the caller.
    """

    logger = logger or LOGGER
    target = str(target_page)
    tried: List[str] = []

    for strategy in strategies:
        xpath = strategy.xpath(selectors, target)
        tried.append(strategy.name)
        try:
            element = driver.find_element(By.XPATH, xpath)
        except NoSuchElementException:
            logger.warning(
                "Next page control for '%s' not found via %s; trying next strategy",
                target,
                strategy.name,
            )
            continue
        if strategy.name == "generic_next":
            logger.info("Found 'Next' button instead of specific page number")
        return LocatorMatch(element=element, strategy=strategy.name, xpath=xpath)

    logger.error("All attempts to find next page link for '%s' failed", target)
    return NoMatch(target_page=target, tried=tuple(tried))


__all__ = [
    "LocatorStrategy",
    "LocatorMatch",
    "NoMatch",
    "NEXT_CONTROL_STRATEGIES",
    "locate_next_control",
]
