from __future__ import annotations

import pytest
from selenium.common.exceptions import WebDriverException

from econnect.scraper import locators
from econnect.scraper.locators import LocatorMatch, NoMatch, locate_next_control
from tests.fake_driver import FakeEConnectSite


@pytest.mark.parametrize(
    "link_style, strategy, text",
    [
        ("exact", "exact_page_number", "2"),
        ("padded", "page_number_contains", "[2]"),
        ("next_only", "generic_next", ">"),
    ],
)
def test_first_matching_strategy_wins(link_style: str, strategy: str, text: str) -> None:
    site = FakeEConnectSite(total_jobs=250, link_style=link_style)

    match = locate_next_control(site, 2)

    assert isinstance(match, LocatorMatch)
    assert match.strategy == strategy
    assert match.element.text == text
    assert "__doPostBack" in match.xpath


def test_exhausted_strategies_return_no_match() -> None:
    site = FakeEConnectSite(total_jobs=250, link_style="none")

    result = locate_next_control(site, 2)

    assert isinstance(result, NoMatch)
    assert result.target_page == "2"
    assert result.tried == ("exact_page_number", "page_number_contains", "generic_next")


def test_strategy_xpaths_follow_postback_contract() -> None:
    by_name = {s.name: s for s in locators.NEXT_CONTROL_STRATEGIES}
    from econnect.scraper.selectors_econnect import ECONNECT_SELECTORS as sel

    assert by_name["exact_page_number"].xpath(sel, "7") == (
        "//a[contains(@href, '__doPostBack') and text()='7']"
    )
    assert by_name["page_number_contains"].xpath(sel, "7") == (
        "//a[contains(@href, '__doPostBack') and contains(text(), '7')]"
    )
    assert "contains(@class, 'dgNext')" in by_name["generic_next"].xpath(sel, "7")


def test_non_not_found_errors_propagate() -> None:
    class BrokenDriver:
        def __init__(self) -> None:
            self.calls = 0

        def find_element(self, by, value):  # noqa: ANN001
            self.calls += 1
            raise WebDriverException("session deleted")

    driver = BrokenDriver()
    with pytest.raises(WebDriverException):
        locate_next_control(driver, 2)
    assert driver.calls == 1
