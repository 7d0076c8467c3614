"""Selenium client helpers for driving the eConnect site."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Optional

from selenium import webdriver
from selenium.webdriver.chrome.options import Options
from selenium.webdriver.common.by import By
from selenium.webdriver.remote.webdriver import WebDriver

from .config import ScraperSettings
from .polling import poll
from .selectors_econnect import ECONNECT_SELECTORS, SiteSelectors
from .utils import LOGGER, ensure_dirs


def make_driver(settings: ScraperSettings) -> WebDriver:
    """Instantiate a Chrome WebDriver configured for scraping."""
    ensure_dirs(settings.output_dir)
    chrome_options = Options()
    if settings.chrome_binary:
        chrome_options.binary_location = settings.chrome_binary
    if settings.headless:
        chrome_options.add_argument("--headless=new")
    chrome_options.add_argument("--disable-gpu")
    chrome_options.add_argument("--no-sandbox")
    chrome_options.add_argument("--disable-dev-shm-usage")
    chrome_options.add_argument("--window-size=1920,1080")
    chrome_options.add_argument("--blink-settings=imagesEnabled=false")
    driver = webdriver.Chrome(options=chrome_options)
    return driver


def find_table(driver: Any, selectors: SiteSelectors = ECONNECT_SELECTORS) -> Any:
    return driver.find_element(By.XPATH, selectors.table_xpath)


def outer_html(element: Any) -> str:
    return element.get_attribute("outerHTML") or ""


def reload_page(driver: Any) -> None:
    """Force a full reload of the current page."""
    driver.refresh()


def scripted_click(driver: Any, element: Any) -> None:
    """Click ``element`` from JavaScript.

    Native clicks on the pager anchors are unreliable when the anchor sits
    outside the viewport or the grid is mid-postback.
    """
    driver.execute_script("arguments[0].click();", element)


def scroll_into_view(driver: Any, element: Any) -> None:
    driver.execute_script("arguments[0].scrollIntoView(true);", element)


def wait_for_document_ready(driver: Any, timeout: float, interval: float = 0.2) -> bool:
    """Block until ``document.readyState`` is ``complete``."""
    result = poll(
        driver,
        lambda d: d.execute_script("return document.readyState") == "complete",
        timeout=timeout,
        interval=interval,
    )
    return result.ok


def save_screenshot(
    driver: Any,
    output_dir: Path,
    name: str,
    logger: Optional[logging.Logger] = None,
) -> Optional[Path]:
    """Save a diagnostic screenshot under ``output_dir``; never raises."""
    logger = logger or LOGGER
    path = Path(output_dir) / name
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        driver.save_screenshot(str(path))
        logger.info("Saved debug screenshot to %s", path)
        return path
    except Exception as exc:  # noqa: BLE001
        logger.warning("Failed to save debug screenshot %s: %s", path, exc)
        return None


__all__ = [
    "make_driver",
    "find_table",
    "outer_html",
    "reload_page",
    "scripted_click",
    "scroll_into_view",
    "wait_for_document_ready",
    "save_screenshot",
]
