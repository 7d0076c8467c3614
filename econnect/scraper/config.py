"""Configuration constants for the eConnect job-records scraper."""
from __future__ import annotations

import os
from dataclasses import dataclass, fields, replace
from pathlib import Path


def _parse_timeout_seconds(env_var: str, default: float, *, minimum: float = 0) -> float:
    """Parse a duration in seconds from the environment with bounds."""

    try:
        value = float(os.getenv(env_var, str(default)))
    except ValueError:
        return default
    return max(minimum, value)


def _env_flag(env_var: str, default: str = "0") -> bool:
    return os.getenv(env_var, default).strip().lower() not in {"0", "false", "no", ""}


LOGIN_URL: str = os.getenv(
    "ECONNECT_LOGIN_URL", "https://conversion.straive.com/eConnect2/Main.aspx"
)
USERNAME: str = os.getenv("ECONNECT_USERNAME", "")
PASSWORD: str = os.getenv("ECONNECT_PASSWORD", "")

try:
    PAGE_SIZE: int = int(os.getenv("ECONNECT_PAGE_SIZE", "100"))
except ValueError:
    PAGE_SIZE = 100

OUTPUT_DIR: Path = Path(os.getenv("ECONNECT_OUTPUT_DIR", "."))
LOG_DIR: Path = Path(os.getenv("ECONNECT_LOG_DIR", "logs"))
LOG_FILE: Path = LOG_DIR / "scraper.log"
RUNS_DIR_NAME: str = "runs"

# Bounded waits (seconds)
# Login conditions and table visibility.
WAIT_TIMEOUT_SECONDS: float = _parse_timeout_seconds("ECONNECT_WAIT_TIMEOUT_SECONDS", 10)
# document.readyState after a postback click.
DOCUMENT_READY_TIMEOUT_SECONDS: float = _parse_timeout_seconds(
    "ECONNECT_DOCUMENT_READY_TIMEOUT_SECONDS", 20
)
PAGE_CHANGE_ATTEMPTS: int = int(_parse_timeout_seconds("ECONNECT_PAGE_CHANGE_ATTEMPTS", 10, minimum=1))
PAGE_CHANGE_INTERVAL_SECONDS: float = _parse_timeout_seconds(
    "ECONNECT_PAGE_CHANGE_INTERVAL_SECONDS", 1.0
)
POLL_INTERVAL_SECONDS: float = _parse_timeout_seconds("ECONNECT_POLL_INTERVAL_SECONDS", 0.5)

# Settle pauses (seconds)
CLICK_SETTLE_SECONDS: float = _parse_timeout_seconds("ECONNECT_CLICK_SETTLE_SECONDS", 1.0)
RELOAD_SETTLE_SECONDS: float = _parse_timeout_seconds("ECONNECT_RELOAD_SETTLE_SECONDS", 3.0)
RECOVERY_SETTLE_SECONDS: float = _parse_timeout_seconds("ECONNECT_RECOVERY_SETTLE_SECONDS", 5.0)

HEADLESS: bool = _env_flag("ECONNECT_HEADLESS", "1")
CHROME_BINARY: str | None = os.getenv("ECONNECT_CHROME_BINARY") or None
DEBUG_SCREENSHOTS: bool = _env_flag("ECONNECT_DEBUG_SCREENSHOTS")
EXPORT_XLSX: bool = _env_flag("ECONNECT_EXPORT_XLSX")


@dataclass(frozen=True)
class ScraperSettings:
    """Snapshot of the runtime configuration handed to each component."""

    login_url: str
    username: str
    password: str
    page_size: int = 100
    output_dir: Path = Path(".")
    wait_timeout: float = 10
    document_ready_timeout: float = 20
    page_change_attempts: int = 10
    page_change_interval: float = 1.0
    poll_interval: float = 0.5
    click_settle: float = 1.0
    reload_settle: float = 3.0
    recovery_settle: float = 5.0
    headless: bool = True
    chrome_binary: str | None = None
    debug_screenshots: bool = False
    export_xlsx: bool = False

    @classmethod
    def from_config(cls, **overrides) -> "ScraperSettings":
        """Build settings from the module constants, applying ``overrides``.

        ``None`` overrides are ignored so CLI defaults can be passed through.
        """

        settings = cls(
            login_url=LOGIN_URL,
            username=USERNAME,
            password=PASSWORD,
            page_size=PAGE_SIZE,
            output_dir=OUTPUT_DIR,
            wait_timeout=WAIT_TIMEOUT_SECONDS,
            document_ready_timeout=DOCUMENT_READY_TIMEOUT_SECONDS,
            page_change_attempts=PAGE_CHANGE_ATTEMPTS,
            page_change_interval=PAGE_CHANGE_INTERVAL_SECONDS,
            poll_interval=POLL_INTERVAL_SECONDS,
            click_settle=CLICK_SETTLE_SECONDS,
            reload_settle=RELOAD_SETTLE_SECONDS,
            recovery_settle=RECOVERY_SETTLE_SECONDS,
            headless=HEADLESS,
            chrome_binary=CHROME_BINARY,
            debug_screenshots=DEBUG_SCREENSHOTS,
            export_xlsx=EXPORT_XLSX,
        )
        known = {f.name for f in fields(cls)}
        unknown = set(overrides) - known
        if unknown:
            raise TypeError(f"Unknown settings: {', '.join(sorted(unknown))}")
        applied = {k: v for k, v in overrides.items() if v is not None}
        if "output_dir" in applied:
            applied["output_dir"] = Path(applied["output_dir"])
        return replace(settings, **applied)

    @property
    def page_change_timeout(self) -> float:
        """Total polling budget for page-change confirmation."""

        return self.page_change_attempts * self.page_change_interval


__all__ = ["ScraperSettings"]
