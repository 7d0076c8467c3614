from __future__ import annotations

"""Centralised error code taxonomy for scraper failures.

Codes are attached to :class:`ScraperError` instances and included in
structured logs and run telemetry so a partial run can be explained after the
fact.
"""


class ErrorCode:
    LOGIN_TIMEOUT = "login_timeout"
    TABLE_NOT_FOUND = "table_not_found"
    NEXT_CONTROL_NOT_FOUND = "next_control_not_found"
    PAGE_CHANGE_UNCONFIRMED = "page_change_unconfirmed"
    NAVIGATION_ERROR = "navigation_error"
    ROW_EXTRACTION = "row_extraction_error"
    CONFIG_INVALID = "config_invalid"
    INTERNAL = "internal_error"


class ScraperError(Exception):
    def __init__(self, error_code: str, message: str) -> None:
        super().__init__(message)
        self.error_code = error_code

    def __str__(self) -> str:  # pragma: no cover - inherited behaviour
        return str(self.args[0]) if self.args else ""


class NavigationTimeout(ScraperError):
    """A login condition never became true within its bounded wait."""

    def __init__(self, message: str) -> None:
        super().__init__(ErrorCode.LOGIN_TIMEOUT, message)


class TableNotFound(ScraperError):
    """The results grid could not be located even after a reload."""

    def __init__(self, message: str) -> None:
        super().__init__(ErrorCode.TABLE_NOT_FOUND, message)


class NextControlNotFound(ScraperError):
    """Every next-page locator strategy came up empty."""

    def __init__(self, message: str) -> None:
        super().__init__(ErrorCode.NEXT_CONTROL_NOT_FOUND, message)


__all__ = [
    "ErrorCode",
    "ScraperError",
    "NavigationTimeout",
    "TableNotFound",
    "NextControlNotFound",
]
