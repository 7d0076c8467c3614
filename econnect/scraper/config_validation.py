from __future__ import annotations

import logging
from typing import Literal

from .config import ScraperSettings
from .error_codes import ErrorCode
from .logging_utils import _scraper_event
from .utils import log_line

Entrypoint = Literal["cli", "replay", "tests"]


def _raise_config_error(message: str, *, entrypoint: Entrypoint, error: str) -> None:
    _scraper_event(
        "error",
        phase="config",
        level=logging.ERROR,
        context="runtime_validation",
        error_code=ErrorCode.CONFIG_INVALID,
        error=error,
        entrypoint=entrypoint,
    )
    log_line(f"[CONFIG] {message} (entrypoint={entrypoint})")
    raise ValueError(message)


def validate_runtime_config(settings: ScraperSettings, entrypoint: Entrypoint) -> None:
    """Validate ``settings`` before a live scrape.

    Raises ``ValueError`` when a blocking misconfiguration is detected.
    """

    if not settings.login_url:
        _raise_config_error(
            "ECONNECT_LOGIN_URL must be set.",
            entrypoint=entrypoint,
            error="login_url_missing",
        )

    if not settings.username or not settings.password:
        _raise_config_error(
            "ECONNECT_USERNAME and ECONNECT_PASSWORD must both be set.",
            entrypoint=entrypoint,
            error="credentials_missing",
        )

    if settings.page_size < 1:
        _raise_config_error(
            "ECONNECT_PAGE_SIZE must be at least 1.",
            entrypoint=entrypoint,
            error="page_size_invalid",
        )

    if settings.page_change_attempts < 1:
        _raise_config_error(
            "ECONNECT_PAGE_CHANGE_ATTEMPTS must be at least 1.",
            entrypoint=entrypoint,
            error="page_change_attempts_invalid",
        )

    timeout_fields = [
        ("ECONNECT_WAIT_TIMEOUT_SECONDS", settings.wait_timeout),
        ("ECONNECT_DOCUMENT_READY_TIMEOUT_SECONDS", settings.document_ready_timeout),
    ]

    for field_name, value in timeout_fields:
        if value <= 0:
            _raise_config_error(
                f"{field_name} must be greater than zero.",
                entrypoint=entrypoint,
                error="invalid_timeout",
            )


__all__ = ["validate_runtime_config", "Entrypoint"]
