from __future__ import annotations

import logging
from typing import Any

from .utils import log_line


def format_event(label: str, fields: dict[str, Any]) -> str:
    """Render ``[SCRAPER][LABEL] key=value, ...`` with keys sorted."""

    payload = ", ".join(f"{key}={value!r}" for key, value in sorted(fields.items()))
    return f"[SCRAPER][{label.upper()}] {payload}".rstrip()


def _scraper_event(
    label: str,
    *,
    phase: str | None = None,
    logger: logging.Logger | None = None,
    level: int = logging.INFO,
    **fields: Any,
) -> None:
    """Emit one structured scraper log line.

    ``phase`` names the stage of the run (``login``, ``locate``, ``advance``...)
    and is logged as a field. Without an explicit ``logger`` the line goes
    through :func:`log_line`. Formatting or handler errors are dropped.
    """

    if phase is not None:
        fields["phase"] = phase
    try:
        message = format_event(label, fields)
        if logger is None:
            log_line(message)
        else:
            logger.log(level, message)
    except Exception:  # noqa: BLE001
        return


__all__ = ["_scraper_event", "format_event"]
