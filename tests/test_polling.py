from __future__ import annotations

import pytest
from selenium.common.exceptions import NoSuchElementException

from econnect.scraper.polling import poll


def test_poll_returns_first_truthy_value() -> None:
    values = iter([None, False, "ready"])

    result = poll(object(), lambda _d: next(values), timeout=1, interval=0.001)

    assert result.ok is True
    assert result.value == "ready"
    assert result.attempts == 3


def test_poll_times_out() -> None:
    result = poll(object(), lambda _d: False, timeout=0.02, interval=0.005)

    assert result.ok is False
    assert result.value is None
    assert result.attempts >= 1


def test_poll_ignores_not_found_by_default() -> None:
    calls = {"n": 0}

    def _predicate(_d):  # noqa: ANN001
        calls["n"] += 1
        if calls["n"] < 2:
            raise NoSuchElementException("not yet")
        return True

    assert poll(object(), _predicate, timeout=1, interval=0.001).ok is True


def test_poll_propagates_unlisted_errors() -> None:
    def _predicate(_d):  # noqa: ANN001
        raise RuntimeError("boom")

    with pytest.raises(RuntimeError):
        poll(object(), _predicate, timeout=1, interval=0.001)


def test_zero_timeout_still_evaluates_once() -> None:
    result = poll(object(), lambda _d: "now", timeout=0, interval=0)
    assert result.ok is True
    assert result.attempts == 1
