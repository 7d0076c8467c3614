from __future__ import annotations

import csv
import json
from datetime import datetime
from pathlib import Path

import pytest

from econnect.scraper import config, run
from econnect.scraper.error_codes import ErrorCode
from econnect.scraper.models import CSV_HEADERS
from tests.fake_driver import FakeEConnectSite, fast_settings

NOW = datetime(2024, 5, 6, 7, 8, 9)


def _scrape(site: FakeEConnectSite, tmp_path: Path, **overrides) -> run.RunResult:
    return run.run_scrape(
        fast_settings(tmp_path, **overrides),
        driver_factory=lambda _settings: site,
        now=NOW,
    )


def _csv_rows(path: Path) -> list[list[str]]:
    with path.open("r", encoding="utf-8", newline="") as handle:
        return list(csv.reader(handle))


def test_three_page_run_exports_everything(tmp_path: Path) -> None:
    site = FakeEConnectSite(total_jobs=250)

    result = _scrape(site, tmp_path)

    assert result.status == "finished"
    assert result.total_jobs == 250
    assert result.total_pages == 3
    assert result.pages_visited == 3
    assert result.records == 250
    assert result.error is None

    assert result.csv_path == tmp_path / "JobRecords_20240506_070809.csv"
    rows = _csv_rows(result.csv_path)
    assert rows[0] == list(CSV_HEADERS)
    assert len(rows) == 251
    assert [row[0] for row in rows[1:]] == [f"JobID-{i}" for i in range(250)]

    assert result.html_path == tmp_path / "Scraper_20240506_070809.html"
    html = result.html_path.read_text(encoding="utf-8")
    assert html.startswith("<html><body>")
    assert html.rstrip().endswith("</body></html>")
    assert html.count("<!-- Page ") == 3

    assert site.quit_called is True
    assert result.xlsx_path is None


def test_first_page_table_failure_exports_header_only(tmp_path: Path) -> None:
    site = FakeEConnectSite(total_jobs=250, table_present=False)

    result = _scrape(site, tmp_path)

    assert result.status == "aborted"
    assert result.error_code == ErrorCode.TABLE_NOT_FOUND
    assert result.records == 0
    assert _csv_rows(result.csv_path) == [list(CSV_HEADERS)]
    assert site.quit_called is True
    assert "<!-- Page " not in result.html_path.read_text(encoding="utf-8")


def test_login_timeout_is_contained(tmp_path: Path) -> None:
    site = FakeEConnectSite(total_jobs=250, login_works=False)

    result = _scrape(site, tmp_path)

    assert result.status == "failed"
    assert result.error_code == ErrorCode.LOGIN_TIMEOUT
    assert result.html_path is None
    assert _csv_rows(result.csv_path) == [list(CSV_HEADERS)]
    assert site.quit_called is True


def test_navigation_failure_keeps_collected_pages(tmp_path: Path) -> None:
    site = FakeEConnectSite(total_jobs=250, link_style="none")

    result = _scrape(site, tmp_path)

    assert result.status == "finished"
    assert result.records == 100
    assert len(_csv_rows(result.csv_path)) == 101
    assert (tmp_path / "navigation_error_page_1_to_2.png").exists()


def test_run_writes_telemetry(tmp_path: Path) -> None:
    site = FakeEConnectSite(total_jobs=150)

    result = _scrape(site, tmp_path)

    payload = json.loads(Path(result.telemetry_path).read_text(encoding="utf-8"))
    assert payload["status"] == "finished"
    assert payload["records"] == 150
    assert payload["summary"] == {"count_scraped": 2}
    assert Path(result.telemetry_path) == tmp_path / "runs" / "run_20240506_070809.json"


def test_run_exports_workbook_when_enabled(tmp_path: Path) -> None:
    site = FakeEConnectSite(total_jobs=30)

    result = _scrape(site, tmp_path, export_xlsx=True)

    assert result.xlsx_path == tmp_path / "JobRecords_20240506_070809.xlsx"
    assert result.xlsx_path.exists()


def test_driver_quit_errors_do_not_escape(tmp_path: Path) -> None:
    site = FakeEConnectSite(total_jobs=10)

    def _boom() -> None:
        raise RuntimeError("already gone")

    site.quit = _boom  # type: ignore[method-assign]

    result = _scrape(site, tmp_path)

    assert result.status == "finished"
    assert result.records == 10


def test_driver_start_failure_is_contained(tmp_path: Path) -> None:
    def _no_browser(_settings):  # noqa: ANN001
        raise RuntimeError("chromedriver missing")

    result = run.run_scrape(fast_settings(tmp_path), driver_factory=_no_browser, now=NOW)

    assert result.status == "failed"
    assert result.error == "chromedriver missing"
    assert result.error_code == ErrorCode.INTERNAL
    assert _csv_rows(result.csv_path) == [list(CSV_HEADERS)]
    assert Path(result.telemetry_path).exists()


def test_snapshot_close_failure_still_quits_browser(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    def _disk_full(_self):  # noqa: ANN001
        raise OSError("disk full")

    monkeypatch.setattr(run.HtmlSnapshotLog, "close", _disk_full)
    site = FakeEConnectSite(total_jobs=150)

    result = _scrape(site, tmp_path)

    assert site.quit_called is True
    assert result.status == "finished"
    assert len(_csv_rows(result.csv_path)) == 151
    assert Path(result.telemetry_path).exists()


def test_cli_rejects_missing_credentials(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture
) -> None:
    monkeypatch.setattr(config, "USERNAME", "")
    monkeypatch.setattr(config, "PASSWORD", "")
    called = []
    monkeypatch.setattr(run, "run_scrape", lambda *a, **k: called.append(a))

    with pytest.raises(SystemExit) as excinfo:
        run._cli_entrypoint(["--log-dir", str(tmp_path / "logs"), "--output-dir", str(tmp_path)])

    assert excinfo.value.code == 2
    assert "ECONNECT_USERNAME" in capsys.readouterr().err
    assert called == []


def test_cli_runs_scrape_with_overrides(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(config, "USERNAME", "user")
    monkeypatch.setattr(config, "PASSWORD", "secret")
    seen = {}

    def _fake_run(settings):  # noqa: ANN001
        seen["settings"] = settings
        return run.RunResult(status="finished")

    monkeypatch.setattr(run, "run_scrape", _fake_run)

    code = run._cli_entrypoint(
        [
            "--log-dir",
            str(tmp_path / "logs"),
            "--output-dir",
            str(tmp_path),
            "--page-size",
            "50",
            "--xlsx",
        ]
    )

    assert code == 0
    settings = seen["settings"]
    assert settings.page_size == 50
    assert settings.output_dir == tmp_path
    assert settings.export_xlsx is True
    assert (tmp_path / "logs" / "scraper.log").exists()
