import json
from pathlib import Path

from econnect.scraper.telemetry import RunTelemetry


def test_finalize_writes_summary_and_entries(tmp_path: Path) -> None:
    telemetry = RunTelemetry(tmp_path)
    telemetry.add("scraped", "ok", {"page": 1, "records": 100})
    telemetry.add("skipped", "empty_table", {"page": 2})
    telemetry.add("scraped", "ok", {"page": 3, "records": 5})

    path = Path(telemetry.finalize({"status": "finished"}))

    assert path.parent == tmp_path / "runs"
    assert path.name == f"run_{telemetry.run_id}.json"
    payload = json.loads(path.read_text(encoding="utf-8"))
    assert payload["status"] == "finished"
    assert payload["summary"] == {"count_scraped": 2, "count_skipped": 1}
    assert [entry["page"] for entry in payload["entries"]] == [1, 2, 3]
    assert payload["records_from_pages"] == 105
    assert payload["ended_at"] >= payload["started_at"]
