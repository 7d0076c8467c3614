from __future__ import annotations

import logging

import pytest

from econnect.scraper import parser
from econnect.scraper.models import CSV_HEADERS, JobRecord
from tests.fake_driver import FakeElement, build_table, job_row


def test_well_formed_rows_map_positionally_and_trim() -> None:
    padded = [f"  {cell}\n" for cell in job_row(7)]
    table = build_table([padded, job_row(8)])

    records = parser.extract_table_records(table)

    assert len(records) == 2
    first = records[0]
    assert first.job_id == "JobID-7"
    assert first.child_id == "ChildID-7"
    assert first.query_status == "QueryStatus-7"
    assert first.as_row() == job_row(7)
    assert records[1].as_dict()["Remarks"] == "Remarks-8"


def test_short_rows_are_skipped_without_affecting_later_rows() -> None:
    short = job_row(1)[:14]
    table = build_table([job_row(0), short, job_row(2)])

    records = parser.extract_table_records(table)

    assert [r.job_id for r in records] == ["JobID-0", "JobID-2"]


def test_extra_cells_beyond_fifteen_are_ignored() -> None:
    table = build_table([job_row(3) + ["extra"]])

    (record,) = parser.extract_table_records(table)

    assert record.query_status == "QueryStatus-3"


def test_row_errors_are_logged_and_skipped(caplog: pytest.LogCaptureFixture) -> None:
    table = build_table([job_row(0), job_row(1), job_row(2)])
    table.children[2].error = RuntimeError("stale row")
    logger = logging.getLogger("tests.parser")

    with caplog.at_level(logging.ERROR, logger="tests.parser"):
        records = parser.extract_table_records(table, logger)

    assert [r.job_id for r in records] == ["JobID-0", "JobID-2"]
    assert "Error extracting row 2" in caplog.text


def test_header_only_table_yields_nothing() -> None:
    assert parser.extract_table_records(build_table([])) == []


def test_parse_table_html_applies_same_row_policy() -> None:
    cells = "".join(f"<td> {value} </td>" for value in job_row(4))
    short = "".join(f"<td>{value}</td>" for value in job_row(5)[:3])
    header = "".join(f"<th>{name}</th>" for name in CSV_HEADERS)
    markup = (
        f'<table id="GridData_New"><tr>{header}</tr>'
        f"<tr>{cells}</tr><tr>{short}</tr>"
        '<tr class="dgPager"><td colspan="15"><span>1</span> '
        "<a href=\"javascript:__doPostBack('x','')\">2</a></td></tr></table>"
    )

    records = parser.parse_table_html(markup)

    assert records == [JobRecord.from_cells(job_row(4))]


def test_nested_table_cells_do_not_count_toward_a_row() -> None:
    # 13 own cells plus one cell holding a two-cell table: 14 direct, 16 in total.
    own = job_row(5)[:13]
    nested = FakeElement(
        "td",
        children=[
            FakeElement(
                "table",
                children=[FakeElement("tr", children=[FakeElement("td", "a"), FakeElement("td", "b")])],
            )
        ],
    )
    table = build_table([job_row(4), job_row(6)])
    table.children.insert(
        2, FakeElement("tr", children=[FakeElement("td", cell) for cell in own] + [nested])
    )
    markup = (
        "<table><tr><th>h</th></tr><tr>"
        + "".join(f"<td>{cell}</td>" for cell in own)
        + "<td><table><tr><td>a</td><td>b</td></tr></table></td></tr></table>"
    )

    live = parser.extract_table_records(table)
    saved = parser.parse_table_html(markup)

    assert [r.job_id for r in live] == ["JobID-4", "JobID-6"]
    assert saved == []


def test_parse_table_html_without_table() -> None:
    assert parser.parse_table_html("<p>nothing here</p>") == []


def test_job_record_rejects_short_cell_list() -> None:
    with pytest.raises(ValueError):
        JobRecord.from_cells(["only", "two"])


def test_job_record_none_fields_render_empty() -> None:
    record = JobRecord(job_id="1")
    row = record.as_row()
    assert row[0] == "1"
    assert row[1:] == [""] * 14

