"""Record types produced by the job grid scraper."""
from __future__ import annotations

from dataclasses import astuple, dataclass
from typing import Optional, Sequence, Tuple

# Column names as they appear in the CSV header, in grid order.
CSV_HEADERS: Tuple[str, ...] = (
    "JobID",
    "ChildID",
    "JobType",
    "WorkCode",
    "Characters",
    "FilesOrPages",
    "ClientDueDate",
    "AssignDate",
    "DateAccepted",
    "ReturnDate",
    "ActualReturnDate",
    "Attachment",
    "Remarks",
    "Shipment",
    "QueryStatus",
)

MIN_CELLS = len(CSV_HEADERS)


@dataclass(frozen=True)
class JobRecord:
    job_id: Optional[str] = None
    child_id: Optional[str] = None
    job_type: Optional[str] = None
    work_code: Optional[str] = None
    characters: Optional[str] = None
    files_or_pages: Optional[str] = None
    client_due_date: Optional[str] = None
    assign_date: Optional[str] = None
    date_accepted: Optional[str] = None
    return_date: Optional[str] = None
    actual_return_date: Optional[str] = None
    attachment: Optional[str] = None
    remarks: Optional[str] = None
    shipment: Optional[str] = None
    query_status: Optional[str] = None

    @classmethod
    def from_cells(cls, cells: Sequence[Optional[str]]) -> "JobRecord":
        """Map the first fifteen cell texts positionally onto the record."""

        if len(cells) < MIN_CELLS:
            raise ValueError(f"expected at least {MIN_CELLS} cells, got {len(cells)}")
        return cls(*[(cell or "").strip() for cell in cells[:MIN_CELLS]])

    def as_row(self) -> list[str]:
        """Return the record as CSV cells; missing values become ``""``."""

        return ["" if value is None else value for value in astuple(self)]

    def as_dict(self) -> dict[str, str]:
        return dict(zip(CSV_HEADERS, self.as_row()))


__all__ = ["JobRecord", "CSV_HEADERS", "MIN_CELLS"]
