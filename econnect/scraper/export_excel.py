"""Excel export of scraped job records."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable

import pandas as pd

from .models import CSV_HEADERS, JobRecord


def records_to_frame(records: Iterable[JobRecord]) -> pd.DataFrame:
    """Return a DataFrame with one column per CSV header, in grid order."""

    return pd.DataFrame([record.as_row() for record in records], columns=list(CSV_HEADERS))


def export_records_to_excel(records: Iterable[JobRecord], dest_path: Path) -> Path:
    """Write ``records`` to a single-sheet workbook at ``dest_path``."""

    dest_path = Path(dest_path)
    dest_path.parent.mkdir(parents=True, exist_ok=True)
    df = records_to_frame(records)
    with pd.ExcelWriter(dest_path, engine="openpyxl") as writer:
        df.to_excel(writer, index=False, sheet_name="JobRecords")
    return dest_path


__all__ = ["export_records_to_excel", "records_to_frame"]
