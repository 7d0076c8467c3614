from __future__ import annotations

"""Selectors and markers for the eConnect job listing."""

from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class SiteSelectors:
    """Fixed layout hints for the eConnect login form and job grid.

    The grid is an ASP.NET DataGrid: pager links are anchors whose ``href``
    calls ``__doPostBack`` and the active page is rendered as a bare ``span``
    inside the pager row.
    """

    username_input_id: str = "txtUser"
    password_input_id: str = "txtPass"
    submit_id: str = "imgOK"
    landing_path: str = "Main.aspx"
    job_count_label_id: str = "lblCountJobs"
    table_id: str = "GridData_New"
    pager_label_css: str = ".dgPager span"
    postback_marker: str = "__doPostBack"
    next_control_class: str = "dgNext"
    page_query_params: Tuple[str, ...] = ("page", "PageIndex")

    @property
    def table_xpath(self) -> str:
        return f"//table[@id='{self.table_id}']"


ECONNECT_SELECTORS = SiteSelectors()

__all__ = [
    "SiteSelectors",
    "ECONNECT_SELECTORS",
]
