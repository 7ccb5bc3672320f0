import logging
from datetime import date
from typing import Iterable, List, Optional

from .analytics import (
    DEFAULT_SCATTER_X,
    DEFAULT_SCATTER_Y,
    build_scatter_view,
    check_axis,
    year_highlights,
    yearly_counts,
)
from .executor import compute_summary, filter_records, sort_records
from .query_plan import DEFAULT_SORT_FIELD, DEFAULT_SORT_ORDER, SearchPlan, SortField, SortOrder, SortSpec
from .schemas import DashboardView, IPORecord, ScatterView
from .search_parser import parse_search_to_plan
from .suggestions import generate_suggestions

log = logging.getLogger(__name__)


class IPODashboard:
    """
    Session state behind the dashboard: the record collection, the search box
    text, the table sort and the scatter chart axes. Every derived value is
    recomputed from these on read, so a data update or a date rollover is
    picked up immediately.
    """

    def __init__(
        self,
        records: Iterable[IPORecord],
        search: str = "",
        sort_field: SortField = DEFAULT_SORT_FIELD,
        sort_order: SortOrder = DEFAULT_SORT_ORDER,
        today: Optional[date] = None,
        scatter_x: str = DEFAULT_SCATTER_X,
        scatter_y: str = DEFAULT_SCATTER_Y,
    ):
        self._records: List[IPORecord] = list(records)
        self.search = search
        self.sort = SortSpec(field=sort_field, direction=sort_order)
        self.scatter_x = check_axis(scatter_x)
        self.scatter_y = check_axis(scatter_y)
        # Fixed reference date for tests; None means read the clock each time
        self._today = today

    @property
    def records(self) -> List[IPORecord]:
        return list(self._records)

    @property
    def current_year(self) -> int:
        return (self._today or date.today()).year

    def set_search(self, text: str) -> None:
        self.search = text

    def set_sort(self, field: SortField, direction: SortOrder = "desc") -> None:
        self.sort = SortSpec(field=field, direction=direction)

    def toggle_sort(self, field: SortField) -> None:
        """Clicking the active column flips direction; a new column starts descending."""
        if self.sort.field == field:
            direction: SortOrder = "asc" if self.sort.descending else "desc"
            self.sort = SortSpec(field=field, direction=direction)
        else:
            self.sort = SortSpec(field=field, direction="desc")

    def set_scatter_axes(self, x_axis: Optional[str] = None, y_axis: Optional[str] = None) -> None:
        """Unknown axis names raise ValueError and leave both axes unchanged."""
        x_axis = check_axis(x_axis or self.scatter_x)
        y_axis = check_axis(y_axis or self.scatter_y)
        self.scatter_x, self.scatter_y = x_axis, y_axis

    def update_data(self, records: Iterable[IPORecord]) -> None:
        self._records = list(records)
        log.info("Dashboard data replaced (%d records)", len(self._records))

    def plan(self) -> SearchPlan:
        return parse_search_to_plan(self.search)

    def filtered(self) -> List[IPORecord]:
        matched = filter_records(self._records, self.plan())
        return sort_records(matched, self.sort.field, self.sort.direction)

    def scatter(self, rows: Optional[List[IPORecord]] = None) -> ScatterView:
        if rows is None:
            rows = self.filtered()
        return build_scatter_view(rows, self.scatter_x, self.scatter_y)

    def view(self) -> DashboardView:
        rows = self.filtered()
        yearly = yearly_counts(self._records, current_year=self.current_year)
        return DashboardView(
            records=rows,
            suggestions=generate_suggestions(self.search, self._records, current_year=self.current_year),
            summary=compute_summary(rows),
            yearly_counts=yearly,
            highlights=year_highlights(yearly),
            scatter=self.scatter(rows),
            showing=len(rows),
            total=len(self._records),
        )
