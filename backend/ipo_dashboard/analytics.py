# analytics.py
from datetime import date
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from .config import settings
from .executor import is_missing, round_half_up
from .schemas import IPORecord, ScatterPoint, ScatterView, YearCount, YearHighlights

AXIS_LABELS: Dict[str, str] = {
    "first_day_pop": "First Day Pop %",
    "ipo_price": "IPO Price ($)",
    "current_price": "Current Price ($)",
    "first_day_price": "First Day Price ($)",
    "year": "IPO Year",
    "return_pct": "Total Return %",
    "current_return": "Current Return (x)",
    "year1_return": "Year 1 Return %",
    "year3_annualized_return": "3-Year Annualized Return %",
    "year1_outperformance": "Year 1 vs IGV %",
    "year3_outperformance": "3-Year vs IGV %",
}

PERCENT_AXES = {
    "first_day_pop",
    "return_pct",
    "year1_return",
    "year3_annualized_return",
    "year1_outperformance",
    "year3_outperformance",
}
PRICE_AXES = {"ipo_price", "current_price", "first_day_price"}
MULTIPLE_AXES = {"current_return"}

DEFAULT_SCATTER_X = "first_day_pop"
DEFAULT_SCATTER_Y = "return_pct"

STRONG_YEAR_MIN_COUNT = 5
RECENT_YEAR_START = 2023


def yearly_counts(records: Iterable[IPORecord], current_year: Optional[int] = None) -> List[YearCount]:
    """IPO count per year from the dataset floor through max(current year, ceiling), zero-filled."""
    if current_year is None:
        current_year = date.today().year
    end_year = max(current_year, settings.dataset_max_year)

    counts: Dict[int, int] = {}
    for r in records:
        counts[r.year] = counts.get(r.year, 0) + 1

    return [
        YearCount(year=year, count=counts.get(year, 0))
        for year in range(settings.dataset_min_year, end_year + 1)
    ]


def year_highlights(yearly: Sequence[YearCount]) -> YearHighlights:
    if not yearly:
        return YearHighlights()
    # sorted() is stable, so ties keep the earlier year first
    by_count = sorted(yearly, key=lambda y: y.count, reverse=True)
    return YearHighlights(
        peak=by_count[0],
        strong=[y for y in by_count[1:6] if y.count >= STRONG_YEAR_MIN_COUNT],
        recent=sorted((y for y in yearly if y.year >= RECENT_YEAR_START), key=lambda y: y.year),
    )


def exit_price(record: IPORecord) -> Optional[float]:
    """Current price, or the acquisition price when the company no longer trades."""
    if record.current_price is not None:
        return record.current_price
    return record.acquisition_price


def total_return_pct(record: IPORecord) -> Optional[float]:
    price = exit_price(record)
    if is_missing(price) or is_missing(record.ipo_price) or not record.ipo_price:
        return None
    return (price - record.ipo_price) / record.ipo_price * 100


def current_multiple(record: IPORecord) -> Optional[float]:
    price = exit_price(record)
    if is_missing(price) or is_missing(record.ipo_price) or not record.ipo_price:
        return None
    return price / record.ipo_price


def implied_first_day_price(record: IPORecord) -> Optional[float]:
    if record.first_day_price:
        return record.first_day_price
    if is_missing(record.ipo_price) or is_missing(record.first_day_pop):
        return None
    return record.ipo_price * (1 + record.first_day_pop / 100)


def scatter_points(records: Iterable[IPORecord]) -> List[ScatterPoint]:
    return [
        ScatterPoint(
            company=r.company,
            ticker=r.ticker,
            status=r.status,
            year=r.year,
            first_day_pop=r.first_day_pop,
            ipo_price=r.ipo_price,
            current_price=r.current_price,
            first_day_price=implied_first_day_price(r),
            return_pct=total_return_pct(r),
            current_return=current_multiple(r),
            year1_return=r.year1_return,
            year3_annualized_return=r.year3_annualized_return,
            year1_outperformance=r.year1_outperformance,
            year3_outperformance=r.year3_outperformance,
        )
        for r in records
    ]


def axis_range(points: Sequence[ScatterPoint], axis: str) -> Tuple[float, float]:
    """Axis domain padded by 10% of the span on each side, never below zero."""
    values = [v for v in (getattr(p, axis) for p in points) if isinstance(v, (int, float)) and not is_missing(v)]
    if not values:
        return (0.0, 100.0)
    low, high = min(values), max(values)
    padding = (high - low) * 0.1
    return (max(0.0, low - padding), high + padding)


def format_axis_value(value: Optional[float], axis: str) -> str:
    if is_missing(value):
        return ""
    if axis in PERCENT_AXES:
        return f"{round_half_up(value)}%"
    if axis in MULTIPLE_AXES:
        return f"{value:.1f}x"
    if axis in PRICE_AXES:
        if value >= 1_000_000:
            return f"${round_half_up(value / 1_000_000)}M"
        if value >= 1000:
            return f"${round_half_up(value / 1000)}K"
        return f"${round_half_up(value)}"
    return str(round_half_up(value))


def check_axis(axis: str) -> str:
    if axis not in AXIS_LABELS:
        raise ValueError(f"Unknown scatter axis {axis!r}; expected one of {sorted(AXIS_LABELS)}")
    return axis


def scatter_tooltip(point: ScatterPoint, x_axis: str, y_axis: str) -> List[str]:
    return [
        f"{point.company} ({point.ticker})",
        f"{AXIS_LABELS[x_axis]}: {format_axis_value(getattr(point, x_axis), x_axis)}",
        f"{AXIS_LABELS[y_axis]}: {format_axis_value(getattr(point, y_axis), y_axis)}",
        point.status,
    ]


def build_scatter_view(
    records: Iterable[IPORecord],
    x_axis: str = DEFAULT_SCATTER_X,
    y_axis: str = DEFAULT_SCATTER_Y,
) -> ScatterView:
    """Points for the configurable scatter chart with padded axis domains and tooltip lines."""
    check_axis(x_axis)
    check_axis(y_axis)
    points = scatter_points(records)
    return ScatterView(
        x_axis=x_axis,
        y_axis=y_axis,
        x_label=AXIS_LABELS[x_axis],
        y_label=AXIS_LABELS[y_axis],
        x_range=axis_range(points, x_axis),
        y_range=axis_range(points, y_axis),
        points=points,
        tooltips=[scatter_tooltip(p, x_axis, y_axis) for p in points],
    )


def status_category(status: str) -> str:
    if status == "Public":
        return "public"
    if "Acquired" in status:
        return "acquired"
    if "Merged" in status:
        return "merged"
    if "Delisted" in status:
        return "delisted"
    if "Re-IPO" in status:
        return "re-ipo"
    return "other"


def performance_tier(current_price: Optional[float], ipo_price: Optional[float]) -> Optional[str]:
    if is_missing(current_price) or is_missing(ipo_price) or not ipo_price:
        return None
    pct = (current_price - ipo_price) / ipo_price * 100
    if pct >= 100:
        return "soaring"
    if pct >= 50:
        return "strong"
    if pct >= 0:
        return "positive"
    return "negative"


def visible_tags(tags: Sequence[str], limit: int = 3) -> Tuple[List[str], int]:
    """First `limit` tags for display plus how many were left out."""
    shown = list(tags[:limit])
    return shown, max(0, len(tags) - limit)
