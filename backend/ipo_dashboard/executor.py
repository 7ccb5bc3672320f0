# executor.py
import math
from functools import cmp_to_key
from typing import Callable, List, Optional, Sequence

from .query_plan import SearchPlan, SortField, SortOrder, SortSpec
from .schemas import IPORecord, SummaryStats

# Sort fields whose records are grouped by 3-year data availability, with the
# 1-year counterpart used inside the "no 3-year data" group.
YEAR1_FALLBACK = {
    "year3_annualized_return": "year1_return",
    "year3_outperformance": "year1_outperformance",
}

# A step returns None to defer to the next step, or a final cmp result.
SortStep = Callable[[IPORecord, IPORecord, SortSpec], Optional[int]]


def is_missing(val) -> bool:
    return val is None or (isinstance(val, float) and math.isnan(val))


def _cmp(a, b) -> int:
    return (a > b) - (a < b)


def record_matches_term(record: IPORecord, term: str) -> bool:
    """Substring match against company OR ticker OR any tag (case-insensitive)."""
    if term in record.company.lower() or term in record.ticker.lower():
        return True
    return any(term in tag.lower() for tag in record.tags)


def filter_records(records: Sequence[IPORecord], plan: SearchPlan) -> List[IPORecord]:
    years = plan.years
    if years is not None:
        return [r for r in records if r.year in years]
    term = plan.term
    if term is not None:
        return [r for r in records if record_matches_term(r, term)]
    return list(records)


def acquisition_floor(a: IPORecord, b: IPORecord, spec: SortSpec) -> Optional[int]:
    if a.is_acquired and b.is_acquired:
        return 0
    if a.is_acquired:
        return 1
    if b.is_acquired:
        return -1
    return None


def data_availability(a: IPORecord, b: IPORecord, spec: SortSpec) -> Optional[int]:
    if spec.field not in YEAR1_FALLBACK:
        return None
    a_has = not is_missing(getattr(a, spec.field))
    b_has = not is_missing(getattr(b, spec.field))
    if a_has and not b_has:
        return -1
    if b_has and not a_has:
        return 1
    return None


def comparison_field(a: IPORecord, spec: SortSpec) -> str:
    """Field actually compared once availability grouping has put a and b in the same group."""
    fallback = YEAR1_FALLBACK.get(spec.field)
    if fallback and is_missing(getattr(a, spec.field)):
        return fallback
    return spec.field


def nulls_last(a: IPORecord, b: IPORecord, spec: SortSpec) -> Optional[int]:
    field = comparison_field(a, spec)
    a_missing = is_missing(getattr(a, field))
    b_missing = is_missing(getattr(b, field))
    if a_missing and b_missing:
        return 0
    if a_missing:
        return 1
    if b_missing:
        return -1
    return None


def base_compare(a: IPORecord, b: IPORecord, spec: SortSpec) -> Optional[int]:
    field = comparison_field(a, spec)
    a_val = getattr(a, field)
    b_val = getattr(b, field)
    if isinstance(a_val, str) and isinstance(b_val, str):
        result = _cmp(a_val.casefold(), b_val.casefold()) or _cmp(a_val, b_val)
    else:
        result = _cmp(a_val, b_val)
    return -result if spec.descending else result


SORT_STEPS: List[SortStep] = [
    acquisition_floor,
    data_availability,
    nulls_last,
    base_compare,
]


def compare_records(a: IPORecord, b: IPORecord, spec: SortSpec) -> int:
    for step in SORT_STEPS:
        result = step(a, b, spec)
        if result is not None:
            return result
    return 0


def sort_records(
    records: Sequence[IPORecord],
    field: SortField = "year3_annualized_return",
    direction: SortOrder = "desc",
) -> List[IPORecord]:
    """
    Stable sort with layered rules:
      1. acquired companies always last (and left in input order among themselves)
      2. for 3-year fields, records with 3-year data before those with only 1-year data
      3. missing values last, regardless of direction
      4. plain comparison on the field, direction aware
    """
    spec = SortSpec(field=field, direction=direction)
    return sorted(records, key=cmp_to_key(lambda a, b: compare_records(a, b, spec)))


def round_half_up(val: float) -> int:
    return math.floor(val + 0.5)


def compute_summary(records: Sequence[IPORecord]) -> SummaryStats:
    if not records:
        return SummaryStats(total=0, acquired=0, still_public=0, median_first_day_pop=0)

    pops = sorted(r.first_day_pop for r in records if not is_missing(r.first_day_pop))
    median = 0.0
    if pops:
        mid = len(pops) // 2
        median = pops[mid] if len(pops) % 2 else (pops[mid - 1] + pops[mid]) / 2

    return SummaryStats(
        total=len(records),
        acquired=sum(1 for r in records if r.is_acquired),
        still_public=sum(1 for r in records if r.status == "Public"),
        median_first_day_pop=round_half_up(median),
    )
