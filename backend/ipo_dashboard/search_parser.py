# search_parser.py
import logging
import re
from typing import Any, Dict, List, Optional, Set, Tuple

from .config import settings
from .query_plan import SearchPlan, TextCriteria, YearCriteria

log = logging.getLogger(__name__)

# Pre-compiled regex helpers (ASCII digits only; int() would accept other scripts)
YEAR_RANGE_RE = re.compile(r"^([0-9]{4})(?:\s*-\s*([0-9]{4}))?$")
YEAR_LIST_RE = re.compile(r"^[0-9,\s]*,[0-9,\s]*$")
OPEN_RANGE_RE = re.compile(r"^([0-9]{4})\s*-$")
YEAR_TOKEN_RE = re.compile(r"^[0-9]{4}$")


def _add_signal(debug: Dict[str, Any], name: str, payload: Any = None) -> None:
    signals: List[str] = debug.setdefault("signals", [])
    signals.append(name)
    if payload is not None:
        debug.setdefault("details", {})[name] = payload


def _year_span(start: int, end: int) -> Set[int]:
    return set(range(start, end + 1))


def _parse_year_list(text: str) -> Tuple[Set[int], List[str]]:
    """Split "2020, 2022" into years; tokens that are not four digits are dropped."""
    years: Set[int] = set()
    dropped: List[str] = []
    for part in text.split(","):
        token = part.strip()
        if YEAR_TOKEN_RE.match(token):
            years.add(int(token))
        else:
            dropped.append(token)
    return years, dropped


def _match_years(text: str, max_year: int, debug: Dict[str, Any]) -> Optional[Set[int]]:
    m = YEAR_RANGE_RE.match(text)
    if m:
        start = int(m.group(1))
        end = int(m.group(2)) if m.group(2) else start
        _add_signal(debug, "year_range", {"start": start, "end": end})
        return _year_span(start, end)

    if YEAR_LIST_RE.match(text):
        years, dropped = _parse_year_list(text)
        _add_signal(debug, "year_list", sorted(years))
        if dropped:
            debug["dropped_tokens"] = dropped
            log.warning("Dropped malformed year tokens %r from %r", dropped, text)
        return years

    m = OPEN_RANGE_RE.match(text)
    if m:
        start = int(m.group(1))
        _add_signal(debug, "open_year_range", {"start": start, "end": max_year})
        return _year_span(start, max_year)

    return None


def parse_search_to_plan(text: str, max_year: Optional[int] = None) -> SearchPlan:
    """
    Rule-based parser that turns the raw search box string into a SearchPlan.

    Supports, first match wins:
      - a single year or inclusive range ("2020", "2020-2023")
      - a comma-separated list of years ("2020, 2022")
      - an open-ended range up to max_year ("2020-")
      - anything else as a lower-cased substring term for company/ticker/tags

    A year form that yields no usable years falls back to text search over
    the whole string.
    """
    if max_year is None:
        max_year = settings.dataset_max_year

    stripped = (text or "").strip()
    debug: Dict[str, Any] = {"raw": text, "signals": []}

    if not stripped:
        _add_signal(debug, "blank")
        return SearchPlan(intent="all", debug=debug)

    years = _match_years(stripped, max_year, debug)
    if years:
        log.debug("Parsed %r as years %s", stripped, sorted(years))
        return SearchPlan(
            intent="year_filter",
            criteria=YearCriteria(years=frozenset(years)),
            debug=debug,
        )
    if years is not None:
        _add_signal(debug, "empty_years_fallback")

    term = stripped.lower()
    _add_signal(debug, "text", {"term": term})
    return SearchPlan(intent="text_search", criteria=TextCriteria(term=term), debug=debug)
