# suggestions.py
import logging
import re
from datetime import date
from typing import Dict, List, Optional, Sequence

from .config import settings
from .schemas import IPORecord, Suggestion

log = logging.getLogger(__name__)

PARTIAL_YEAR_RE = re.compile(r"^[0-9]{1,4}$")

# Shown before the user has typed anything
DEFAULT_SUGGESTIONS = [
    Suggestion(value="2020-2025", display="2020-2025", category="year range"),
    Suggestion(value="2023", display="2023", category="year"),
    Suggestion(value="AI", display="AI", category="tag"),
    Suggestion(value="Security", display="Security", category="tag"),
    Suggestion(value="SNOW", display="SNOW (Snowflake)", category="ticker"),
    Suggestion(value="PLTR", display="PLTR (Palantir)", category="ticker"),
]


def _company_suggestions(query: str, records: Sequence[IPORecord]) -> List[Suggestion]:
    return [
        Suggestion(value=r.ticker, display=f"{r.ticker} ({r.company})", category="ticker")
        for r in records
        if query in r.company.lower() or query in r.ticker.lower()
    ]


def _tag_suggestions(query: str, records: Sequence[IPORecord]) -> List[Suggestion]:
    # dict keeps first-seen order
    tag_counts: Dict[str, int] = {}
    for r in records:
        for tag in dict.fromkeys(r.tags):
            tag_counts[tag] = tag_counts.get(tag, 0) + 1

    return [
        Suggestion(value=tag, display=f"{tag} ({count} companies)", category="tag")
        for tag, count in tag_counts.items()
        if query in tag.lower()
    ]


def _year_suggestions(query: str, current_year: int) -> List[Suggestion]:
    if not PARTIAL_YEAR_RE.match(query):
        return []
    out = [
        Suggestion(value=str(year), display=str(year), category="year")
        for year in range(settings.dataset_min_year, current_year + 1)
        if str(year).startswith(query)
    ]
    if len(query) == 4:
        span = f"{query}-{current_year}"
        out.append(Suggestion(value=span, display=span, category="year range"))
    return out


def generate_suggestions(
    text: str,
    records: Sequence[IPORecord],
    current_year: Optional[int] = None,
    limit: Optional[int] = None,
) -> List[Suggestion]:
    """
    Autocomplete candidates for the search box, in generation order:
    matching tickers/companies, then tags, then years. Capped at `limit`.
    """
    if limit is None:
        limit = settings.suggestion_limit
    query = (text or "").strip()
    if len(query) < settings.suggestion_min_chars:
        return [s.model_copy() for s in DEFAULT_SUGGESTIONS[:limit]]

    if current_year is None:
        current_year = date.today().year

    lowered = query.lower()
    suggestions = (
        _company_suggestions(lowered, records)
        + _tag_suggestions(lowered, records)
        + _year_suggestions(query, current_year)
    )
    log.debug("%d suggestions for %r before cap", len(suggestions), query)
    return suggestions[:limit]
