import logging
from typing import Any, Dict, Sequence

from .executor import compute_summary, filter_records, sort_records
from .query_plan import SearchPlan
from .schemas import IPORecord, QueryMeta, QueryRequest, QueryResponse
from .search_parser import parse_search_to_plan
from .suggestions import generate_suggestions

log = logging.getLogger(__name__)


def _build_meta(req: QueryRequest, plan: SearchPlan, debug: Dict[str, Any]) -> QueryMeta:
    return QueryMeta(
        query=req.query,
        intent=plan.intent,
        criteria=plan.criteria,
        sort_by=req.sort_by,
        sort_order=req.sort_order,
        debug=debug,
    )


def run_query(req: QueryRequest, records: Sequence[IPORecord]) -> QueryResponse:
    """
    Search box pipeline: parse -> filter -> sort, plus suggestions for the
    same raw string.

    Never raises for a bad query; an unexpected failure comes back as
    ok=False with an empty result so the table can still render.
    """
    plan = parse_search_to_plan(req.query)
    debug = plan.debug or {}
    debug["record_count"] = len(records)

    try:
        filtered = filter_records(records, plan)
        ordered = sort_records(filtered, req.sort_by, req.sort_order)
        suggestions = generate_suggestions(req.query, records)
        debug["matched"] = len(ordered)

        # QueryMeta copies debug, so build it only once debug is complete
        return QueryResponse(
            ok=True,
            meta=_build_meta(req, plan, debug),
            records=ordered,
            suggestions=suggestions,
            summary=compute_summary(ordered),
        )
    except Exception as exc:
        log.exception("Query %r failed", req.query)
        debug["matched"] = 0
        return QueryResponse(
            ok=False,
            meta=_build_meta(req, plan, debug),
            records=[],
            suggestions=[],
            summary=compute_summary([]),
            error=str(exc),
        )
