"""
Tests for filtering, layered sorting and summary aggregates
"""
import pytest

from conftest import make_record
from ipo_dashboard.executor import compute_summary, filter_records, sort_records
from ipo_dashboard.search_parser import parse_search_to_plan

SORT_FIELDS = [
    "company",
    "ticker",
    "year",
    "ipo_price",
    "first_day_pop",
    "year1_return",
    "year3_annualized_return",
    "year1_outperformance",
    "year3_outperformance",
]


def tickers(rows):
    return [r.ticker for r in rows]


def test_year_filter_exact(records):
    plan = parse_search_to_plan("2019-2020")

    result = filter_records(records, plan)

    assert tickers(result) == ["SNOW", "PATH", "PLTR", "CRWD", "SUMO"]
    assert all(r.year in plan.years for r in result)


def test_year_filter_keeps_every_match(records):
    plan = parse_search_to_plan("2020")
    expected = [r for r in records if r.year == 2020]

    assert filter_records(records, plan) == expected


def test_text_matches_company_ticker_or_tag(records):
    assert tickers(filter_records(records, parse_search_to_plan("snowflake"))) == ["SNOW"]
    assert tickers(filter_records(records, parse_search_to_plan("pltr"))) == ["PLTR"]
    assert tickers(filter_records(records, parse_search_to_plan("RPA"))) == ["PATH"]


def test_text_is_substring_of_tag(records):
    """Query "AI" hits both the "AI" tag and "AI Security"."""
    result = filter_records(records, parse_search_to_plan("AI"))

    assert tickers(result) == ["PLTR", "RBRK"]


def test_blank_search_passes_everything(records):
    assert filter_records(records, parse_search_to_plan("")) == records


def test_no_match_is_empty(records):
    assert filter_records(records, parse_search_to_plan("zzz-not-here")) == []


@pytest.mark.parametrize("field", SORT_FIELDS)
@pytest.mark.parametrize("direction", ["asc", "desc"])
def test_acquired_always_last(records, field, direction):
    result = sort_records(records, field, direction)
    flags = [r.is_acquired for r in result]

    assert flags == sorted(flags)


@pytest.mark.parametrize("direction", ["asc", "desc"])
def test_acquired_keep_input_order(records, direction):
    result = sort_records(records, "year", direction)

    assert tickers(result)[-2:] == ["PATH", "SUMO"]


def test_three_year_grouping_beats_raw_value():
    a = make_record("A", 2019, year3AnnualizedReturn=10.0)
    b = make_record("B", 2023, year1Return=50.0)
    c = make_record("C", 2019, year3AnnualizedReturn=5.0)

    result = sort_records([a, b, c], "year3_annualized_return", "desc")

    assert tickers(result) == ["A", "C", "B"]


def test_three_year_grouping_ascending_keeps_group_order():
    a = make_record("A", 2019, year3AnnualizedReturn=10.0)
    b = make_record("B", 2023, year1Return=50.0)
    c = make_record("C", 2019, year3AnnualizedReturn=5.0)
    d = make_record("D", 2024, year1Return=-10.0)

    result = sort_records([a, b, c, d], "year3_annualized_return", "asc")

    assert tickers(result) == ["C", "A", "D", "B"]


def test_outperformance_grouping_uses_year1_outperformance(records):
    result = sort_records(records, "year3_outperformance", "desc")

    # PLTR/SNOW/CRWD have 3-year data; RBRK only 1-year; LGCY nothing
    assert tickers(result) == ["PLTR", "SNOW", "CRWD", "RBRK", "LGCY", "PATH", "SUMO"]


def test_nulls_last_in_both_directions():
    a = make_record("A", 2020, year1Return=5.0)
    b = make_record("B", 2020)
    c = make_record("C", 2020, year1Return=-3.0)

    assert tickers(sort_records([a, b, c], "year1_return", "desc")) == ["A", "C", "B"]
    assert tickers(sort_records([a, b, c], "year1_return", "asc")) == ["C", "A", "B"]


def test_nan_is_treated_as_missing():
    a = make_record("A", 2020, year1Return=float("nan"))
    b = make_record("B", 2020, year1Return=1.0)

    assert tickers(sort_records([a, b], "year1_return", "asc")) == ["B", "A"]


def test_string_sort_is_case_insensitive():
    a = make_record("A", 2020, company="beta")
    b = make_record("B", 2020, company="Alpha")
    c = make_record("C", 2020, company="gamma")

    assert tickers(sort_records([a, b, c], "company", "asc")) == ["B", "A", "C"]
    assert tickers(sort_records([a, b, c], "company", "desc")) == ["C", "A", "B"]


def test_sort_is_stable_for_ties():
    rows = [make_record(t, 2020) for t in ("X", "Y", "Z")]

    assert tickers(sort_records(rows, "year", "desc")) == ["X", "Y", "Z"]


@pytest.mark.parametrize("field", SORT_FIELDS)
def test_sort_is_idempotent(records, field):
    plan = parse_search_to_plan("")
    once = sort_records(filter_records(records, plan), field, "desc")
    twice = sort_records(filter_records(once, plan), field, "desc")

    assert once == twice


def test_sort_does_not_mutate_input(records):
    before = list(records)

    sort_records(records, "company", "asc")

    assert records == before


def test_end_to_end_scenario():
    snow = make_record("SNOW", 2020, tags=["Data", "Cloud"])
    path = make_record("PATH", 2019, status="Acquired-by-X", tags=["RPA"])
    data = [path, snow]

    assert tickers(filter_records(data, parse_search_to_plan("2020"))) == ["SNOW"]
    assert tickers(sort_records(filter_records(data, parse_search_to_plan("")), "year", "desc")) == ["SNOW", "PATH"]
    assert tickers(sort_records(filter_records(data, parse_search_to_plan("")), "year", "asc")) == ["SNOW", "PATH"]
    assert tickers(filter_records(data, parse_search_to_plan("RPA"))) == ["PATH"]


def test_summary(records):
    summary = compute_summary(records)

    assert summary.total == 7
    assert summary.acquired == 2
    assert summary.still_public == 4
    # pops sorted: -2, 15.2, 23, 31, 71, 72, 111.6
    assert summary.median_first_day_pop == 31


def test_summary_even_count_rounds_half_up():
    rows = [make_record("A", 2020, firstDayPop=10.0), make_record("B", 2020, firstDayPop=11.0)]

    assert compute_summary(rows).median_first_day_pop == 11


def test_summary_empty():
    summary = compute_summary([])

    assert summary.total == 0
    assert summary.median_first_day_pop == 0
