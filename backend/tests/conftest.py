from pathlib import Path

import pytest

from ipo_dashboard.schemas import IPORecord

FIXTURES = Path(__file__).parent / "fixtures"


def make_record(ticker, year, **overrides):
    data = {
        "company": f"{ticker.title()} Inc",
        "ticker": ticker,
        "year": year,
        "ipoPrice": 20.0,
        "firstDayPop": 10.0,
        "status": "Public",
        "tags": [],
    }
    data.update(overrides)
    return IPORecord.model_validate(data)


@pytest.fixture
def fixtures_dir():
    return FIXTURES


@pytest.fixture
def records():
    """Small mixed dataset: public, acquired, young (1-year only) and multi-tag records."""
    return [
        make_record(
            "SNOW", 2020, company="Snowflake", tags=["Data", "Cloud"],
            year1Return=25.0, year3AnnualizedReturn=10.0,
            year1Outperformance=5.0, year3Outperformance=3.0, firstDayPop=111.6,
        ),
        make_record(
            "PATH", 2019, company="UiPath", status="Acquired by X (2024)", tags=["RPA"],
            year1Return=80.0, year3AnnualizedReturn=40.0, firstDayPop=23.0,
        ),
        make_record(
            "PLTR", 2020, company="Palantir", tags=["AI", "Data Analytics", "Government", "Security"],
            year1Return=140.0, year3AnnualizedReturn=20.0, year3Outperformance=12.0, firstDayPop=31.0,
        ),
        make_record(
            "RBRK", 2024, company="Rubrik", tags=["AI Security", "Data"],
            year1Return=50.0, year1Outperformance=30.0, firstDayPop=15.2,
        ),
        make_record(
            "CRWD", 2019, company="CrowdStrike", tags=["Security"],
            year1Return=-5.0, year3AnnualizedReturn=5.0, year3Outperformance=-1.0, firstDayPop=71.0,
        ),
        make_record(
            "SUMO", 2020, company="Sumo Logic", status="Acquired by Francisco Partners (2023)",
            tags=["Observability"], firstDayPop=-2.0,
        ),
        make_record("LGCY", 2012, company="Legacy Cloud", status="Delisted", firstDayPop=72.0),
    ]
