from typing import Any, Dict, List, Literal, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from .query_plan import (
    DEFAULT_SORT_FIELD,
    DEFAULT_SORT_ORDER,
    IntentType,
    SearchCriteria,
    SortField,
    SortOrder,
)


class IPORecord(BaseModel):
    """One IPO row as supplied by the dataset (camelCase keys on the wire)."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    company: str
    ticker: str
    year: int
    ipo_price: Optional[float] = Field(default=None, alias="ipoPrice", ge=0)
    current_price: Optional[float] = Field(default=None, alias="currentPrice", ge=0)
    first_day_price: Optional[float] = Field(default=None, alias="firstDayPrice", ge=0)
    acquisition_price: Optional[float] = Field(default=None, alias="acquisitionPrice", ge=0)
    first_day_pop: float = Field(default=0.0, alias="firstDayPop")
    year1_return: Optional[float] = Field(default=None, alias="year1Return")
    year3_annualized_return: Optional[float] = Field(default=None, alias="year3AnnualizedReturn")
    year1_outperformance: Optional[float] = Field(default=None, alias="year1Outperformance")
    year3_outperformance: Optional[float] = Field(default=None, alias="year3Outperformance")
    status: str = "Public"
    tags: Tuple[str, ...] = ()

    @property
    def is_acquired(self) -> bool:
        return "Acquired" in self.status


SuggestionCategory = Literal["ticker", "tag", "year", "year range"]


class Suggestion(BaseModel):
    value: str
    display: str
    category: SuggestionCategory


class YearCount(BaseModel):
    year: int
    count: int


class YearHighlights(BaseModel):
    peak: Optional[YearCount] = None
    strong: List[YearCount] = Field(default_factory=list)
    recent: List[YearCount] = Field(default_factory=list)


class SummaryStats(BaseModel):
    total: int
    acquired: int
    still_public: int
    median_first_day_pop: int


class ScatterPoint(BaseModel):
    company: str
    ticker: str
    status: str
    year: int
    first_day_pop: float
    ipo_price: Optional[float]
    current_price: Optional[float]
    first_day_price: Optional[float]
    return_pct: Optional[float]
    current_return: Optional[float]
    year1_return: Optional[float]
    year3_annualized_return: Optional[float]
    year1_outperformance: Optional[float]
    year3_outperformance: Optional[float]


class ScatterView(BaseModel):
    x_axis: str
    y_axis: str
    x_label: str
    y_label: str
    x_range: Tuple[float, float]
    y_range: Tuple[float, float]
    points: List[ScatterPoint] = Field(default_factory=list)
    tooltips: List[List[str]] = Field(default_factory=list)


class QueryRequest(BaseModel):
    query: str = ""
    sort_by: SortField = DEFAULT_SORT_FIELD
    sort_order: SortOrder = DEFAULT_SORT_ORDER


class QueryMeta(BaseModel):
    query: str
    intent: IntentType
    criteria: Optional[SearchCriteria] = None
    sort_by: SortField
    sort_order: SortOrder
    debug: Dict[str, Any]


class QueryResponse(BaseModel):
    ok: bool
    meta: QueryMeta
    records: List[IPORecord] = Field(default_factory=list)
    suggestions: List[Suggestion] = Field(default_factory=list)
    summary: SummaryStats
    error: Optional[str] = None


class DashboardView(BaseModel):
    records: List[IPORecord]
    suggestions: List[Suggestion]
    summary: SummaryStats
    yearly_counts: List[YearCount]
    highlights: YearHighlights
    scatter: ScatterView
    showing: int
    total: int
