# query_plan.py
from typing import Annotated, Any, Dict, FrozenSet, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class YearCriteria(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["years"] = "years"
    years: FrozenSet[int]


class TextCriteria(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["text"] = "text"
    term: str  # already lower-cased


SearchCriteria = Annotated[Union[YearCriteria, TextCriteria], Field(discriminator="kind")]

IntentType = Literal[
    "all",
    "year_filter",
    "text_search",
]

SortField = Literal[
    "company",
    "ticker",
    "year",
    "ipo_price",
    "current_price",
    "first_day_price",
    "first_day_pop",
    "year1_return",
    "year3_annualized_return",
    "year1_outperformance",
    "year3_outperformance",
]

SortOrder = Literal["asc", "desc"]

DEFAULT_SORT_FIELD: SortField = "year3_annualized_return"
DEFAULT_SORT_ORDER: SortOrder = "desc"


class SearchPlan(BaseModel):
    intent: IntentType = "all"
    criteria: Optional[SearchCriteria] = None

    # For debug info we want to surface in meta.debug
    debug: Dict[str, Any] = Field(default_factory=dict)

    @property
    def years(self) -> Optional[FrozenSet[int]]:
        if isinstance(self.criteria, YearCriteria):
            return self.criteria.years
        return None

    @property
    def term(self) -> Optional[str]:
        if isinstance(self.criteria, TextCriteria):
            return self.criteria.term
        return None


class SortSpec(BaseModel):
    field: SortField = DEFAULT_SORT_FIELD
    direction: SortOrder = DEFAULT_SORT_ORDER

    @property
    def descending(self) -> bool:
        return self.direction == "desc"
