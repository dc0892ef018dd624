from enum import Enum
from typing import Any, FrozenSet, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from app.agents.interest_selection import InterestSelection

KNOWN_REGIONS = ("Europe", "Asia", "Africa", "North America", "South America", "Australia")


# ------- Request models -------
class TravelMode(str, Enum):
    solo = "solo"
    companion = "companion"


class SearchCriteria(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    budget: Optional[float] = Field(None, gt=0)
    region: str = "Europe"
    month: str = ""
    interests: FrozenSet[str] = Field(default_factory=frozenset)
    travel_mode: TravelMode = Field(TravelMode.solo, alias="travelMode")

    @field_validator("budget", mode="before")
    @classmethod
    def _blank_budget(cls, value: Any) -> Any:
        # Form posts send "" for an untouched budget field.
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("region", mode="before")
    @classmethod
    def _strip_region(cls, value: Any) -> Any:
        if value is None:
            return "Europe"
        return str(value).strip() or "Europe"

    @field_validator("interests", mode="before")
    @classmethod
    def _normalise_interests(cls, value: Any) -> FrozenSet[str]:
        if value is None:
            return frozenset()
        if isinstance(value, str):
            selection = InterestSelection.from_serialized(value)
        else:
            selection = InterestSelection(str(item) for item in value if item is not None)
        return frozenset(selection.selected)


# ------- Response models -------
class Coordinates(BaseModel):
    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)


class BudgetSlice(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    category: str = Field(..., alias="name")
    percentage: int = Field(..., alias="value")
    color_tag: str = Field(..., alias="color")


BUDGET_BREAKDOWN = (
    ("Accommodation", 35, "#8884d8"),
    ("Food", 25, "#82ca9d"),
    ("Activities", 20, "#ffc658"),
    ("Transport", 20, "#ff7300"),
)


def default_budget_breakdown() -> List[BudgetSlice]:
    return [
        BudgetSlice(category=category, percentage=percentage, color_tag=color)
        for category, percentage, color in BUDGET_BREAKDOWN
    ]


class Destination(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str
    country: str
    flag_glyph: str = Field("🏴", alias="flag")
    temperature_celsius: int = Field(..., alias="temperature")
    weather_condition: str = Field(..., alias="weather")
    currency_code: str = Field("USD", alias="currency")
    exchange_rate: float = Field(..., alias="exchangeRate")
    coordinates: Coordinates
    match_score: int = Field(..., le=100, alias="matchScore")
    budget_breakdown: List[BudgetSlice] = Field(default_factory=default_budget_breakdown, alias="budgetBreakdown")

    @model_validator(mode="after")
    def _breakdown_is_whole(self) -> "Destination":
        total = sum(item.percentage for item in self.budget_breakdown)
        if total != 100:
            raise ValueError(f"budget breakdown must sum to 100, got {total}")
        return self


class ShowcaseDestination(Destination):
    description: str = ""
    best_time_to_visit: str = Field("", alias="bestTimeToVisit")
    popular_activities: List[str] = Field(default_factory=list, alias="popularActivities")


class PlanResult(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    destinations: List[Destination] = Field(default_factory=list)
    error: Optional[str] = None
    tier: Literal["live", "region-fallback", "sample"] = "live"
    search_params: Optional[SearchCriteria] = Field(None, alias="searchParams")
