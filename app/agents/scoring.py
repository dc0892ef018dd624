"""Match-score heuristics and ranking for destinations."""
from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Iterable, List, Tuple

from app.schemas import Destination, SearchCriteria

MAX_SCORE = 100
BUDGET_BONUS = 10
INTEREST_BONUS = 15

COASTAL_KEYWORDS: Tuple[str, ...] = ("island", "coast")
COASTAL_COUNTRIES: Tuple[str, ...] = ("thailand", "greece", "spain", "italy", "croatia")
MOUNTAIN_COUNTRIES: Tuple[str, ...] = ("switzerland", "austria", "nepal", "peru", "chile")


@dataclass(frozen=True)
class ScoreDraw:
    """Random inputs to one score: a base desirability and an estimated trip cost."""

    base: int
    estimated_cost: int


def draw_score_inputs(rng: random.Random) -> ScoreDraw:
    return ScoreDraw(base=rng.randrange(70, 100), estimated_cost=rng.randrange(1000, 3000))


def _matches_interests(country_name: str, interests: Iterable[str]) -> bool:
    wanted = set(interests)
    name = country_name.lower()
    beach = "beach" in wanted and any(
        keyword in name for keyword in COASTAL_KEYWORDS + COASTAL_COUNTRIES
    )
    mountains = "mountains" in wanted and any(country in name for country in MOUNTAIN_COUNTRIES)
    return beach or mountains


def match_score(country_name: str, criteria: SearchCriteria, draw: ScoreDraw) -> int:
    """Score a country against the criteria, capped at 100.

    Only ``beach`` and ``mountains`` interests move the score, and the
    interest bonus is applied at most once. There is no lower clamp.
    """
    score = draw.base
    if criteria.budget is not None and draw.estimated_cost <= criteria.budget:
        score += BUDGET_BONUS
    if criteria.interests and _matches_interests(country_name, criteria.interests):
        score += INTEREST_BONUS
    return min(score, MAX_SCORE)


def rank_destinations(destinations: Iterable[Destination]) -> List[Destination]:
    # sorted() is stable, so ties keep their input order
    return sorted(destinations, key=lambda dest: dest.match_score, reverse=True)
