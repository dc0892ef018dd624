"""Per-candidate enrichment with weather and exchange-rate data."""
from __future__ import annotations

import asyncio
import logging
import os
import random
from dataclasses import dataclass, field, replace
from typing import List, Sequence, Tuple

from app.schemas import Coordinates, Destination, default_budget_breakdown
from app.tools.gateways import BASE_CURRENCY, CountrySummary, TravelDataGateways, WeatherReading
from app.tools.outcome import Fallback, FallbackReason, Outcome, merge_outcomes

logger = logging.getLogger(__name__)
if not logger.handlers:
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter("[%(levelname)s] %(name)s: %(message)s"))
    logger.addHandler(handler)
_level = os.getenv("TRAVELWISE_LOG_LEVEL", "INFO").upper()
logger.setLevel(getattr(logging, _level, logging.INFO))
logger.propagate = False

MAX_CANDIDATES = 6
WEATHER_CONDITIONS: Tuple[str, ...] = ("sunny", "cloudy", "partly-cloudy")
DEFAULT_FLAG = "🏴"


@dataclass(frozen=True)
class Baseline:
    """Environmental fields for one destination, synthetic until overwritten."""

    temperature_celsius: int
    weather_condition: str
    lat: float
    lng: float
    exchange_rate: float


@dataclass
class EnrichedCandidate:
    candidate: CountrySummary
    fields: Baseline
    fallbacks: List[Fallback] = field(default_factory=list)


def synthesize_baseline(rng: random.Random) -> Baseline:
    return Baseline(
        temperature_celsius=rng.randrange(20, 35),
        weather_condition=rng.choice(WEATHER_CONDITIONS),
        lat=rng.random() * 180 - 90,
        lng=rng.random() * 360 - 180,
        exchange_rate=rng.random() * 100 + 0.01,
    )


def _apply_weather(fields: Baseline, reading: WeatherReading) -> Baseline:
    return replace(
        fields,
        temperature_celsius=reading.temperature_celsius,
        weather_condition=reading.condition,
        lat=reading.lat,
        lng=reading.lng,
    )


def _apply_rate(fields: Baseline, rate: float) -> Baseline:
    return replace(fields, exchange_rate=rate)


async def _weather_outcome(candidate: CountrySummary, gateways: TravelDataGateways) -> Outcome:
    if not candidate.capital:
        return Fallback(FallbackReason.NOT_REQUESTED, "no capital city")
    return await gateways.weather.fetch_weather(candidate.capital)


async def _rate_outcome(candidate: CountrySummary, gateways: TravelDataGateways) -> Outcome:
    code = candidate.primary_currency
    if not code:
        return Fallback(FallbackReason.NOT_REQUESTED, "no currency")
    return await gateways.rates.fetch_exchange_rate(code)


async def enrich_candidate(
    candidate: CountrySummary,
    baseline: Baseline,
    gateways: TravelDataGateways,
) -> EnrichedCandidate:
    """Overlay real weather and exchange-rate data onto ``baseline``.

    Both lookups run concurrently. Whatever fails keeps its synthetic value,
    so the returned record is always complete.
    """
    weather, rate = await asyncio.gather(
        _weather_outcome(candidate, gateways),
        _rate_outcome(candidate, gateways),
    )
    fields, fallbacks = merge_outcomes(baseline, [(weather, _apply_weather), (rate, _apply_rate)])
    if fallbacks:
        logger.debug(
            "%s kept synthetic values for: %s",
            candidate.name,
            ", ".join(fb.reason.value for fb in fallbacks),
        )
    return EnrichedCandidate(candidate=candidate, fields=fields, fallbacks=fallbacks)


async def enrich_candidates(
    candidates: Sequence[CountrySummary],
    baselines: Sequence[Baseline],
    gateways: TravelDataGateways,
) -> List[EnrichedCandidate]:
    # Results come back in input order whatever order the requests finish in.
    return list(
        await asyncio.gather(
            *[enrich_candidate(c, b, gateways) for c, b in zip(candidates, baselines)]
        )
    )


def build_destination(index: int, enriched: EnrichedCandidate, match_score: int) -> Destination:
    candidate, fields = enriched.candidate, enriched.fields
    return Destination(
        id=str(index + 1),
        name=candidate.capital or candidate.name,
        country=candidate.name,
        flag_glyph=candidate.flag or DEFAULT_FLAG,
        temperature_celsius=fields.temperature_celsius,
        weather_condition=fields.weather_condition,
        currency_code=candidate.primary_currency or BASE_CURRENCY,
        exchange_rate=round(fields.exchange_rate, 4),
        coordinates=Coordinates(lat=fields.lat, lng=fields.lng),
        match_score=match_score,
        budget_breakdown=default_budget_breakdown(),
    )
