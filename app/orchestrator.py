# app/orchestrator.py
from __future__ import annotations

import asyncio
import logging
import os
import random
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple

from app.agents.enrichment import (
    MAX_CANDIDATES,
    build_destination,
    enrich_candidates,
    synthesize_baseline,
)
from app.agents.fallback_catalog import (
    DEFAULT_REGION,
    SAMPLE_ADVISORY,
    generate_fallback_destinations,
    sample_destinations,
)
from app.agents.scoring import draw_score_inputs, match_score, rank_destinations
from app.config import Settings
from app.schemas import KNOWN_REGIONS, Destination, PlanResult, SearchCriteria
from app.tools.gateways import TravelDataGateways, open_gateways
from app.tools.outcome import FallbackReason, Ok

logger = logging.getLogger(__name__)
if not logger.handlers:
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter("[%(levelname)s] %(name)s: %(message)s"))
    logger.addHandler(handler)
_level = os.getenv("TRAVELWISE_LOG_LEVEL", "INFO").upper()
logger.setLevel(getattr(logging, _level, logging.INFO))
logger.propagate = False


def make_rng(settings: Settings) -> random.Random:
    """Seeded generator when configured, otherwise seeded from OS entropy."""
    return random.Random(settings.random_seed)


# ---------- aggregation pipeline ----------
async def aggregate_destinations(
    criteria: SearchCriteria,
    gateways: TravelDataGateways,
    rng: random.Random,
) -> Tuple[List[Destination], str]:
    """Fetch, enrich, score and rank destinations for ``criteria``.

    Returns the ranked destinations and the tier that produced them
    (``live`` or ``region-fallback``).
    """
    directory = await gateways.directory.fetch_countries_by_region(criteria.region)
    if not isinstance(directory, Ok):
        logger.warning(
            "Country directory failed (%s); using fallback destinations for %s",
            directory.detail or directory.reason.value,
            criteria.region,
        )
        if criteria.region not in KNOWN_REGIONS:
            logger.info("Region %s has no seed list; serving %s seeds", criteria.region, DEFAULT_REGION)
        destinations = generate_fallback_destinations(criteria.region, rng)
        return rank_destinations(destinations), "region-fallback"

    candidates = directory.value[:MAX_CANDIDATES]
    # Draw every random value up front so a seeded generator gives the same
    # output whatever order the concurrent lookups complete in.
    draws = [(synthesize_baseline(rng), draw_score_inputs(rng)) for _ in candidates]
    enriched = await enrich_candidates(candidates, [baseline for baseline, _ in draws], gateways)

    destinations = [
        build_destination(index, item, match_score(item.candidate.name, criteria, score_draw))
        for index, (item, (_, score_draw)) in enumerate(zip(enriched, draws))
    ]
    partial = sum(1 for item in enriched if item.fallbacks)
    logger.info("Enriched %d candidates; %d kept at least one synthetic field", len(enriched), partial)
    return rank_destinations(destinations), "live"


async def plan_trip(
    criteria: SearchCriteria,
    *,
    gateways: Optional[TravelDataGateways] = None,
    rng: Optional[random.Random] = None,
    settings: Optional[Settings] = None,
) -> PlanResult:
    """Produce ranked destination recommendations; never raises.

    Upstream failures degrade per field or per region inside
    :func:`aggregate_destinations`. Anything else that goes wrong is logged and
    answered with the static sample result plus an advisory message.
    """
    settings = settings or Settings.from_env()
    rng = rng or make_rng(settings)
    logger.info(
        "Planning trip: region=%s, month=%s, budget=%s, interests=%s, mode=%s",
        criteria.region,
        criteria.month or "any",
        criteria.budget,
        ",".join(sorted(criteria.interests)) or "none",
        criteria.travel_mode.value,
    )

    try:
        if gateways is not None:
            destinations, tier = await aggregate_destinations(criteria, gateways, rng)
        else:
            async with open_gateways(settings) as opened:
                destinations, tier = await aggregate_destinations(criteria, opened, rng)
    except Exception:
        logger.exception("Trip planning failed; serving sample results")
        return PlanResult(destinations=sample_destinations(), error=SAMPLE_ADVISORY, tier="sample")

    logger.info("Serving %d destinations for %s (%s)", len(destinations), criteria.region, tier)
    return PlanResult(destinations=destinations, tier=tier, search_params=criteria)


# ---------- upstream diagnostics ----------
PROBE_REGION = "Europe"
PROBE_CITY = "Paris"
PROBE_CURRENCIES = ("EUR", "GBP", "JPY")


async def probe_upstreams(gateways: TravelDataGateways) -> Dict[str, Any]:
    """Call each upstream once with a known sample and report what worked."""
    countries, weather, *rates = await asyncio.gather(
        gateways.directory.fetch_countries_by_region(PROBE_REGION),
        gateways.weather.fetch_weather(PROBE_CITY),
        *[gateways.rates.fetch_exchange_rate(code) for code in PROBE_CURRENCIES],
    )

    apis: Dict[str, Dict[str, Any]] = {}
    if isinstance(countries, Ok):
        apis["restCountries"] = {
            "status": "working",
            "message": f"Found {len(countries.value)} countries",
            "sampleData": [
                {"name": c.name, "capital": c.capital or "N/A", "flag": c.flag}
                for c in countries.value[:2]
            ],
        }
    else:
        apis["restCountries"] = {"status": "failed", "message": countries.detail or countries.reason.value}

    if isinstance(weather, Ok):
        apis["openWeatherMap"] = {
            "status": "working",
            "message": "API key valid and working",
            "sampleData": {
                "city": PROBE_CITY,
                "temperature": weather.value.temperature_celsius,
                "weather": weather.value.condition,
            },
        }
    elif weather.reason is FallbackReason.NO_CREDENTIAL:
        apis["openWeatherMap"] = {
            "status": "no-api-key",
            "message": "OPENWEATHER_API_KEY not found in environment variables",
        }
    else:
        apis["openWeatherMap"] = {"status": "failed", "message": weather.detail or weather.reason.value}

    found = {code: rate.value for code, rate in zip(PROBE_CURRENCIES, rates) if isinstance(rate, Ok)}
    if found:
        apis["exchangeRateHost"] = {
            "status": "working",
            "message": "Exchange rates retrieved successfully",
            "sampleData": found,
        }
    else:
        failure = rates[0]
        apis["exchangeRateHost"] = {"status": "failed", "message": failure.detail or failure.reason.value}

    working = sum(1 for api in apis.values() if api["status"] == "working")
    if working == len(apis):
        recommendation = "All APIs working! You're getting real data."
    elif working:
        recommendation = "Some APIs working, others using fallback data."
    else:
        recommendation = "All APIs failed, using fallback data only."

    return {
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "apis": apis,
        "summary": {"workingApis": f"{working}/{len(apis)}", "recommendation": recommendation},
    }
