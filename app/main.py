from __future__ import annotations

from typing import Any, Dict, List

from fastapi import Body, FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import ValidationError

from app.agents.fallback_catalog import SHOWCASE_DESTINATIONS, find_showcase_destination
from app.config import Settings
from app.orchestrator import plan_trip, probe_upstreams
from app.schemas import SearchCriteria
from app.tools.gateways import open_gateways

settings = Settings.from_env()

app = FastAPI(title="TravelWise Destination API")

# Browser front-ends post straight to the API. Operators can scope this via
# TRAVELWISE_ALLOWED_ORIGINS if they prefer something narrower.
app.add_middleware(
    CORSMiddleware,
    allow_origins=list(settings.allowed_origins),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _criteria_from_payload(payload: Dict[str, Any]) -> SearchCriteria:
    try:
        return SearchCriteria.model_validate(payload)
    except ValidationError as exc:
        raise HTTPException(status_code=422, detail=exc.errors(include_url=False, include_context=False)) from exc


@app.post("/api/plan-trip")
async def api_plan_trip(payload: Dict[str, Any] = Body(...)) -> Dict[str, Any]:
    """Primary endpoint: ranked destinations for the submitted search form."""
    criteria = _criteria_from_payload(payload)
    result = await plan_trip(criteria, settings=settings)
    return result.model_dump(mode="json", by_alias=True)


@app.get("/api/test-api")
async def api_test_upstreams() -> Dict[str, Any]:
    """Report which upstream data sources are reachable right now."""
    async with open_gateways(settings) as gateways:
        return await probe_upstreams(gateways)


@app.get("/api/destinations")
async def api_destinations() -> List[Dict[str, Any]]:
    return [dest.model_dump(mode="json", by_alias=True) for dest in SHOWCASE_DESTINATIONS]


@app.get("/api/destinations/{destination_id}")
async def api_destination_detail(destination_id: str) -> Dict[str, Any]:
    destination = find_showcase_destination(destination_id)
    if destination is None:
        raise HTTPException(status_code=404, detail=f"Unknown destination {destination_id}")
    return destination.model_dump(mode="json", by_alias=True)
