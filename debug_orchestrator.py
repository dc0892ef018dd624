# debug_orchestrator.py
import asyncio
import json
import random
import sys

from app.config import Settings
from app.orchestrator import plan_trip
from app.schemas import SearchCriteria


async def main():
    payload = {
        "budget": 1500,
        "region": sys.argv[1] if len(sys.argv) > 1 else "Europe",
        "month": "July",
        "interests": "beach,mountains,food",
        "travelMode": "solo",
    }
    settings = Settings.from_env()
    criteria = SearchCriteria.model_validate(payload)

    # Call orchestrator directly
    result = await plan_trip(criteria, settings=settings, rng=random.Random(settings.random_seed))
    print("➡️ Orchestrator returned:\n")
    print(json.dumps(result.model_dump(mode="json", by_alias=True), indent=2, ensure_ascii=False))


if __name__ == "__main__":
    asyncio.run(main())
