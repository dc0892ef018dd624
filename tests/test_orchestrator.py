import asyncio
import random

import httpx

from app import orchestrator
from app.agents.enrichment import WEATHER_CONDITIONS
from app.agents.fallback_catalog import SAMPLE_ADVISORY
from app.config import Settings
from app.orchestrator import plan_trip, probe_upstreams
from app.schemas import SearchCriteria

SETTINGS = Settings()


def _assert_well_formed(destinations):
    scores = [d.match_score for d in destinations]
    assert scores == sorted(scores, reverse=True)
    for dest in destinations:
        assert dest.match_score <= 100
        assert [s.category for s in dest.budget_breakdown] == ["Accommodation", "Food", "Activities", "Transport"]
        assert sum(s.percentage for s in dest.budget_breakdown) == 100


def test_directory_failure_serves_europe_seed(make_upstreams):
    async def run():
        upstreams = make_upstreams(directory_status=500)
        criteria = SearchCriteria(region="Europe", budget=1500, interests="beach")
        async with upstreams.client() as client:
            return await plan_trip(
                criteria, gateways=upstreams.gateways(client), rng=random.Random(1), settings=SETTINGS
            )

    result = asyncio.run(run())

    assert result.tier == "region-fallback"
    assert result.error is None
    assert len(result.destinations) == 5
    assert {d.name for d in result.destinations} == {"Paris", "Rome", "Barcelona", "Amsterdam", "Prague"}
    assert {d.currency_code for d in result.destinations} <= {"EUR", "CZK"}
    _assert_well_formed(result.destinations)


def test_unknown_region_falls_back_to_europe(make_upstreams):
    async def run():
        upstreams = make_upstreams(directory_status=404)
        async with upstreams.client() as client:
            return await plan_trip(
                SearchCriteria(region="UnknownRegion"),
                gateways=upstreams.gateways(client),
                rng=random.Random(2),
                settings=SETTINGS,
            )

    result = asyncio.run(run())

    assert [d.country for d in sorted(result.destinations, key=lambda d: d.id)] == [
        "France", "Italy", "Spain", "Netherlands", "Czech Republic",
    ]


def test_only_first_six_candidates_are_enriched(make_upstreams, european_countries):
    async def run():
        upstreams = make_upstreams(european_countries, rates={"EUR": 0.91, "CHF": 0.88, "NOK": 10.5, "ISK": 137.0})
        async with upstreams.client() as client:
            result = await plan_trip(
                SearchCriteria(region="Europe", budget=2000, interests="mountains,beach"),
                gateways=upstreams.gateways(client),
                rng=random.Random(3),
                settings=SETTINGS,
            )
        return result, upstreams

    result, upstreams = asyncio.run(run())

    assert result.tier == "live"
    assert len(result.destinations) == 6
    assert {d.id for d in result.destinations} == {"1", "2", "3", "4", "5", "6"}
    assert "Greece" not in {d.country for d in result.destinations}
    assert "Portugal" not in {d.country for d in result.destinations}
    by_country = {d.country: d for d in result.destinations}
    assert by_country["France"].name == "Paris"
    assert by_country["France"].exchange_rate == 0.91
    assert by_country["Iceland"].exchange_rate == 137.0
    assert upstreams.hosts().count("api.exchangerate.host") == 6
    _assert_well_formed(result.destinations)


def test_missing_weather_credential_still_completes(make_upstreams, european_countries):
    async def run():
        upstreams = make_upstreams(european_countries, rates_status=502)
        async with upstreams.client() as client:
            result = await plan_trip(
                SearchCriteria(region="Europe"),
                gateways=upstreams.gateways(client, api_key=None),
                rng=random.Random(4),
                settings=SETTINGS,
            )
        return result, upstreams

    result, upstreams = asyncio.run(run())

    assert "api.openweathermap.org" not in upstreams.hosts()
    assert len(result.destinations) == 6
    for dest in result.destinations:
        assert dest.weather_condition in WEATHER_CONDITIONS
        assert 20 <= dest.temperature_celsius < 35
        assert 0.01 <= dest.exchange_rate <= 100.01


def test_real_weather_is_used_when_available(make_upstreams, make_country):
    def weather(request: httpx.Request) -> httpx.Response:
        city = request.url.params["q"]
        if city == "Bern":
            return httpx.Response(500)
        return httpx.Response(
            200, json={"main": {"temp": 3.2}, "weather": [{"main": "Snow"}], "coord": {"lat": 47.3, "lon": 8.5}}
        )

    async def run():
        upstreams = make_upstreams(
            [make_country("Austria", "Vienna", "EUR"), make_country("Switzerland", "Bern", "CHF")],
            weather=weather,
        )
        async with upstreams.client() as client:
            return await plan_trip(
                SearchCriteria(region="Europe"),
                gateways=upstreams.gateways(client, api_key="key"),
                rng=random.Random(5),
                settings=SETTINGS,
            )

    result = asyncio.run(run())
    by_country = {d.country: d for d in result.destinations}

    assert by_country["Austria"].temperature_celsius == 3
    assert by_country["Austria"].weather_condition == "snow"
    assert by_country["Austria"].coordinates.lat == 47.3
    assert by_country["Switzerland"].weather_condition in WEATHER_CONDITIONS


def test_out_of_range_weather_payload_keeps_live_tier(make_upstreams, make_country):
    def weather(request: httpx.Request) -> httpx.Response:
        if request.url.params["q"] == "Bern":
            return httpx.Response(
                200,
                content='{"main": {"temp": 1e400}, "weather": [{"main": "Clear"}], "coord": {"lat": 95, "lon": 8.5}}',
                headers={"content-type": "application/json"},
            )
        return httpx.Response(
            200, json={"main": {"temp": 3.2}, "weather": [{"main": "Snow"}], "coord": {"lat": 47.3, "lon": 8.5}}
        )

    async def run():
        upstreams = make_upstreams(
            [make_country("Austria", "Vienna", "EUR"), make_country("Switzerland", "Bern", "CHF")],
            weather=weather,
        )
        async with upstreams.client() as client:
            return await plan_trip(
                SearchCriteria(region="Europe"),
                gateways=upstreams.gateways(client, api_key="key"),
                rng=random.Random(6),
                settings=SETTINGS,
            )

    result = asyncio.run(run())
    by_country = {d.country: d for d in result.destinations}

    assert result.tier == "live"
    assert result.error is None
    assert set(by_country) == {"Austria", "Switzerland"}
    assert by_country["Austria"].weather_condition == "snow"
    assert by_country["Switzerland"].weather_condition in WEATHER_CONDITIONS
    assert -90 <= by_country["Switzerland"].coordinates.lat <= 90


def test_seeded_runs_are_identical(make_upstreams, european_countries):
    async def run(seed: int):
        upstreams = make_upstreams(european_countries, rates={"EUR": 0.9})
        async with upstreams.client() as client:
            result = await plan_trip(
                SearchCriteria(region="Europe", budget=1800, interests="beach"),
                gateways=upstreams.gateways(client),
                rng=random.Random(seed),
                settings=SETTINGS,
            )
        return result.model_dump(mode="json", by_alias=True)

    assert asyncio.run(run(42)) == asyncio.run(run(42))


def test_unexpected_error_serves_sample_result():
    class ExplodingDirectory:
        async def fetch_countries_by_region(self, region):
            raise RuntimeError("directory client bug")

    class Gateways:
        directory = ExplodingDirectory()
        weather = None
        rates = None

    result = asyncio.run(
        plan_trip(SearchCriteria(region="Asia"), gateways=Gateways(), rng=random.Random(6), settings=SETTINGS)
    )

    assert result.tier == "sample"
    assert result.error == SAMPLE_ADVISORY
    assert len(result.destinations) == 1
    assert result.destinations[0].id == "1"
    assert result.destinations[0].name == "Bali"


def test_ranking_failure_also_serves_sample_result(monkeypatch, make_upstreams):
    def broken_rank(destinations):
        raise ValueError("bad ranking")

    monkeypatch.setattr(orchestrator, "rank_destinations", broken_rank)

    async def run():
        upstreams = make_upstreams(directory_status=500)
        async with upstreams.client() as client:
            return await plan_trip(
                SearchCriteria(region="Africa"), gateways=upstreams.gateways(client), settings=SETTINGS
            )

    result = asyncio.run(run())

    assert result.tier == "sample"
    assert [d.name for d in result.destinations] == ["Bali"]


def test_probe_reports_each_upstream(make_upstreams, european_countries):
    async def run():
        upstreams = make_upstreams(european_countries, rates={"EUR": 0.9, "GBP": 0.78})
        async with upstreams.client() as client:
            return await probe_upstreams(upstreams.gateways(client))

    report = asyncio.run(run())

    assert report["apis"]["restCountries"]["status"] == "working"
    assert report["apis"]["restCountries"]["sampleData"][0] == {"name": "France", "capital": "Paris", "flag": "🇫🇷"}
    assert report["apis"]["openWeatherMap"]["status"] == "no-api-key"
    assert report["apis"]["exchangeRateHost"]["sampleData"] == {"EUR": 0.9, "GBP": 0.78}
    assert report["summary"]["workingApis"] == "2/3"
    assert report["summary"]["recommendation"] == "Some APIs working, others using fallback data."
