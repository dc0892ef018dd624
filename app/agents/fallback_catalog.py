"""Static destination data used when live directory data is unavailable."""
from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from app.agents.enrichment import synthesize_baseline
from app.agents.scoring import draw_score_inputs
from app.schemas import (
    BudgetSlice,
    Coordinates,
    Destination,
    ShowcaseDestination,
    default_budget_breakdown,
)

DEFAULT_REGION = "Europe"
SAMPLE_ADVISORY = "Service temporarily unavailable. Showing sample results."


@dataclass(frozen=True)
class RegionSeed:
    name: str
    country: str
    flag_glyph: str
    currency_code: str


REGION_SEEDS: Dict[str, Tuple[RegionSeed, ...]] = {
    "Europe": (
        RegionSeed("Paris", "France", "🇫🇷", "EUR"),
        RegionSeed("Rome", "Italy", "🇮🇹", "EUR"),
        RegionSeed("Barcelona", "Spain", "🇪🇸", "EUR"),
        RegionSeed("Amsterdam", "Netherlands", "🇳🇱", "EUR"),
        RegionSeed("Prague", "Czech Republic", "🇨🇿", "CZK"),
    ),
    "Asia": (
        RegionSeed("Tokyo", "Japan", "🇯🇵", "JPY"),
        RegionSeed("Bangkok", "Thailand", "🇹🇭", "THB"),
        RegionSeed("Singapore", "Singapore", "🇸🇬", "SGD"),
        RegionSeed("Seoul", "South Korea", "🇰🇷", "KRW"),
        RegionSeed("Kuala Lumpur", "Malaysia", "🇲🇾", "MYR"),
    ),
    "Africa": (
        RegionSeed("Cape Town", "South Africa", "🇿🇦", "ZAR"),
        RegionSeed("Cairo", "Egypt", "🇪🇬", "EGP"),
        RegionSeed("Marrakech", "Morocco", "🇲🇦", "MAD"),
        RegionSeed("Nairobi", "Kenya", "🇰🇪", "KES"),
        RegionSeed("Lagos", "Nigeria", "🇳🇬", "NGN"),
    ),
    "North America": (
        RegionSeed("New York", "United States", "🇺🇸", "USD"),
        RegionSeed("Toronto", "Canada", "🇨🇦", "CAD"),
        RegionSeed("Mexico City", "Mexico", "🇲🇽", "MXN"),
        RegionSeed("Vancouver", "Canada", "🇨🇦", "CAD"),
        RegionSeed("Los Angeles", "United States", "🇺🇸", "USD"),
    ),
    "South America": (
        RegionSeed("Rio de Janeiro", "Brazil", "🇧🇷", "BRL"),
        RegionSeed("Buenos Aires", "Argentina", "🇦🇷", "ARS"),
        RegionSeed("Lima", "Peru", "🇵🇪", "PEN"),
        RegionSeed("Santiago", "Chile", "🇨🇱", "CLP"),
        RegionSeed("Bogotá", "Colombia", "🇨🇴", "COP"),
    ),
    "Australia": (
        RegionSeed("Sydney", "Australia", "🇦🇺", "AUD"),
        RegionSeed("Melbourne", "Australia", "🇦🇺", "AUD"),
        RegionSeed("Auckland", "New Zealand", "🇳🇿", "NZD"),
        RegionSeed("Brisbane", "Australia", "🇦🇺", "AUD"),
        RegionSeed("Wellington", "New Zealand", "🇳🇿", "NZD"),
    ),
}


def seeds_for_region(region: str) -> Tuple[RegionSeed, ...]:
    """Seed list for ``region``; unknown names (exact match) get Europe."""
    return REGION_SEEDS.get(region, REGION_SEEDS[DEFAULT_REGION])


def generate_fallback_destinations(region: str, rng: random.Random) -> List[Destination]:
    """Build full records from the region seeds with synthetic weather, rate and score."""
    destinations: List[Destination] = []
    for index, seed in enumerate(seeds_for_region(region)):
        fields = synthesize_baseline(rng)
        draw = draw_score_inputs(rng)
        destinations.append(
            Destination(
                id=str(index + 1),
                name=seed.name,
                country=seed.country,
                flag_glyph=seed.flag_glyph,
                temperature_celsius=fields.temperature_celsius,
                weather_condition=fields.weather_condition,
                currency_code=seed.currency_code,
                exchange_rate=round(fields.exchange_rate, 4),
                coordinates=Coordinates(lat=fields.lat, lng=fields.lng),
                # seed entries carry no country data to match interests against
                match_score=draw.base,
                budget_breakdown=default_budget_breakdown(),
            )
        )
    return destinations


def sample_destinations() -> List[Destination]:
    """The single hard-coded record served when planning fails outright."""
    return [
        Destination(
            id="1",
            name="Bali",
            country="Indonesia",
            flag_glyph="🇮🇩",
            temperature_celsius=28,
            weather_condition="sunny",
            currency_code="IDR",
            exchange_rate=0.000067,
            coordinates=Coordinates(lat=-8.3405, lng=115.092),
            match_score=95,
        )
    ]


def _breakdown(accommodation: int, food: int, activities: int, transport: int) -> List[BudgetSlice]:
    slices = default_budget_breakdown()
    for item, value in zip(slices, (accommodation, food, activities, transport)):
        item.percentage = value
    return slices


SHOWCASE_DESTINATIONS: Tuple[ShowcaseDestination, ...] = (
    ShowcaseDestination(
        id="1",
        name="Bali",
        country="Indonesia",
        flag_glyph="🇮🇩",
        temperature_celsius=28,
        weather_condition="sunny",
        currency_code="IDR",
        exchange_rate=0.000067,
        coordinates=Coordinates(lat=-8.3405, lng=115.092),
        match_score=95,
        description=(
            "A tropical paradise with stunning beaches, ancient temples, and vibrant culture. "
            "Perfect for relaxation and adventure seekers alike."
        ),
        best_time_to_visit="April to October (dry season)",
        popular_activities=["Beach hopping", "Temple visits", "Rice terraces", "Surfing", "Yoga retreats"],
        budget_breakdown=_breakdown(35, 25, 20, 20),
    ),
    ShowcaseDestination(
        id="2",
        name="Tokyo",
        country="Japan",
        flag_glyph="🇯🇵",
        temperature_celsius=22,
        weather_condition="partly-cloudy",
        currency_code="JPY",
        exchange_rate=110.0,
        coordinates=Coordinates(lat=35.6762, lng=139.6503),
        match_score=92,
        description=(
            "A bustling metropolis where traditional culture meets cutting-edge technology. "
            "Experience world-class cuisine and unique attractions."
        ),
        best_time_to_visit="March to May, September to November",
        popular_activities=["Temple visits", "Sushi tours", "Shopping", "Cherry blossoms", "Tech districts"],
        budget_breakdown=_breakdown(40, 30, 15, 15),
    ),
    ShowcaseDestination(
        id="3",
        name="Paris",
        country="France",
        flag_glyph="🇫🇷",
        temperature_celsius=18,
        weather_condition="cloudy",
        currency_code="EUR",
        exchange_rate=0.85,
        coordinates=Coordinates(lat=48.8566, lng=2.3522),
        match_score=90,
        description=(
            "The City of Light offers world-renowned art, cuisine, and architecture. "
            "A romantic destination with endless cultural attractions."
        ),
        best_time_to_visit="April to June, September to October",
        popular_activities=["Museums", "Café culture", "Architecture", "River cruises", "Fashion shopping"],
        budget_breakdown=_breakdown(45, 25, 20, 10),
    ),
    ShowcaseDestination(
        id="4",
        name="Bangkok",
        country="Thailand",
        flag_glyph="🇹🇭",
        temperature_celsius=32,
        weather_condition="sunny",
        currency_code="THB",
        exchange_rate=33.5,
        coordinates=Coordinates(lat=13.7563, lng=100.5018),
        match_score=88,
        description=(
            "A vibrant city known for its ornate temples, bustling street life, "
            "and incredible street food scene."
        ),
        best_time_to_visit="November to March",
        popular_activities=["Temple tours", "Street food", "Markets", "River tours", "Nightlife"],
        budget_breakdown=_breakdown(30, 20, 25, 25),
    ),
    ShowcaseDestination(
        id="5",
        name="Rome",
        country="Italy",
        flag_glyph="🇮🇹",
        temperature_celsius=24,
        weather_condition="sunny",
        currency_code="EUR",
        exchange_rate=0.85,
        coordinates=Coordinates(lat=41.9028, lng=12.4964),
        match_score=87,
        description=(
            "The Eternal City where ancient history comes alive. "
            "Explore ruins, world-class art, and incredible Italian cuisine."
        ),
        best_time_to_visit="April to June, September to October",
        popular_activities=["Ancient ruins", "Vatican tours", "Italian cuisine", "Art galleries", "Walking tours"],
        budget_breakdown=_breakdown(40, 25, 25, 10),
    ),
    ShowcaseDestination(
        id="6",
        name="Barcelona",
        country="Spain",
        flag_glyph="🇪🇸",
        temperature_celsius=26,
        weather_condition="sunny",
        currency_code="EUR",
        exchange_rate=0.85,
        coordinates=Coordinates(lat=41.3851, lng=2.1734),
        match_score=85,
        description=(
            "A Mediterranean gem with stunning architecture, beautiful beaches, "
            "and a vibrant cultural scene."
        ),
        best_time_to_visit="May to September",
        popular_activities=["Gaudí architecture", "Beach time", "Tapas tours", "Museums", "Nightlife"],
        budget_breakdown=_breakdown(35, 25, 25, 15),
    ),
)


def find_showcase_destination(destination_id: str) -> Optional[ShowcaseDestination]:
    return next((dest for dest in SHOWCASE_DESTINATIONS if dest.id == destination_id), None)
