"""Thin clients for the three upstream travel data sources.

Each client makes at most one request per call and reports the result as an
``Outcome``. Transport failures, non-2xx responses and malformed payloads are
logged and turned into ``Fallback`` values so callers never see raw errors.
"""
from __future__ import annotations

import math
import logging
import os
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import Any, AsyncIterator, Dict, List, Optional

import httpx

from app.config import Settings
from app.tools.outcome import Fallback, FallbackReason, Ok, Outcome

logger = logging.getLogger(__name__)
if not logger.handlers:
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter("[%(levelname)s] %(name)s: %(message)s"))
    logger.addHandler(handler)
_level = os.getenv("TRAVELWISE_LOG_LEVEL", "INFO").upper()
logger.setLevel(getattr(logging, _level, logging.INFO))
logger.propagate = False

BASE_CURRENCY = "USD"
USER_AGENT = "travelwise/1.0"

# Shape errors raised while digging through an unexpected JSON payload.
_PAYLOAD_ERRORS = (ValueError, KeyError, TypeError, IndexError, AttributeError, OverflowError)


def _finite(value: Any, label: str) -> float:
    number = float(value)
    if not math.isfinite(number):
        raise ValueError(f"{label} is not a finite number: {value!r}")
    return number


@dataclass
class CountrySummary:
    name: str
    capital: Optional[str] = None
    flag: Optional[str] = None
    currencies: List[str] = field(default_factory=list)

    @property
    def primary_currency(self) -> Optional[str]:
        return self.currencies[0] if self.currencies else None

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "CountrySummary":
        name_block = payload.get("name") or {}
        name = name_block.get("common") if isinstance(name_block, dict) else str(name_block)
        if not name:
            raise ValueError("country payload is missing name.common")
        capitals = payload.get("capital") or []
        currencies = payload.get("currencies") or {}
        return cls(
            name=str(name),
            capital=str(capitals[0]) if capitals and capitals[0] else None,
            flag=payload.get("flag") or None,
            currencies=[str(code) for code in currencies] if isinstance(currencies, dict) else [],
        )


@dataclass(frozen=True)
class WeatherReading:
    temperature_celsius: int
    condition: str
    lat: float
    lng: float


class _Gateway:
    """Shared request plumbing: reuse an injected client or open one per call."""

    def __init__(self, *, client: Optional[httpx.AsyncClient] = None, timeout: float = 10.0):
        self._client = client
        self.timeout = timeout

    async def _get_json(self, url: str, params: Optional[Dict[str, Any]] = None) -> Any:
        headers = {"User-Agent": USER_AGENT}
        if self._client is not None:
            response = await self._client.get(url, params=params, headers=headers)
            response.raise_for_status()
            return response.json()
        async with httpx.AsyncClient(timeout=self.timeout, follow_redirects=True) as client:
            response = await client.get(url, params=params, headers=headers)
            response.raise_for_status()
            return response.json()


class CountryDirectoryClient(_Gateway):
    ENDPOINT = "https://restcountries.com/v3.1/region/{region}"
    FIELDS = "name,capital,flag,currencies"

    async def fetch_countries_by_region(self, region: str) -> Outcome[List[CountrySummary]]:
        url = self.ENDPOINT.format(region=region.strip().lower())
        try:
            data = await self._get_json(url, params={"fields": self.FIELDS})
            if not isinstance(data, list):
                raise ValueError(f"expected a list of countries, got {type(data).__name__}")
            countries = [CountrySummary.from_payload(item) for item in data]
        except (httpx.HTTPError, *_PAYLOAD_ERRORS) as exc:
            logger.warning("Country directory unavailable for region %s: %s", region, exc)
            return Fallback(FallbackReason.DIRECTORY_UNAVAILABLE, str(exc))
        if not countries:
            logger.warning("Country directory returned no countries for region %s", region)
            return Fallback(FallbackReason.DIRECTORY_UNAVAILABLE, "empty country list")
        logger.info("Found %d countries in %s", len(countries), region)
        return Ok(countries)


class WeatherClient(_Gateway):
    ENDPOINT = "https://api.openweathermap.org/data/2.5/weather"

    def __init__(self, api_key: Optional[str] = None, **kwargs: Any):
        super().__init__(**kwargs)
        self.api_key = api_key

    async def fetch_weather(self, city: str) -> Outcome[WeatherReading]:
        if not self.api_key:
            return Fallback(FallbackReason.NO_CREDENTIAL)
        params = {"q": city, "appid": self.api_key, "units": "metric"}
        try:
            data = await self._get_json(self.ENDPOINT, params=params)
            temp = _finite(data["main"]["temp"], "temperature")
            lat = _finite(data["coord"]["lat"], "latitude")
            lng = _finite(data["coord"]["lon"], "longitude")
            if not (-90 <= lat <= 90 and -180 <= lng <= 180):
                raise ValueError(f"coordinates out of range: {lat}, {lng}")
            reading = WeatherReading(
                # half-up rounding, not banker's rounding
                temperature_celsius=int(math.floor(temp + 0.5)),
                condition=str(data["weather"][0]["main"]).lower(),
                lat=lat,
                lng=lng,
            )
        except (httpx.HTTPError, *_PAYLOAD_ERRORS) as exc:
            logger.warning("Using fallback weather for %s: %s", city, exc)
            return Fallback(FallbackReason.UPSTREAM_UNAVAILABLE, str(exc))
        logger.info("Got real weather for %s", city)
        return Ok(reading)


class ExchangeRateClient(_Gateway):
    ENDPOINT = "https://api.exchangerate.host/latest"

    def __init__(self, access_key: Optional[str] = None, **kwargs: Any):
        super().__init__(**kwargs)
        self.access_key = access_key

    async def fetch_exchange_rate(self, currency_code: str) -> Outcome[float]:
        code = currency_code.strip().upper()
        if code == BASE_CURRENCY:
            return Fallback(FallbackReason.BASE_CURRENCY)
        params: Dict[str, Any] = {"base": BASE_CURRENCY, "symbols": code}
        if self.access_key:
            params["access_key"] = self.access_key
        try:
            data = await self._get_json(self.ENDPOINT, params=params)
            rates = data.get("rates") if isinstance(data, dict) else None
            rate = rates.get(code) if isinstance(rates, dict) else None
            if not rate:
                logger.warning("Exchange-rate payload had no rate for %s", code)
                return Fallback(FallbackReason.MISSING_RATE)
            value = _finite(rate, "exchange rate")
        except (httpx.HTTPError, *_PAYLOAD_ERRORS) as exc:
            logger.warning("Using fallback exchange rate for %s: %s", code, exc)
            return Fallback(FallbackReason.UPSTREAM_UNAVAILABLE, str(exc))
        logger.info("Got real exchange rate for %s", code)
        return Ok(value)


@dataclass
class TravelDataGateways:
    directory: CountryDirectoryClient
    weather: WeatherClient
    rates: ExchangeRateClient


def build_gateways(settings: Settings, client: Optional[httpx.AsyncClient] = None) -> TravelDataGateways:
    common = {"client": client, "timeout": settings.http_timeout}
    return TravelDataGateways(
        directory=CountryDirectoryClient(**common),
        weather=WeatherClient(settings.openweather_api_key, **common),
        rates=ExchangeRateClient(settings.exchangerate_api_key, **common),
    )


@asynccontextmanager
async def open_gateways(settings: Settings) -> AsyncIterator[TravelDataGateways]:
    """Yield gateways sharing a single HTTP connection pool for one request."""
    async with httpx.AsyncClient(timeout=settings.http_timeout, follow_redirects=True) as client:
        yield build_gateways(settings, client)
