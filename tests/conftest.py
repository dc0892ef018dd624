from __future__ import annotations

from typing import Any, Callable, Dict, List, Optional

import httpx
import pytest

from app.config import Settings
from app.tools.gateways import TravelDataGateways, build_gateways


def country(name: str, capital: Optional[str] = None, currency: Optional[str] = None, flag: str = "🏳") -> Dict[str, Any]:
    payload: Dict[str, Any] = {"name": {"common": name, "official": name}, "flag": flag}
    payload["capital"] = [capital] if capital else []
    payload["currencies"] = {currency: {"name": currency}} if currency else {}
    return payload


class FakeUpstreams:
    """Routes requests by host to canned responses and records every call."""

    def __init__(
        self,
        countries: Any = None,
        *,
        directory_status: int = 200,
        weather: Optional[Callable[[httpx.Request], httpx.Response]] = None,
        rates: Optional[Dict[str, float]] = None,
        rates_status: int = 200,
    ):
        self.countries = countries if countries is not None else []
        self.directory_status = directory_status
        self.weather = weather
        self.rates = rates or {}
        self.rates_status = rates_status
        self.requests: List[httpx.Request] = []

    def hosts(self) -> List[str]:
        return [request.url.host for request in self.requests]

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        host = request.url.host
        if host == "restcountries.com":
            if self.directory_status != 200:
                return httpx.Response(self.directory_status, json={"status": self.directory_status})
            return httpx.Response(200, json=self.countries)
        if host == "api.openweathermap.org":
            if self.weather is None:
                return httpx.Response(401, json={"message": "Invalid API key"})
            return self.weather(request)
        if host == "api.exchangerate.host":
            if self.rates_status != 200:
                return httpx.Response(self.rates_status)
            code = request.url.params.get("symbols")
            rates = {code: self.rates[code]} if code in self.rates else {}
            return httpx.Response(200, json={"base": "USD", "rates": rates})
        return httpx.Response(404)

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self.handler))

    def gateways(self, client: httpx.AsyncClient, *, api_key: Optional[str] = None) -> TravelDataGateways:
        return build_gateways(Settings(openweather_api_key=api_key), client)


@pytest.fixture
def european_countries() -> List[Dict[str, Any]]:
    return [
        country("France", "Paris", "EUR", "🇫🇷"),
        country("Switzerland", "Bern", "CHF", "🇨🇭"),
        country("Croatia", "Zagreb", "EUR", "🇭🇷"),
        country("Norway", "Oslo", "NOK", "🇳🇴"),
        country("Austria", "Vienna", "EUR", "🇦🇹"),
        country("Iceland", "Reykjavik", "ISK", "🇮🇸"),
        country("Greece", "Athens", "EUR", "🇬🇷"),
        country("Portugal", "Lisbon", "EUR", "🇵🇹"),
    ]


@pytest.fixture
def make_country() -> Callable[..., Dict[str, Any]]:
    return country


@pytest.fixture
def make_upstreams() -> Callable[..., FakeUpstreams]:
    return FakeUpstreams
