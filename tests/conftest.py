from __future__ import annotations

from typing import Any, Callable, Dict, List, Optional

import httpx
import pytest

from app.aggregator import OfferAggregator
from app.config import ProviderConfig
from app.provider_client import ProviderClient

FLIGHTS_HOST = "api.travelpayouts.com"
LOOKUP_HOST = "engine.hotellook.com"
PRICES_HOST = "yasen.hotellook.com"

Reply = Any  # payload, httpx.Response, Exception, or callable(request) -> one of those


class FakeProvider:
    """httpx.MockTransport handler standing in for the flight and hotel APIs."""

    def __init__(
        self,
        *,
        flights: Reply = None,
        locations: Optional[Dict[str, Reply]] = None,
        hotels: Reply = None,
    ) -> None:
        self.flights = flights if flights is not None else {"success": True, "data": []}
        self.locations = locations or {}
        self.hotels = hotels if hotels is not None else []
        self.requests: List[httpx.Request] = []

    def calls_to(self, host: str) -> List[httpx.Request]:
        return [req for req in self.requests if req.url.host == host]

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        host = request.url.host
        if host == FLIGHTS_HOST:
            return self._reply(self.flights, request)
        if host == LOOKUP_HOST:
            query = request.url.params.get("query", "")
            reply = self.locations.get(query, {"results": {"locations": []}})
            return self._reply(reply, request)
        if host == PRICES_HOST:
            return self._reply(self.hotels, request)
        return httpx.Response(404, request=request)

    def _reply(self, reply: Reply, request: httpx.Request) -> httpx.Response:
        if callable(reply) and not isinstance(reply, httpx.Response):
            reply = reply(request)
        if isinstance(reply, Exception):
            raise reply
        if isinstance(reply, httpx.Response):
            return reply
        return httpx.Response(200, json=reply)


def location_reply(*ids: Any) -> Dict[str, Any]:
    return {"results": {"locations": [{"id": location_id, "fullName": "City"} for location_id in ids]}}


def make_client(handler: Callable[[httpx.Request], httpx.Response], **config: Any) -> ProviderClient:
    settings = {"api_token": "test-token", "marker": "999", "timeout_s": 5.0}
    settings.update(config)
    http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return ProviderClient(ProviderConfig(**settings), http=http)


@pytest.fixture
def flight_body() -> Dict[str, Any]:
    return {
        "origin": "LIM",
        "destination": "CUN",
        "startDate": "2025-03-10",
        "endDate": "2025-03-17",
        "passengers": 2,
    }


@pytest.fixture
def hotel_body() -> Dict[str, Any]:
    return {"destination": "Cancun", "checkIn": "2025-03-10", "checkOut": "2025-03-12"}


@pytest.fixture
def provider() -> FakeProvider:
    return FakeProvider()


@pytest.fixture
def aggregator(provider: FakeProvider) -> OfferAggregator:
    return OfferAggregator(make_client(provider))
