"""HTTP client for the Travelpayouts flight and Hotellook hotel data APIs."""
from __future__ import annotations

import asyncio
import time
from typing import Any, Dict, List, Optional

import httpx

from shared.logging import get_logger
from travel_schemas.tool_schemas import SearchFlightsRequest

from .config import ProviderConfig
from .errors import ProviderError

log = get_logger(__name__)

FLIGHTS = "travelpayouts.prices_for_dates"
HOTEL_LOOKUP = "hotellook.lookup"
HOTEL_PRICES = "hotellook.location_dump"

# Wrapper keys the hotel price dump has been seen to use instead of a bare array.
HOTEL_LIST_KEYS = ("hotels", "popularity")


def _dicts(items: Any) -> List[Dict[str, Any]]:
    if not isinstance(items, list):
        return []
    return [item for item in items if isinstance(item, dict)]


class ProviderClient:
    """
    One HTTP call per method, no retries.
    Any non-2xx status, transport failure, timeout or unreadable body raises ProviderError;
    an empty but well-formed response returns an empty list.
    """

    def __init__(self, config: ProviderConfig, *, http: Optional[httpx.AsyncClient] = None):
        self._config = config
        self._http = http

    @property
    def config(self) -> ProviderConfig:
        return self._config

    async def _send(self, url: str, params: Dict[str, str], headers: Dict[str, str]) -> httpx.Response:
        if self._http is not None:
            return await self._http.get(url, params=params, headers=headers, timeout=self._config.timeout_s)
        async with httpx.AsyncClient(timeout=self._config.timeout_s) as client:
            return await client.get(url, params=params, headers=headers)

    async def _get_json(self, provider: str, url: str, params: Dict[str, str]) -> Any:
        headers = {"Accept": "application/json"}
        started = time.time()
        status = None
        try:
            # httpx timeouts are per phase; the deadline covers connect, headers and the whole body
            resp = await asyncio.wait_for(self._send(url, params, headers), timeout=self._config.timeout_s)
            status = resp.status_code
            resp.raise_for_status()
            data = resp.json()
        except httpx.HTTPStatusError as e:
            self._log_failure(provider, started, status, e)
            raise ProviderError(provider, f"{provider} returned HTTP {status}", status=status) from e
        except (httpx.TimeoutException, asyncio.TimeoutError) as e:
            self._log_failure(provider, started, status, e)
            raise ProviderError(provider, f"{provider} timed out after {self._config.timeout_s}s") from e
        except httpx.HTTPError as e:
            self._log_failure(provider, started, status, e)
            raise ProviderError(provider, f"{provider} request failed: {e.__class__.__name__}") from e
        except ValueError as e:
            self._log_failure(provider, started, status, e)
            raise ProviderError(provider, f"{provider} returned malformed JSON", status=status) from e

        latency_ms = int((time.time() - started) * 1000)
        log.info("provider_call provider=%s status=%s latency_ms=%s", provider, status, latency_ms)
        return data

    @staticmethod
    def _log_failure(provider: str, started: float, status: Optional[int], err: Exception) -> None:
        elapsed_ms = int((time.time() - started) * 1000)
        log.warning(
            "provider_call_failed provider=%s status=%s latency_ms=%s err=%s",
            provider,
            status,
            elapsed_ms,
            repr(err),
        )

    def _require_token(self, provider: str) -> str:
        if not self._config.api_token:
            log.error("provider_not_configured provider=%s missing=TRAVELPAYOUTS_API_TOKEN", provider)
            raise ProviderError(provider, "TRAVELPAYOUTS_API_TOKEN not configured")
        return self._config.api_token

    async def fetch_flight_offers(self, params: SearchFlightsRequest) -> List[Dict[str, Any]]:
        token = self._require_token(FLIGHTS)
        query = {
            "origin": params.origin,
            "destination": params.destination,
            "departure_at": params.start_date,
            "currency": "USD",
            "token": token,
        }
        if params.end_date:
            query["return_at"] = params.end_date

        payload = await self._get_json(FLIGHTS, self._config.flights_url, query)
        if not isinstance(payload, dict):
            raise ProviderError(FLIGHTS, f"{FLIGHTS} returned an unexpected payload")
        if payload.get("success") is False:
            raise ProviderError(FLIGHTS, f"{FLIGHTS} reported failure: {payload.get('error') or 'unknown'}")
        return _dicts(payload.get("data"))

    async def lookup_locations(self, query: str) -> List[Dict[str, Any]]:
        """City lookup; returns provider-ranked location candidates."""
        params = {
            "query": query,
            "lang": self._config.language,
            "lookFor": "city",
            "limit": "1",
        }
        payload = await self._get_json(HOTEL_LOOKUP, self._config.hotel_lookup_url, params)
        if not isinstance(payload, dict):
            raise ProviderError(HOTEL_LOOKUP, f"{HOTEL_LOOKUP} returned an unexpected payload")
        results = payload.get("results") or {}
        if not isinstance(results, dict):
            return []
        return _dicts(results.get("locations"))

    async def fetch_hotel_offers(
        self,
        location_id: str,
        check_in: str,
        check_out: str,
        adults: int,
        currency: str,
        limit: int,
    ) -> List[Dict[str, Any]]:
        # adults only feeds the booking link; the price dump is per location
        token = self._require_token(HOTEL_PRICES)
        params = {
            "currency": currency,
            "language": self._config.language,
            "limit": str(limit),
            "id": location_id,
            "type": "popularity",
            "check_in": check_in,
            "check_out": check_out,
            "token": token,
        }
        payload = await self._get_json(HOTEL_PRICES, self._config.hotel_prices_url, params)
        if isinstance(payload, list):
            hotels = payload
        elif isinstance(payload, dict):
            hotels = next((payload[key] for key in HOTEL_LIST_KEYS if isinstance(payload.get(key), list)), [])
        else:
            raise ProviderError(HOTEL_PRICES, f"{HOTEL_PRICES} returned an unexpected payload")
        return _dicts(hotels)[:limit]
