from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOCATION_CACHE_TTL_SECONDS = int(os.getenv("LOCATION_CACHE_TTL_SECONDS", "86400"))
PROVIDER_TIMEOUT_SECONDS = float(os.getenv("PROVIDER_TIMEOUT_SECONDS", "8.0"))

FLIGHTS_API_URL = "https://api.travelpayouts.com/aviasales/v3/prices_for_dates"
HOTEL_LOOKUP_URL = "https://engine.hotellook.com/api/v2/lookup.json"
HOTEL_PRICES_URL = "https://yasen.hotellook.com/tp/public/widget_location_dump.json"
DEFAULT_MARKER = "504941"


@dataclass(frozen=True)
class ProviderConfig:
    """Credentials and endpoints for the travel-data providers."""

    api_token: Optional[str] = None
    marker: str = DEFAULT_MARKER
    flights_url: str = FLIGHTS_API_URL
    hotel_lookup_url: str = HOTEL_LOOKUP_URL
    hotel_prices_url: str = HOTEL_PRICES_URL
    timeout_s: float = PROVIDER_TIMEOUT_SECONDS
    language: str = "es"

    @classmethod
    def from_env(cls) -> "ProviderConfig":
        return cls(
            api_token=os.getenv("TRAVELPAYOUTS_API_TOKEN") or None,
            marker=os.getenv("TRAVELPAYOUTS_MARKER") or DEFAULT_MARKER,
            flights_url=os.getenv("FLIGHTS_API_URL", FLIGHTS_API_URL),
            hotel_lookup_url=os.getenv("HOTEL_LOOKUP_URL", HOTEL_LOOKUP_URL),
            hotel_prices_url=os.getenv("HOTEL_PRICES_URL", HOTEL_PRICES_URL),
            timeout_s=PROVIDER_TIMEOUT_SECONDS,
            language=os.getenv("PROVIDER_LANGUAGE", "es"),
        )
