"""Public entry point for flight and hotel offer searches.

Both operations accept the raw request body and always return a result
envelope; they never raise. Offers keep the provider's order.
"""
from __future__ import annotations

import uuid
from typing import Any, Optional

from shared.logging import get_logger
from travel_schemas.tool_schemas import FlightSearchResult, HotelSearchResult

from .graph import flight_graph, hotel_graph
from .location_resolver import LocationResolver
from .provider_client import ProviderClient

log = get_logger(__name__)

INTERNAL_ERROR = "Internal error"


class OfferAggregator:
    def __init__(self, client: ProviderClient, resolver: Optional[LocationResolver] = None):
        self.client = client
        self.resolver = resolver or LocationResolver(client)

    def _run_config(self) -> dict:
        return {"configurable": {"client": self.client, "resolver": self.resolver}}

    async def search_flights(self, raw_request: Any) -> FlightSearchResult:
        trace_id = str(uuid.uuid4())
        try:
            state = await flight_graph.ainvoke(
                {"raw_request": raw_request, "trace_id": trace_id},
                config=self._run_config(),
            )
        except Exception:
            log.exception("search_flights_failed trace_id=%s", trace_id)
            return FlightSearchResult(error=INTERNAL_ERROR, failure="internal")

        offers = state.get("offers") or []
        return FlightSearchResult(
            flights=offers,
            is_estimated=not offers,
            error=state.get("error"),
            details=state.get("details"),
            failure=state.get("failure"),
        )

    async def search_hotels(self, raw_request: Any) -> HotelSearchResult:
        trace_id = str(uuid.uuid4())
        try:
            state = await hotel_graph.ainvoke(
                {"raw_request": raw_request, "trace_id": trace_id},
                config=self._run_config(),
            )
        except Exception:
            log.exception("search_hotels_failed trace_id=%s", trace_id)
            return HotelSearchResult(error=INTERNAL_ERROR, failure="internal")

        offers = state.get("offers") or []
        return HotelSearchResult(
            hotels=offers,
            city_id=state.get("location_id"),
            is_estimated=not offers,
            message=state.get("message"),
            error=state.get("error"),
            details=state.get("details"),
            failure=state.get("failure"),
        )
