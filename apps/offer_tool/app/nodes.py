# apps/offer_tool/app/nodes.py

from typing import Any, Dict

from langchain_core.runnables import RunnableConfig

from shared.logging import get_logger

from .errors import ProviderError, ValidationError
from .location_resolver import LocationResolver
from .normalizer import normalize_flights, normalize_hotels
from .provider_client import ProviderClient
from .state import FlightSearchState, HotelSearchState
from .validation import parse_flight_params, parse_hotel_params

log = get_logger(__name__)

CITY_NOT_FOUND = "Could not find city in hotel database"


def _client(config: RunnableConfig) -> ProviderClient:
    return config["configurable"]["client"]


def _resolver(config: RunnableConfig) -> LocationResolver:
    return config["configurable"]["resolver"]


def _invalid(trace_id: str, exc: ValidationError) -> Dict[str, Any]:
    log.info("search_rejected trace_id=%s violations=%s", trace_id, len(exc.details))
    return {"failure": "validation", "error": "Invalid input", "details": exc.details}


def _provider_failed(trace_id: str, exc: ProviderError) -> Dict[str, Any]:
    log.warning("search_degraded trace_id=%s provider=%s err=%s", trace_id, exc.provider, exc)
    return {"failure": "provider", "error": str(exc)}


# Flights
async def validate_flight_request(state: FlightSearchState, config: RunnableConfig) -> Dict[str, Any]:
    try:
        return {"params": parse_flight_params(state.get("raw_request"))}
    except ValidationError as exc:
        return _invalid(state["trace_id"], exc)


async def fetch_flights(state: FlightSearchState, config: RunnableConfig) -> Dict[str, Any]:
    params = state["params"]
    log.info(
        "search_flights trace_id=%s origin=%s destination=%s start=%s end=%s passengers=%s",
        state["trace_id"],
        params.origin,
        params.destination,
        params.start_date,
        params.end_date,
        params.passengers,
    )
    try:
        return {"raw_offers": await _client(config).fetch_flight_offers(params)}
    except ProviderError as exc:
        return _provider_failed(state["trace_id"], exc)


async def normalize_flight_offers(state: FlightSearchState, config: RunnableConfig) -> Dict[str, Any]:
    offers = normalize_flights(state.get("raw_offers") or [], state["params"])
    log.info("search_flights_done trace_id=%s returned=%s", state["trace_id"], len(offers))
    return {"offers": offers}


# Hotels
async def validate_hotel_request(state: HotelSearchState, config: RunnableConfig) -> Dict[str, Any]:
    try:
        return {"params": parse_hotel_params(state.get("raw_request"))}
    except ValidationError as exc:
        return _invalid(state["trace_id"], exc)


async def resolve_location(state: HotelSearchState, config: RunnableConfig) -> Dict[str, Any]:
    """Resolves the destination to a hotel-provider city id. Not finding one ends the run quietly."""
    params = state["params"]
    location_id = await _resolver(config).resolve(params.destination, params.iata_code)
    if not location_id:
        return {"failure": "not_found", "message": CITY_NOT_FOUND}
    return {"location_id": location_id}


async def fetch_hotels(state: HotelSearchState, config: RunnableConfig) -> Dict[str, Any]:
    params = state["params"]
    log.info(
        "search_hotels trace_id=%s location_id=%s check_in=%s check_out=%s adults=%s",
        state["trace_id"],
        state["location_id"],
        params.check_in,
        params.check_out,
        params.adults,
    )
    try:
        raw_offers = await _client(config).fetch_hotel_offers(
            state["location_id"],
            params.check_in,
            params.check_out,
            params.adults,
            params.currency,
            params.limit,
        )
    except ProviderError as exc:
        return _provider_failed(state["trace_id"], exc)
    return {"raw_offers": raw_offers}


async def normalize_hotel_offers(state: HotelSearchState, config: RunnableConfig) -> Dict[str, Any]:
    offers = normalize_hotels(
        state.get("raw_offers") or [],
        location_id=state["location_id"],
        params=state["params"],
        marker=_client(config).config.marker,
    )
    log.info("search_hotels_done trace_id=%s returned=%s", state["trace_id"], len(offers))
    return {"offers": offers}
