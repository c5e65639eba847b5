from __future__ import annotations
from typing import Any, Union
import httpx
from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse, Response
from shared.logging import configure_logging, get_logger
from shared.redis_client import RedisClient
from travel_schemas.tool_schemas import (
    ToolRegistryResponse, RegistryTool,
    SearchFlightsRequest, FlightSearchResult,
    SearchHotelsRequest, HotelSearchResult,
)
from .aggregator import OfferAggregator
from .config import LOG_LEVEL, LOCATION_CACHE_TTL_SECONDS, PROVIDER_TIMEOUT_SECONDS, ProviderConfig
from .location_resolver import LocationCache, LocationResolver
from .provider_client import ProviderClient

configure_logging(LOG_LEVEL)
log = get_logger(__name__)

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type",
}

# Worst case sequential provider calls per search: flights fetch once; hotels try
# the IATA hint, then the destination text, then the price dump.
FLIGHT_PROVIDER_CALLS = 1
HOTEL_PROVIDER_CALLS = 3

app = FastAPI(title="Offer Tool Server", version="v1")


@app.on_event("startup")
async def startup() -> None:
    provider_config = ProviderConfig.from_env()
    if not provider_config.api_token:
        log.warning("TRAVELPAYOUTS_API_TOKEN not set; price searches will degrade to estimated results")

    app.state.http = httpx.AsyncClient(timeout=provider_config.timeout_s)
    app.state.redis = RedisClient.from_env()

    cache = None
    if app.state.redis is not None:
        ok = await app.state.redis.ping()
        log.info("redis ping ok=%s", ok)
        cache = LocationCache(app.state.redis.client(), ttl_seconds=LOCATION_CACHE_TTL_SECONDS)

    client = ProviderClient(provider_config, http=app.state.http)
    app.state.aggregator = OfferAggregator(client, LocationResolver(client, cache=cache))
    log.info("offer_tool started cache=%s", cache is not None)


@app.on_event("shutdown")
async def shutdown() -> None:
    await app.state.http.aclose()
    if app.state.redis is not None:
        await app.state.redis.close()


def get_aggregator(request: Request) -> OfferAggregator:
    return request.app.state.aggregator


async def _read_body(request: Request) -> Any:
    # Unparsable JSON is handed to validation as None and reported as invalid input.
    try:
        return await request.json()
    except ValueError:
        return None


def _envelope_response(result: Union[FlightSearchResult, HotelSearchResult]) -> JSONResponse:
    if result.failure == "validation":
        return JSONResponse(
            status_code=400,
            content={"error": result.error, "details": result.details or []},
            headers=CORS_HEADERS,
        )
    status_code = 500 if result.failure == "internal" else 200
    return JSONResponse(status_code=status_code, content=result.to_payload(), headers=CORS_HEADERS)


def _budget_ms(provider_calls: int) -> int:
    return int(provider_calls * PROVIDER_TIMEOUT_SECONDS * 1000) + 2000


@app.get("/health")
def health():
    return {"ok": True, "service": "offer_tool"}


@app.get("/tools/registry", response_model=ToolRegistryResponse)
def registry():
    tools = [
        RegistryTool(
            name="search_flights",
            description="Search flight prices for a route and date range and return normalized offers",
            input_schema=SearchFlightsRequest.model_json_schema(),
            output_schema=FlightSearchResult.model_json_schema(by_alias=True),
            timeout_ms=_budget_ms(FLIGHT_PROVIDER_CALLS),
            rate_limit="20/min/user",
        ),
        RegistryTool(
            name="search_hotels",
            description="Resolve a destination to a city and return normalized hotel offers",
            input_schema=SearchHotelsRequest.model_json_schema(),
            output_schema=HotelSearchResult.model_json_schema(by_alias=True),
            timeout_ms=_budget_ms(HOTEL_PROVIDER_CALLS),
            rate_limit="20/min/user",
        ),
    ]
    return ToolRegistryResponse(tools=tools)


@app.options("/search-flights")
@app.options("/search-hotels")
def preflight() -> Response:
    return Response(status_code=200, headers=CORS_HEADERS)


@app.post("/search-flights")
async def search_flights(request: Request, aggregator: OfferAggregator = Depends(get_aggregator)):
    result = await aggregator.search_flights(await _read_body(request))
    return _envelope_response(result)


@app.post("/search-hotels")
async def search_hotels(request: Request, aggregator: OfferAggregator = Depends(get_aggregator)):
    result = await aggregator.search_hotels(await _read_body(request))
    return _envelope_response(result)
