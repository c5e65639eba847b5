# apps/offer_tool/app/state.py

from typing import Any, Dict, List, Optional, TypedDict

from travel_schemas.models import FlightOffer, HotelOffer
from travel_schemas.tool_schemas import FailureKind, SearchFlightsRequest, SearchHotelsRequest


class FlightSearchState(TypedDict, total=False):
    # Input state
    raw_request: Any
    trace_id: str

    # Populated by nodes
    params: SearchFlightsRequest
    raw_offers: List[Dict[str, Any]]

    # Output state
    offers: List[FlightOffer]

    # Set by whichever node short-circuits the run
    failure: Optional[FailureKind]
    error: Optional[str]
    details: Optional[List[str]]


class HotelSearchState(TypedDict, total=False):
    raw_request: Any
    trace_id: str

    params: SearchHotelsRequest
    location_id: Optional[str]
    raw_offers: List[Dict[str, Any]]

    offers: List[HotelOffer]

    failure: Optional[FailureKind]
    error: Optional[str]
    details: Optional[List[str]]
    message: Optional[str]
