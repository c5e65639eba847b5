"""Map raw provider offers onto the canonical FlightOffer / HotelOffer models.

Each canonical field is read through an ordered tuple of key paths; the first
truthy value wins. Paths are dotted, and integer segments index into lists
(``photoUrls.0``). Nothing in here raises on odd payloads: every field has a
deterministic fallback.
"""
from __future__ import annotations

import hashlib
import json
import math
from typing import Any, Dict, Iterable, List, Optional
from urllib.parse import urlencode

from travel_schemas.models import FlightOffer, HotelOffer
from travel_schemas.tool_schemas import SearchFlightsRequest, SearchHotelsRequest

AVIASALES_ROOT = "https://www.aviasales.com"
HOTEL_BOOKING_URL = "https://search.hotellook.com/hotels"
HOTEL_PHOTO_URL = "https://photo.hotellook.com/image_v2/limit/h{hotel_id}_1/800/520.auto"

# Flight extraction rules
FLIGHT_ID = ("id",)
FLIGHT_AIRLINE = ("airline",)
FLIGHT_ORIGIN = ("origin",)
FLIGHT_DESTINATION = ("destination",)
FLIGHT_DEPARTURE = ("departure_at",)
FLIGHT_ARRIVAL = ("return_at",)
FLIGHT_PRICE = ("value", "price")
FLIGHT_CURRENCY = ("currency",)
FLIGHT_LINK = ("link",)
FLIGHT_DURATION = ("duration", "duration_to")
# 0 transfers is meaningful, so stops is read without the truthiness rule
FLIGHT_STOPS = ("transfers", "number_of_changes", "stops")

# Hotel extraction rules
HOTEL_ID = ("id", "hotelId")
HOTEL_NAME = ("name", "hotelName")
HOTEL_PHOTO = ("photoUrls.0", "photos.main")
HOTEL_ADDRESS = ("address", "location.name")
HOTEL_RATING = ("rating", "stars")
HOTEL_STARS = ("stars",)
HOTEL_PROPERTY_TYPE = ("propertyType",)
HOTEL_PRICE_PER_NIGHT = ("priceFrom", "price", "minPrice")
HOTEL_PRICE_TOTAL = ("priceAvg", "priceFrom")
HOTEL_DISTANCE = ("distance", "distanceToCenter")

LABEL_EXCELLENT = "Excelente"
LABEL_VERY_GOOD = "Muy bueno"
TAG_WIFI = "WiFi gratis"
TAG_BREAKFAST = "Desayuno"


def _lookup(raw: Any, path: str) -> Any:
    current = raw
    for part in path.split("."):
        if isinstance(current, dict):
            current = current.get(part)
        elif isinstance(current, list) and part.isdigit():
            index = int(part)
            current = current[index] if index < len(current) else None
        else:
            return None
    return current


def first_match(raw: Dict[str, Any], paths: Iterable[str], default: Any = None) -> Any:
    for path in paths:
        value = _lookup(raw, path)
        if value:
            return value
    return default


def first_present(raw: Dict[str, Any], paths: Iterable[str]) -> Any:
    for path in paths:
        value = _lookup(raw, path)
        if value is not None:
            return value
    return None


def _to_float(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def _to_int(value: Any) -> Optional[int]:
    number = _to_float(value)
    if number is None:
        return None
    return int(number)


def _amount(value: Any) -> float:
    number = _to_float(value)
    if number is None or number < 0:
        return 0.0
    return number


def _text(value: Any) -> Optional[str]:
    if value is None:
        return None
    return str(value)


def format_number(value: Any) -> str:
    """4.0 -> "4", 4.5 -> "4.5", anything unparsable passes through as text."""
    number = _to_float(value)
    if number is None:
        return str(value)
    if number.is_integer():
        return str(int(number))
    return str(number)


# Flights
def flight_offer_id(raw: Dict[str, Any]) -> str:
    provided = first_match(raw, FLIGHT_ID)
    if provided:
        return str(provided)
    digest = hashlib.sha1(json.dumps(raw, sort_keys=True, default=str).encode("utf-8")).hexdigest()
    return f"flight-{digest[:12]}"


def flight_search_link(params: SearchFlightsRequest) -> str:
    return (
        f"{AVIASALES_ROOT}/search/"
        f"{params.origin}{params.start_date}{params.destination}{params.end_date or ''}{params.passengers}"
    )


def flight_link(raw: Dict[str, Any], params: SearchFlightsRequest) -> str:
    link = first_match(raw, FLIGHT_LINK)
    if isinstance(link, str) and link:
        return f"{AVIASALES_ROOT}{link}" if link.startswith("/") else link
    return flight_search_link(params)


def normalize_flight(raw: Dict[str, Any], params: SearchFlightsRequest) -> FlightOffer:
    stops = _to_int(first_present(raw, FLIGHT_STOPS))
    return FlightOffer(
        id=flight_offer_id(raw),
        airline=str(first_match(raw, FLIGHT_AIRLINE, "Unknown")),
        origin=str(first_match(raw, FLIGHT_ORIGIN, params.origin)),
        destination=str(first_match(raw, FLIGHT_DESTINATION, params.destination)),
        departure_time=_text(first_match(raw, FLIGHT_DEPARTURE)),
        arrival_time=_text(first_match(raw, FLIGHT_ARRIVAL)),
        price=_amount(first_match(raw, FLIGHT_PRICE, 0)),
        currency=str(first_match(raw, FLIGHT_CURRENCY, "USD")).upper(),
        link=flight_link(raw, params),
        stops=stops if stops is not None and stops >= 0 else None,
        duration=_to_int(first_match(raw, FLIGHT_DURATION)),
    )


def normalize_flights(raws: Iterable[Dict[str, Any]], params: SearchFlightsRequest) -> List[FlightOffer]:
    return [normalize_flight(raw, params) for raw in raws]


# Hotels
def hotel_id(raw: Dict[str, Any]) -> Optional[str]:
    return _text(first_match(raw, HOTEL_ID))


def hotel_image_url(raw: Dict[str, Any]) -> Optional[str]:
    photo = first_match(raw, HOTEL_PHOTO)
    if photo:
        return str(photo)
    hid = hotel_id(raw)
    if hid:
        return HOTEL_PHOTO_URL.format(hotel_id=hid)
    return None


def hotel_property_type(raw: Dict[str, Any]) -> str:
    explicit = first_match(raw, HOTEL_PROPERTY_TYPE)
    if explicit:
        return str(explicit)
    stars = first_match(raw, HOTEL_STARS)
    if stars:
        return f"{format_number(stars)} estrellas"
    return "Hotel"


def _rating_label(rating: Optional[float]) -> Optional[str]:
    if rating is None:
        return None
    if rating >= 8:
        return LABEL_EXCELLENT
    if rating >= 7:
        return LABEL_VERY_GOOD
    return None


def _has_amenity(raw: Dict[str, Any], name: str) -> bool:
    amenities = raw.get("amenities")
    if isinstance(amenities, (list, tuple)):
        if any(isinstance(item, str) and item.lower() == name for item in amenities):
            return True
    return bool(raw.get(name))


def hotel_tags(raw: Dict[str, Any]) -> List[str]:
    """Star badge, rating label, WiFi, breakfast; in that order, absent ones dropped."""
    stars = first_match(raw, HOTEL_STARS)
    candidates = [
        f"{format_number(stars)}★" if stars else None,
        _rating_label(_to_float(raw.get("rating"))),
        TAG_WIFI if _has_amenity(raw, "wifi") else None,
        TAG_BREAKFAST if _has_amenity(raw, "breakfast") else None,
    ]
    return [tag for tag in candidates if tag]


def hotel_booking_link(hid: Optional[str], location_id: str, params: SearchHotelsRequest, marker: str) -> str:
    # The price dump exposes no public booking URL, so the link is always built here.
    query = urlencode(
        {
            "destination": location_id,
            "checkIn": params.check_in,
            "checkOut": params.check_out,
            "adults": params.adults,
            "currency": params.currency,
            "hotelId": hid or "",
            "marker": marker,
        }
    )
    return f"{HOTEL_BOOKING_URL}?{query}"


def normalize_hotel(
    raw: Dict[str, Any],
    *,
    location_id: str,
    params: SearchHotelsRequest,
    marker: str,
) -> HotelOffer:
    hid = hotel_id(raw)
    return HotelOffer(
        id=hid,
        name=str(first_match(raw, HOTEL_NAME, "Hotel")),
        image_url=hotel_image_url(raw),
        address=str(first_match(raw, HOTEL_ADDRESS, "")),
        rating=_amount(first_match(raw, HOTEL_RATING, 0)),
        property_type=hotel_property_type(raw),
        price_per_night=_amount(first_match(raw, HOTEL_PRICE_PER_NIGHT, 0)),
        price_total=_amount(first_match(raw, HOTEL_PRICE_TOTAL, 0)),
        tags=hotel_tags(raw),
        booking_link=hotel_booking_link(hid, location_id, params, marker),
        distance_to_center=_to_float(first_match(raw, HOTEL_DISTANCE)),
    )


def normalize_hotels(
    raws: Iterable[Dict[str, Any]],
    *,
    location_id: str,
    params: SearchHotelsRequest,
    marker: str,
) -> List[HotelOffer]:
    return [normalize_hotel(raw, location_id=location_id, params=params, marker=marker) for raw in raws]
