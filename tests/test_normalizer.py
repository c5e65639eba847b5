from __future__ import annotations

import pytest

from app.normalizer import (
    hotel_image_url,
    hotel_property_type,
    hotel_tags,
    normalize_flight,
    normalize_hotel,
)
from app.validation import parse_flight_params, parse_hotel_params


@pytest.fixture
def flight_params(flight_body):
    return parse_flight_params(flight_body)


@pytest.fixture
def hotel_params(hotel_body):
    return parse_hotel_params(hotel_body)


def test_flight_fields_fall_back_to_request(flight_params):
    offer = normalize_flight({}, flight_params)

    assert offer.airline == "Unknown"
    assert offer.origin == "LIM"
    assert offer.destination == "CUN"
    assert offer.price == 0
    assert offer.departure_time is None
    assert offer.stops is None
    assert offer.link == "https://www.aviasales.com/search/LIM2025-03-10CUN2025-03-172"


def test_flight_id_is_deterministic_when_missing(flight_params):
    raw = {"airline": "LA", "value": 420, "departure_at": "2025-03-10T08:00:00-05:00"}

    first = normalize_flight(raw, flight_params)
    second = normalize_flight(dict(raw), flight_params)

    assert first.id.startswith("flight-")
    assert first.id == second.id
    assert first.id != normalize_flight({**raw, "value": 421}, flight_params).id


def test_flight_maps_provider_fields(flight_params):
    raw = {
        "airline": "LA",
        "origin": "LIM",
        "destination": "CUN",
        "departure_at": "2025-03-10T08:00:00-05:00",
        "return_at": "2025-03-17T10:00:00-05:00",
        "value": "385.5",
        "transfers": 0,
        "duration": 510,
        "link": "/search/LIM1003CUN17031?t=abc",
        "currency": "usd",
    }

    offer = normalize_flight(raw, flight_params)

    assert offer.price == 385.5
    assert offer.stops == 0
    assert offer.duration == 510
    assert offer.currency == "USD"
    assert offer.arrival_time == "2025-03-17T10:00:00-05:00"
    assert offer.link == "https://www.aviasales.com/search/LIM1003CUN17031?t=abc"


def test_flight_never_raises_on_garbage(flight_params):
    raw = {"value": -5, "transfers": "many", "duration": "n/a", "airline": None, "link": 7}

    offer = normalize_flight(raw, flight_params)

    assert offer.price == 0
    assert offer.stops is None
    assert offer.duration is None
    assert offer.link.startswith("https://www.aviasales.com/search/LIM")


def test_tags_follow_fixed_order():
    raw = {"rating": 8.5, "amenities": ["wifi"], "stars": 4}

    assert hotel_tags(raw) == ["4★", "Excelente", "WiFi gratis"]


def test_tags_without_stars():
    assert hotel_tags({"rating": 8.5, "amenities": ["wifi"]}) == ["Excelente", "WiFi gratis"]


def test_tags_use_boolean_flags_and_second_rating_band():
    raw = {"rating": 7.2, "wifi": True, "breakfast": True}

    assert hotel_tags(raw) == ["Muy bueno", "WiFi gratis", "Desayuno"]


def test_low_rating_has_no_label():
    assert hotel_tags({"rating": 6.9, "stars": 3.5}) == ["3.5★"]


def test_image_falls_back_in_order():
    assert hotel_image_url({"id": 7, "photoUrls": ["https://img/1.jpg"], "photos": {"main": "x"}}) == "https://img/1.jpg"
    assert hotel_image_url({"id": 7, "photoUrls": [], "photos": {"main": "https://img/main.jpg"}}) == "https://img/main.jpg"
    assert hotel_image_url({"hotelId": 7}) == "https://photo.hotellook.com/image_v2/limit/h7_1/800/520.auto"
    assert hotel_image_url({}) is None


def test_property_type_prefers_explicit_then_stars():
    assert hotel_property_type({"propertyType": "Hostal", "stars": 3}) == "Hostal"
    assert hotel_property_type({"stars": 5}) == "5 estrellas"
    assert hotel_property_type({}) == "Hotel"


def test_hotel_offer_fields(hotel_params):
    raw = {
        "hotelId": 333,
        "hotelName": "Casa Azul",
        "location": {"name": "Zona Hotelera"},
        "stars": 4,
        "priceFrom": 120,
        "priceAvg": 260,
        "distance": 1.5,
    }

    offer = normalize_hotel(raw, location_id="77", params=hotel_params, marker="999")

    assert offer.id == "333"
    assert offer.name == "Casa Azul"
    assert offer.address == "Zona Hotelera"
    assert offer.rating == 4
    assert offer.property_type == "4 estrellas"
    assert offer.price_per_night == 120
    assert offer.price_total == 260
    assert offer.distance_to_center == 1.5
    assert offer.booking_link == (
        "https://search.hotellook.com/hotels?destination=77&checkIn=2025-03-10&checkOut=2025-03-12"
        "&adults=2&currency=USD&hotelId=333&marker=999"
    )


def test_hotel_defaults_for_empty_payload(hotel_params):
    offer = normalize_hotel({}, location_id="77", params=hotel_params, marker="999")

    assert offer.id is None
    assert offer.name == "Hotel"
    assert offer.image_url is None
    assert offer.address == ""
    assert offer.rating == 0
    assert offer.price_per_night == 0
    assert offer.price_total == 0
    assert offer.tags == []
    assert offer.distance_to_center is None
    assert "hotelId=&" in offer.booking_link


def test_hotel_booking_link_ignores_provider_link(hotel_params):
    offer = normalize_hotel({"id": 1, "link": "https://elsewhere"}, location_id="77", params=hotel_params, marker="m")

    assert offer.booking_link.startswith("https://search.hotellook.com/hotels?destination=77")
