from __future__ import annotations
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Serialized with camelCase keys; accepts either spelling on input."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class FlightOffer(CamelModel):
    model_config = ConfigDict(frozen=True)

    id: str
    airline: str = "Unknown"
    origin: str
    destination: str
    departure_time: Optional[str] = None
    arrival_time: Optional[str] = None
    price: float = Field(default=0.0, ge=0)
    currency: str = "USD"
    link: str
    stops: Optional[int] = Field(default=None, ge=0)
    duration: Optional[int] = None


class HotelOffer(CamelModel):
    model_config = ConfigDict(frozen=True)

    id: Optional[str] = None
    name: str = "Hotel"
    image_url: Optional[str] = None
    address: str = ""
    rating: float = 0.0
    property_type: str = "Hotel"
    price_per_night: float = Field(default=0.0, ge=0)
    price_total: float = Field(default=0.0, ge=0)
    tags: List[str] = Field(default_factory=list)
    booking_link: str
    distance_to_center: Optional[float] = None
