from __future__ import annotations
from typing import Any, Dict, List, Literal, Optional
from pydantic import ConfigDict, BaseModel, Field, conint, field_validator, model_validator
from .models import CamelModel, FlightOffer, HotelOffer

# Shape check only: month and day ranges, no calendar validity.
DATE_PATTERN = r"^\d{4}-(0[1-9]|1[0-2])-(0[1-9]|[12]\d|3[01])$"
CODE3_PATTERN = r"^[A-Za-z]{3}$"

FailureKind = Literal["validation", "not_found", "provider", "internal"]


class RegistryTool(BaseModel):
    name: str
    description: str
    version: str = "v1"
    input_schema: dict
    output_schema: dict
    timeout_ms: int = 5000
    rate_limit: str = "n/a"


class ToolRegistryResponse(BaseModel):
    tools: List[RegistryTool]


class _SearchRequest(CamelModel):
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)


# Flight search
class SearchFlightsRequest(_SearchRequest):
    origin: str = Field(..., min_length=2, max_length=100)
    destination: str = Field(..., min_length=2, max_length=100)
    start_date: str = Field(..., pattern=DATE_PATTERN, description="YYYY-MM-DD")
    end_date: Optional[str] = Field(default=None, pattern=DATE_PATTERN, description="YYYY-MM-DD")
    passengers: conint(strict=True, ge=1, le=20)

    @field_validator("end_date", mode="before")
    @classmethod
    def _blank_end_date(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @model_validator(mode="after")
    def _check_date_order(self) -> "SearchFlightsRequest":
        # YYYY-MM-DD strings order lexically
        if self.end_date is not None and self.end_date < self.start_date:
            raise ValueError("endDate must not be before startDate")
        return self


class FlightSearchResult(CamelModel):
    flights: List[FlightOffer] = Field(default_factory=list)
    is_estimated: bool = True
    error: Optional[str] = None
    details: Optional[List[str]] = None
    failure: Optional[FailureKind] = Field(default=None, exclude=True)

    @model_validator(mode="after")
    def _empty_is_estimated(self) -> "FlightSearchResult":
        if not self.flights:
            self.is_estimated = True
        return self

    def to_payload(self) -> Dict[str, Any]:
        return _drop_absent(self.model_dump(mode="json", by_alias=True))


# Hotel search
class SearchHotelsRequest(_SearchRequest):
    destination: str = Field(..., min_length=2)
    iata_code: Optional[str] = Field(default=None, pattern=CODE3_PATTERN)
    check_in: str = Field(..., pattern=DATE_PATTERN, description="YYYY-MM-DD")
    check_out: str = Field(..., pattern=DATE_PATTERN, description="YYYY-MM-DD")
    adults: conint(strict=True, ge=1, le=10) = 2
    currency: str = Field(default="USD", pattern=CODE3_PATTERN)
    limit: conint(strict=True, ge=1, le=20) = 10

    @model_validator(mode="after")
    def _check_date_order(self) -> "SearchHotelsRequest":
        if self.check_out <= self.check_in:
            raise ValueError("checkOut must be after checkIn")
        return self


class HotelSearchResult(CamelModel):
    hotels: List[HotelOffer] = Field(default_factory=list)
    city_id: Optional[str] = None
    is_estimated: bool = True
    message: Optional[str] = None
    error: Optional[str] = None
    details: Optional[List[str]] = None
    failure: Optional[FailureKind] = Field(default=None, exclude=True)

    @model_validator(mode="after")
    def _empty_is_estimated(self) -> "HotelSearchResult":
        if not self.hotels:
            self.is_estimated = True
        return self

    @property
    def location_id(self) -> Optional[str]:
        return self.city_id

    def to_payload(self) -> Dict[str, Any]:
        return _drop_absent(self.model_dump(mode="json", by_alias=True))


def _drop_absent(payload: Dict[str, Any]) -> Dict[str, Any]:
    return {key: value for key, value in payload.items() if value is not None}
