from __future__ import annotations

from typing import Any, List, Type, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from travel_schemas.tool_schemas import SearchFlightsRequest, SearchHotelsRequest

from .errors import ValidationError

RequestT = TypeVar("RequestT", bound=BaseModel)

_VALUE_ERROR_PREFIX = "Value error, "


def _messages(exc: PydanticValidationError) -> List[str]:
    messages = []
    for err in exc.errors():
        msg = err["msg"]
        if msg.startswith(_VALUE_ERROR_PREFIX):
            msg = msg[len(_VALUE_ERROR_PREFIX):]
        field = ".".join(str(part) for part in err["loc"])
        messages.append(f"{field}: {msg}" if field else msg)
    return messages


def _parse(model: Type[RequestT], raw: Any) -> RequestT:
    try:
        return model.model_validate(raw)
    except PydanticValidationError as exc:
        raise ValidationError(_messages(exc)) from exc


def parse_flight_params(raw: Any) -> SearchFlightsRequest:
    """Validate a raw flight search body; every violated rule is reported."""
    return _parse(SearchFlightsRequest, raw)


def parse_hotel_params(raw: Any) -> SearchHotelsRequest:
    """Validate a raw hotel search body and fill in adults/currency/limit defaults."""
    return _parse(SearchHotelsRequest, raw)
