"""
Delivery address normalization

Clients send either a free-text address or a structured object. Both are
turned into one Address value at the intake boundary.
"""

from dataclasses import dataclass
from typing import Any, Mapping, Optional, Union

from foodorder.utils.error_handler import BadRequest

@dataclass(frozen=True)
class Coordinates:
    latitude: float = 0.0
    longitude: float = 0.0

@dataclass(frozen=True)
class Address:
    """Canonical delivery address stored on an order"""
    street: str
    city: str = ""
    state: str = ""
    zip_code: str = ""
    coordinates: Coordinates = Coordinates()

    def to_document(self) -> dict:
        return {
            "street": self.street,
            "city": self.city,
            "state": self.state,
            "zip_code": self.zip_code,
            "coordinates": {
                "latitude": self.coordinates.latitude,
                "longitude": self.coordinates.longitude,
            },
        }

def _text(value: Optional[Any]) -> str:
    return "" if value is None else str(value)

def normalize_address(raw: Union[str, Mapping[str, Any], Any, None]) -> Address:
    """Resolve a raw or structured address into an Address.

    A bare string becomes the street line; city, state and zip code stay empty
    and coordinates are zero. No geocoding happens here.
    """
    if raw is None:
        raise BadRequest("Delivery address is required", field="deliveryAddress")

    if isinstance(raw, str):
        if not raw.strip():
            raise BadRequest("Delivery address is required", field="deliveryAddress")
        return Address(street=raw)

    if not isinstance(raw, Mapping):
        # pydantic models from the request layer
        raw = raw.model_dump()

    coords = raw.get("coordinates") or {}
    return Address(
        street=_text(raw.get("street")),
        city=_text(raw.get("city")),
        state=_text(raw.get("state")),
        zip_code=_text(raw.get("zip_code", raw.get("zipCode"))),
        coordinates=Coordinates(
            latitude=float(coords.get("latitude") or 0),
            longitude=float(coords.get("longitude") or 0),
        ),
    )
