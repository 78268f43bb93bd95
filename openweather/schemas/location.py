from __future__ import annotations

from enum import Enum
from typing import Dict, Optional, Union

from pydantic import BaseModel, ConfigDict

from ..asserts import require_in_range, require_number, require_string

MIN_LOCATION_ID = 1
MAX_LOCATION_ID = 99999999


class LocationType(str, Enum):
    ID = "id"
    NAME = "name"
    COORDINATES = "coordinates"
    ZIP = "zip"


class Location(BaseModel):
    """A place the weather API can be queried for.

    Build instances through the ``get_by_*`` factories, which validate their
    arguments; only the fields matching ``type`` are set.
    """

    model_config = ConfigDict(frozen=True)

    type: LocationType
    id: Optional[Union[int, float]] = None
    name: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    zip: Optional[str] = None
    country: Optional[str] = None

    @classmethod
    def get_by_id(cls, id: Union[int, float]) -> "Location":
        require_number(id, "Value is not a number.")
        require_in_range(id, MIN_LOCATION_ID, MAX_LOCATION_ID, "Location id value should be between @1 and @2")
        return cls(type=LocationType.ID, id=id)

    @classmethod
    def get_by_name(cls, name: str) -> "Location":
        require_string(name, "Location name is invalid.")
        return cls(type=LocationType.NAME, name=name)

    @classmethod
    def get_by_coordinates(cls, latitude: float, longitude: float) -> "Location":
        require_number(latitude, "Location latitude is invalid.")
        require_number(longitude, "Location longitude is invalid.")
        require_in_range(latitude, -90, 90, "Location latitude @ should be between @1 and @2")
        require_in_range(longitude, -180, 180, "Location longitude @ should be between @1 and @2")
        return cls(type=LocationType.COORDINATES, latitude=latitude, longitude=longitude)

    @classmethod
    def get_by_zip(cls, zip: str, country: str) -> "Location":
        require_string(zip, "Location zip is invalid.")
        require_string(country, "Location country is invalid.")
        return cls(type=LocationType.ZIP, zip=zip, country=country)

    def query_params(self) -> Dict[str, Union[int, float, str]]:
        """Query parameters identifying this location to the OpenWeatherMap API."""
        if self.type is LocationType.ID:
            return {"id": self.id}
        if self.type is LocationType.NAME:
            return {"q": self.name}
        if self.type is LocationType.COORDINATES:
            return {"lat": self.latitude, "lon": self.longitude}
        return {"zip": f"{self.zip},{self.country}"}
