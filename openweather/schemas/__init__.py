from .location import Location, LocationType

__all__ = ["Location", "LocationType"]
