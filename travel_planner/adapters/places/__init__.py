"""Places and geocoding adapters."""

from travel_planner.adapters.places.geoapify import GeoapifyGeocodingProvider, GeoapifyPlacesProvider
from travel_planner.adapters.places.synthetic import synthetic_pois

__all__ = ["GeoapifyGeocodingProvider", "GeoapifyPlacesProvider", "synthetic_pois"]
