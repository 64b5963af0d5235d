"""
Data sources for property reconciliation.

- Parcel provider: Smarty US property enrichment (owner, building, mortgage attributes)
- Places provider: Google geocoding, place details and nearby search
- Registry store: PostgreSQL tobacco license and corporate registry tables
"""

from .parcel_provider import get_property_data
from .places_provider import PlaceSelection, get_places_data, select_place
from .registry_store import find_registry_match

__all__ = [
    "get_property_data",
    "get_places_data",
    "select_place",
    "PlaceSelection",
    "find_registry_match",
]
