import json
import logging
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

import requests

from ..config import Settings
from ..exceptions import PlacesProviderError
from .services import Client

logger = logging.getLogger(__name__)

GOOGLE_MAPS_BASE_URL = "https://maps.googleapis.com/maps/api"
PLACE_DETAIL_FIELDS = (
    "name,formatted_phone_number,opening_hours,types,business_status,"
    "rating,user_ratings_total,website,editorial_summary"
)
GAS_STATION_TYPES = frozenset({"gas_station", "convenience_store"})
# Degrees; about 11 meters of latitude
SAME_LOCATION_TOLERANCE = 0.0001


class PlaceSelection(Enum):
    """Which place record was surfaced for an address, and whether it is a fuel retailer."""

    PRIMARY = ("primary_address", True)
    NEARBY_GAS_STATION = ("nearby_gas_station", True)
    PRIMARY_UNVERIFIED = ("primary_address", False)

    @property
    def data_source(self) -> str:
        return self.value[0]

    @property
    def is_gas_station(self) -> bool:
        return self.value[1]


def is_gas_station(place: Optional[Dict[str, Any]]) -> bool:
    if not place:
        return False
    return any(t in GAS_STATION_TYPES for t in place.get("types") or [])


def _at_location(place: Dict[str, Any], location: Dict[str, float]) -> bool:
    point = (place.get("geometry") or {}).get("location") or {}
    if "lat" not in point or "lng" not in point:
        return False
    return (
        abs(point["lat"] - location["lat"]) < SAME_LOCATION_TOLERANCE
        and abs(point["lng"] - location["lng"]) < SAME_LOCATION_TOLERANCE
    )


def select_place(
    primary: Optional[Dict[str, Any]],
    nearby: List[Dict[str, Any]],
    location: Dict[str, float],
) -> Tuple[PlaceSelection, Optional[Dict[str, Any]]]:
    """
    Decide which place to surface for a geocoded address.

    The place registered at the exact geocoded point is sometimes the parent shopping
    center or a co-tenant rather than the fuel retailer, so a gas station or convenience
    store sitting on the same point wins over a primary place that is neither.

    Returns:
        tuple: (selection, nearby_candidate). The candidate is only set for
               NEARBY_GAS_STATION and still needs its details fetched.
    """
    if is_gas_station(primary):
        return PlaceSelection.PRIMARY, None

    for place in nearby:
        if is_gas_station(place) and _at_location(place, location):
            return PlaceSelection.NEARBY_GAS_STATION, place

    return PlaceSelection.PRIMARY_UNVERIFIED, None


def _get(client: Client, endpoint: str, params: Dict[str, Any], api_key: str) -> Dict[str, Any]:
    try:
        return client.get_json(
            f"{GOOGLE_MAPS_BASE_URL}/{endpoint}", params={**params, "key": api_key}
        )
    except (requests.RequestException, ValueError) as e:
        raise PlacesProviderError(f"Google Maps {endpoint} request failed: {e}") from e


def _place_details(client: Client, place_id: str, api_key: str) -> Optional[Dict[str, Any]]:
    data = _get(
        client,
        "place/details/json",
        {"place_id": place_id, "fields": PLACE_DETAIL_FIELDS},
        api_key,
    )
    if data.get("status") != "OK" or not data.get("result"):
        return None
    return data["result"]


def get_places_data(
    address: str, settings: Settings, client: Optional[Client] = None
) -> Optional[Dict[str, Any]]:
    """
    Find the business operating at an address using Google geocoding and Places.

    Args:
        address: Free-text address
        settings: Provider credentials and search radius
        client: Optional HTTP client

    Returns:
        dict: location, place_id, business, is_gas_station, data_source and
              all_businesses_nearby; None when no key is configured or the address
              does not geocode

    Raises:
        PlacesProviderError: On transport failures or undecodable responses
    """
    if not settings.places_enabled:
        logger.warning("⚠️ Google Maps API key not configured")
        return None

    owns_client = client is None
    client = client or Client()
    api_key = settings.google_maps_api_key

    try:
        logger.info(f"📍 Fetching Google Maps data for: {address}")
        geocode = _get(client, "geocode/json", {"address": address}, api_key)
        if geocode.get("status") != "OK" or not geocode.get("results"):
            logger.warning(f"⚠️ Google Geocoding failed: {geocode.get('status')}")
            return None

        location = geocode["results"][0]["geometry"]["location"]
        address_place_id = geocode["results"][0].get("place_id")
        logger.info(f"📍 Address coordinates: {location['lat']}, {location['lng']}")

        primary = _place_details(client, address_place_id, api_key) if address_place_id else None
        if primary:
            logger.info(
                f"✅ Primary business at address: {primary.get('name')} "
                f"({', '.join(primary.get('types') or [])})"
            )

        nearby_data = _get(
            client,
            "place/nearbysearch/json",
            {
                "location": f"{location['lat']},{location['lng']}",
                "radius": settings.nearby_search_radius,
            },
            api_key,
        )
        nearby = []
        if nearby_data.get("status") == "OK":
            nearby = nearby_data.get("results") or []
        logger.info(f"📊 Found {len(nearby)} businesses nearby")

        selection, candidate = select_place(primary, nearby, location)
        business, place_id = primary, address_place_id

        if selection is PlaceSelection.NEARBY_GAS_STATION:
            details = _place_details(client, candidate["place_id"], api_key)
            if details:
                business, place_id = details, candidate["place_id"]
                logger.info(f"⛽ Using nearby gas station: {details.get('name')}")
            else:
                selection = PlaceSelection.PRIMARY_UNVERIFIED

        if selection is PlaceSelection.PRIMARY_UNVERIFIED:
            name = primary.get("name") if primary else "Unknown"
            logger.warning(f"⚠️ No gas station found - using primary business: {name}")

        places_data = {
            "location": location,
            "place_id": place_id,
            "business": business,
            "is_gas_station": selection.is_gas_station,
            "data_source": selection.data_source,
            "all_businesses_nearby": [
                {
                    "name": b.get("name"),
                    "types": b.get("types") or [],
                    "place_id": b.get("place_id"),
                }
                for b in nearby
            ],
        }
        logger.debug("Raw places data: %s", json.dumps(places_data, default=str))
        return places_data
    finally:
        if owns_client:
            client.close()
