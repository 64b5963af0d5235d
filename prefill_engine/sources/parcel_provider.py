import json
import logging
from typing import Any, Dict, Optional

import requests

from ..config import Settings
from ..exceptions import ParcelProviderError
from .services import Client

logger = logging.getLogger(__name__)

# Secondary datasets fetched by parcel key once the principal record is known
DATASETS = (("property_financial", "property/financial"),)


def _auth_params(settings: Settings) -> Dict[str, str]:
    return {"auth-id": settings.smarty_auth_id, "auth-token": settings.smarty_auth_token}


def _fetch_principal(client: Client, address: str, settings: Settings) -> Optional[Dict[str, Any]]:
    """
    Look up the principal property record for a free-text address.

    Returns:
        dict: The first principal record, or None when the provider has no match

    Raises:
        ParcelProviderError: On transport failure, bad credentials or a non-2xx response
    """
    url = f"{settings.smarty_base_url}/lookup/search/property/principal"
    params = {"freeform": address, "features": "financial", **_auth_params(settings)}

    try:
        response = client.get(url, params=params)
    except requests.RequestException as e:
        raise ParcelProviderError(f"Parcel provider unreachable: {e}") from e

    if response.status_code == 401:
        raise ParcelProviderError("Invalid Smarty API credentials", status_code=401)
    if not response.ok:
        raise ParcelProviderError(
            f"Smarty API error: {response.status_code} {response.reason}",
            status_code=response.status_code,
        )

    # Smarty answers an unmatched address with an empty body or an empty list
    if not response.content:
        return None
    try:
        records = response.json()
    except ValueError as e:
        raise ParcelProviderError(f"Smarty API returned invalid JSON: {e}") from e

    if not records:
        return None
    return records[0]


def _fetch_dataset(client: Client, smarty_key: str, path: str, settings: Settings):
    """Fetch one keyed dataset. Any failure yields None; datasets are optional."""
    url = f"{settings.smarty_base_url}/lookup/{smarty_key}/{path}"
    try:
        response = client.get(url, params=_auth_params(settings))
        if not response.ok:
            return None
        data = response.json()
    except (requests.RequestException, ValueError) as e:
        logger.warning(f"Dataset {path} unavailable for {smarty_key}: {e}")
        return None

    if isinstance(data, list):
        return data[0] if data else None
    return data


def get_property_data(
    address: str, settings: Settings, client: Optional[Client] = None
) -> Optional[Dict[str, Any]]:
    """
    Retrieve the parcel record for an address from the Smarty US enrichment API.

    Args:
        address: Free-text property address
        settings: Provider credentials
        client: Optional HTTP client (a new one is created and closed otherwise)

    Returns:
        dict: {"principal": {...}, "smarty_key": str, "datasets": {name: {...}}},
              or None when the address has no principal record
    """
    owns_client = client is None
    client = client or Client()

    try:
        logger.info(f"📡 Requesting principal property data for: {address}")
        principal = _fetch_principal(client, address, settings)
        if principal is None:
            return None

        smarty_key = principal.get("smarty_key")
        logger.info(f"🔑 Found SmartyKey: {smarty_key}")

        property_data = {"principal": principal, "smarty_key": smarty_key, "datasets": {}}
        if smarty_key:
            for name, path in DATASETS:
                dataset = _fetch_dataset(client, smarty_key, path, settings)
                if dataset:
                    property_data["datasets"][name] = dataset

        logger.info(
            f"✅ Fetched property data with {len(property_data['datasets'])} datasets"
        )
        logger.debug("Raw parcel data: %s", json.dumps(property_data, default=str))
        return property_data
    finally:
        if owns_client:
            client.close()
