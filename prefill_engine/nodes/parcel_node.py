import logging
from ..config import Settings
from ..state import ReconciliationState
from ..sources import get_property_data

logger = logging.getLogger(__name__)


class ParcelNode:
    """Node for retrieving the parcel record from the parcel data provider."""

    def __init__(self, settings: Settings):
        """Initialize the parcel node."""
        self.settings = settings

    def run(self, state: ReconciliationState) -> dict:
        """
        Fetch the parcel record for the address.

        Provider failures are not converted into state errors; they abort the request.
        """
        logger.info(f"🏢 Searching parcel data for: {state['address']}")

        try:
            property_data = get_property_data(state["address"], self.settings)
        except Exception as e:
            logger.error(f"Parcel search error: {str(e)}")
            raise

        if property_data is None:
            logger.warning(f"⚠️ No parcel record found for: {state['address']}")

        return {
            "property_data": property_data,
            "current_step": "Parcel search completed",
            "next_steps": ["validate_property"],
        }
