import logging
from ..config import Settings
from ..state import ReconciliationState
from ..sources import get_places_data

logger = logging.getLogger(__name__)


class PlacesNode:
    """Node for finding the business operating at the address."""

    def __init__(self, settings: Settings):
        """Initialize the places node."""
        self.settings = settings

    def run(self, state: ReconciliationState) -> dict:
        """Search the places provider; failures degrade to no business data."""
        logger.info(f"📍 Searching places data for: {state['address']}")

        try:
            places_data = get_places_data(state["address"], self.settings)

            return {
                "places_data": places_data,
                "current_step": "Places search completed",
                "next_steps": ["validate_property"],
            }
        except Exception as e:
            error_msg = f"Places search error: {str(e)}"
            logger.error(error_msg)
            logger.exception("Detailed error:")

            return {
                "places_data": None,
                "errors": [error_msg],
                "current_step": "Places search failed",
                "next_steps": ["validate_property"],  # Continue without business data
            }
