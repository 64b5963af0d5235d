import logging
from ..config import Settings
from ..mapping import map_to_insurance_form
from ..state import ReconciliationState

logger = logging.getLogger(__name__)


class MappingNode:
    """Node for building the insurance-form field set."""

    def __init__(self, settings: Settings):
        """Initialize the mapping node."""
        self.settings = settings

    def run(self, state: ReconciliationState) -> dict:
        """Map the parcel and places records onto form fields."""
        logger.info("🗺️ Mapping property data to form fields")

        mapped = map_to_insurance_form(
            state["property_data"],
            state.get("places_data"),
            state["address"],
            maps_api_key=self.settings.google_maps_api_key,
        )

        return {
            "mapped_data": mapped,
            "current_step": "Mapping completed",
            "next_steps": ["registry_search"],
        }
