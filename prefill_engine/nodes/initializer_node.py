import logging
from ..state import ReconciliationState

logger = logging.getLogger(__name__)


class InitializerNode:
    """Node for initializing the reconciliation workflow."""

    def __init__(self):
        """Initialize the initializer node."""
        pass

    def run(self, state: ReconciliationState) -> dict:
        """Normalize the entered address and fan out to the data sources."""
        address = " ".join(state["address"].split())
        logger.info(f"🔍 Starting property reconciliation for: {address}")

        return {
            "address": address,
            "current_step": "Initialization completed",
            "next_steps": ["parcel_search", "places_search"],
        }
