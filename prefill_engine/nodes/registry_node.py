import logging
from ..config import Settings
from ..state import ReconciliationState
from ..sources import find_registry_match

logger = logging.getLogger(__name__)


class RegistryNode:
    """Node for matching the address against the license and corporate registries."""

    def __init__(self, settings: Settings):
        """Initialize the registry node."""
        self.settings = settings

    def run(self, state: ReconciliationState) -> dict:
        """Look up the tobacco license and registered business for the address."""
        logger.info(f"🪪 Searching registry for: {state['address']}")

        try:
            registry_match = find_registry_match(state["address"], self.settings)

            return {
                "registry_match": registry_match,
                "current_step": "Registry search completed",
                "next_steps": ["resolve_ownership"],
            }
        except Exception as e:
            error_msg = f"Registry search error: {str(e)}"
            logger.error(error_msg)

            return {
                "registry_match": None,
                "errors": [error_msg],
                "current_step": "Registry search failed",
                "next_steps": ["resolve_ownership"],
            }
