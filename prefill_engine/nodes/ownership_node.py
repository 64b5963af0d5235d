import logging
from ..mapping import apply_registry_match
from ..ownership import comparison_name, resolve_ownership
from ..state import ReconciliationState

logger = logging.getLogger(__name__)


class OwnershipNode:
    """Node for enriching the form with registry data and deciding owner vs tenant."""

    def __init__(self, min_match_length: int = 0):
        """Initialize the ownership node."""
        self.min_match_length = min_match_length

    def run(self, state: ReconciliationState) -> dict:
        registry_match = state.get("registry_match")
        mapped = apply_registry_match(state["mapped_data"], registry_match)

        ownership = resolve_ownership(
            mapped, comparison_name(registry_match), min_match_length=self.min_match_length
        )
        logger.info(f"🏠 Ownership status: {ownership.status.value}")

        return {
            "mapped_data": mapped,
            "ownership": ownership,
            "current_step": "Ownership resolution completed",
            "next_steps": ["finalize"],
        }
