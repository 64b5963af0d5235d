import logging
from ..state import ReconciliationState
from ..validation import validate_property

logger = logging.getLogger(__name__)


class ValidationNode:
    """Node for classifying the parcel as a c-store or something else."""

    def __init__(self):
        """Initialize the validation node."""
        pass

    def run(self, state: ReconciliationState) -> dict:
        """Validate the property once both source fetches have finished."""
        property_data = state.get("property_data")
        if not property_data:
            return {
                "current_step": "Validation skipped",
                "next_steps": ["finalize"],
            }

        logger.info("🔎 Validating property type")
        verdict = validate_property(property_data, state.get("places_data"))

        for warning in verdict.warnings:
            logger.warning(warning)
        logger.info(
            f"Validation: valid={verdict.is_valid}, type={verdict.property_type.value}, "
            f"confidence={verdict.confidence.value}"
        )

        return {
            "validation": verdict,
            "current_step": "Validation completed",
            "next_steps": ["map_fields"],
        }
