import logging
from ..state import ReconciliationState

logger = logging.getLogger(__name__)

NOT_FOUND_MESSAGE = "Address not found or invalid"


class FinalizeNode:
    """Node for assembling the response payload."""

    def __init__(self):
        """Initialize the finalize node."""
        pass

    def run(self, state: ReconciliationState) -> dict:
        """
        Build the reconciliation result.

        A request without a parcel record is unsuccessful and carries no form data.
        Otherwise the result holds the form fields, both verdicts and the raw registry
        match, along with any non-fatal errors gathered on the way.
        """
        logger.info("🏁 Finalizing property reconciliation")
        errors = list(state.get("errors") or [])

        if not state.get("property_data"):
            logger.warning(f"⚠️ {NOT_FOUND_MESSAGE}: {state['address']}")
            return {
                "result": {
                    "success": False,
                    "data": {},
                    "message": NOT_FOUND_MESSAGE,
                    "errors": errors,
                },
                "current_step": "Finalization completed",
                "next_steps": [],
            }

        mapped = state.get("mapped_data") or {}
        validation = state.get("validation")
        ownership = state.get("ownership")
        fields_count = len(mapped)

        result = {
            "success": True,
            "data": mapped,
            "validation": validation.to_dict() if validation else None,
            "ownership": ownership.to_dict() if ownership else None,
            "registry": state.get("registry_match"),
            "message": f"Auto-filled {fields_count} fields from property data",
            "fieldsCount": fields_count,
            "errors": errors,
        }
        logger.info(f"✅ {result['message']}")

        return {
            "result": result,
            "current_step": "Finalization completed",
            "next_steps": [],
        }
