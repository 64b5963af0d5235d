from typing import Any, Dict, List, Optional, TypedDict, Annotated
from typing_extensions import Required
import operator

from .models import OwnershipVerdict, ValidationVerdict


class InputState(TypedDict, total=False):
    """
    Input state for reconciliation containing the address to reconcile.

    Attributes:
        address: Required free-text business address
    """

    address: Required[str]


class ReconciliationState(InputState):
    """
    Complete state for one reconciliation request.

    Every request starts from a fresh state; nothing is shared between requests.
    """

    # Use Annotated with a reducer to handle concurrent updates
    # Keeps the latest non-empty value
    address: Annotated[str, lambda x, y: y or x]
    """Business address being reconciled, as entered by the agent"""

    property_data: Optional[Dict[str, Any]]
    """
    Parcel record from the parcel data provider:
    - principal: Principal record with attributes and matched_address
    - smarty_key: Provider key of the parcel
    - datasets: Secondary datasets keyed by name (property_financial, ...)
    """

    places_data: Optional[Dict[str, Any]]
    """
    Business presence from the places provider:
    - location: Geocoded point (lat, lng)
    - business: Place details of the selected business
    - is_gas_station: Whether the selected business is a gas station or c-store
    - data_source: primary_address or nearby_gas_station
    - all_businesses_nearby: Name, types and place id of co-located businesses
    """

    validation: Optional[ValidationVerdict]
    """Property validity verdict derived from the parcel and places records"""

    mapped_data: Optional[Dict[str, Any]]
    """Flat insurance-form field set built from the parcel and places records"""

    registry_match: Optional[Dict[str, Any]]
    """
    Registry match for the address:
    - license: Best tobacco license row
    - business: Best corporate registry row with years_at_location, or None
    """

    ownership: Optional[OwnershipVerdict]
    """Owner or tenant determination for the applicant"""

    result: Optional[Dict[str, Any]]
    """Response payload assembled by the finalize node"""

    # Process tracking - use Annotated with reducers to handle concurrent updates
    current_step: Annotated[str, lambda x, y: y]  # Take the latest step
    """Current step in the reconciliation process"""

    next_steps: Annotated[List[str], operator.add]  # Combine lists
    """List of steps to execute next"""

    errors: Annotated[List[str], operator.add]  # Combine error lists
    """List of non-fatal errors encountered during reconciliation"""
