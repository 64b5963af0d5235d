"""
Property validation: is this parcel an operating convenience store or gas station?

The verdict is a fold over an ordered list of rules. Each rule looks at the same
facts and may append a warning or info line and move the property type, confidence
or validity. Later rules win for the scalar fields; warnings and info accumulate.
"""

from dataclasses import dataclass
from functools import reduce
from typing import Any, Callable, Dict, Optional, Tuple

from .models import Confidence, PropertyType, ValidationVerdict

VACANT_SQFT_THRESHOLD = 10
MAX_LISTED_TYPES = 5
MAX_LISTED_NEIGHBORS = 3


@dataclass(frozen=True)
class PropertyFacts:
    building_sqft: float
    land_use: str
    land_use_group: str
    has_places_record: bool
    business: Optional[Dict[str, Any]]
    is_gas_station: bool
    data_source: str
    nearby: Tuple[Dict[str, Any], ...]

    @property
    def low_square_footage(self) -> bool:
        return self.building_sqft <= VACANT_SQFT_THRESHOLD

    @property
    def vacant_land_use(self) -> bool:
        return "vacant" in self.land_use.lower()


def _sqft(value) -> float:
    try:
        return float(str(value).replace(",", "")) if value not in (None, "") else 0.0
    except ValueError:
        return 0.0


def collect_facts(
    property_data: Dict[str, Any], places_data: Optional[Dict[str, Any]]
) -> PropertyFacts:
    attributes = (property_data.get("principal") or {}).get("attributes") or {}
    places_data = places_data or {}
    return PropertyFacts(
        building_sqft=_sqft(attributes.get("building_sqft")),
        land_use=str(attributes.get("land_use_standard") or ""),
        land_use_group=str(attributes.get("land_use_group") or ""),
        has_places_record=bool(places_data),
        business=places_data.get("business"),
        is_gas_station=bool(places_data.get("is_gas_station")),
        data_source=places_data.get("data_source") or "unknown",
        nearby=tuple(places_data.get("all_businesses_nearby") or ()),
    )


def _update(verdict: ValidationVerdict, warning=None, info=None, **changes) -> ValidationVerdict:
    if warning:
        changes["warnings"] = verdict.warnings + (warning,)
    if info:
        changes["info"] = verdict.info + (info,)
    return verdict.model_copy(update=changes)


def check_square_footage(verdict: ValidationVerdict, facts: PropertyFacts) -> ValidationVerdict:
    if facts.low_square_footage:
        return _update(
            verdict,
            warning="⚠️ Very low square footage detected - this may be vacant land",
            confidence=Confidence.LOW,
        )
    return verdict


def check_vacant_land_use(verdict: ValidationVerdict, facts: PropertyFacts) -> ValidationVerdict:
    if facts.vacant_land_use:
        return _update(
            verdict,
            warning="⚠️ Property classified as VACANT - not an operating business",
            property_type=PropertyType.VACANT_LAND,
            confidence=Confidence.LOW,
        )
    return verdict


def check_business_presence(verdict: ValidationVerdict, facts: PropertyFacts) -> ValidationVerdict:
    if not facts.has_places_record:
        return _update(
            verdict,
            warning="⚠️ Unable to verify business information via Google Maps",
            confidence=Confidence.LOW,
        )

    name = (facts.business or {}).get("name") or "Unknown"

    if facts.is_gas_station:
        info = None
        if facts.data_source == "nearby_gas_station":
            info = (
                f"ℹ️ Note: Using nearby gas station data ({name}) "
                "instead of primary address business"
            )
        return _update(
            verdict, info=info, property_type=PropertyType.GAS_STATION, confidence=Confidence.HIGH
        )

    if facts.business:
        types = (facts.business.get("types") or [])[:MAX_LISTED_TYPES]
        warnings = [
            f'🚨 CRITICAL: Google Maps shows "{name}" - NOT a gas station/convenience store!',
            f"📍 Business types detected: {', '.join(types)}",
        ]
        if facts.nearby:
            neighbors = ", ".join(
                b.get("name") or "Unknown" for b in facts.nearby[:MAX_LISTED_NEIGHBORS]
            )
            more = "..." if len(facts.nearby) > MAX_LISTED_NEIGHBORS else ""
            warnings.append(f"🏢 Businesses at this location: {neighbors}{more}")
        warnings.append(
            f"⚠️ Property land use: {facts.land_use_group or facts.land_use or 'unknown type'}"
        )
        return verdict.model_copy(
            update={
                "warnings": verdict.warnings + tuple(warnings),
                "property_type": PropertyType.WRONG_BUSINESS_TYPE,
                # high confidence that this is not a c-store
                "confidence": Confidence.HIGH,
                "is_valid": False,
            }
        )

    return _update(
        verdict,
        warning="⚠️ No business found at this location on Google Maps",
        confidence=Confidence.LOW,
    )


def check_vacant_without_station(
    verdict: ValidationVerdict, facts: PropertyFacts
) -> ValidationVerdict:
    if facts.low_square_footage and not facts.is_gas_station:
        return _update(
            verdict,
            warning="🚫 ALERT: This appears to be VACANT LAND, not a c-store or gas station",
            is_valid=False,
            property_type=PropertyType.VACANT_LAND,
        )
    return verdict


def check_vacant_classification(
    verdict: ValidationVerdict, facts: PropertyFacts
) -> ValidationVerdict:
    if facts.vacant_land_use and not facts.is_gas_station:
        return _update(
            verdict,
            warning="🚫 ALERT: Property is classified as VACANT with no operating business",
            is_valid=False,
        )
    return verdict


def check_office_building(verdict: ValidationVerdict, facts: PropertyFacts) -> ValidationVerdict:
    if (
        facts.land_use_group == "commercial"
        and facts.land_use == "office_building"
        and not facts.is_gas_station
    ):
        return _update(
            verdict,
            warning=(
                "🚫 WRONG PROPERTY TYPE: This is an OFFICE BUILDING, "
                "not a convenience store/gas station!"
            ),
            is_valid=False,
            property_type=PropertyType.OFFICE_BUILDING,
            confidence=Confidence.HIGH,
        )
    return verdict


Rule = Callable[[ValidationVerdict, PropertyFacts], ValidationVerdict]

RULES: Tuple[Rule, ...] = (
    check_square_footage,
    check_vacant_land_use,
    check_business_presence,
    check_vacant_without_station,
    check_vacant_classification,
    check_office_building,
)


def validate_property(
    property_data: Dict[str, Any],
    places_data: Optional[Dict[str, Any]],
    rules: Optional[Tuple[Rule, ...]] = None,
) -> ValidationVerdict:
    """
    Classify a parcel from its parcel and places records.

    Args:
        property_data: Parcel record
        places_data: Places record or None
        rules: Rule list to apply, RULES by default

    Returns:
        ValidationVerdict: The accumulated verdict
    """
    facts = collect_facts(property_data, places_data)
    return reduce(lambda verdict, rule: rule(verdict, facts), rules or RULES, ValidationVerdict())
