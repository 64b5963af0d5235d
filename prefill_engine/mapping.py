"""
Projection of parcel, places and registry records onto the insurance application form.

Every function here is pure: it reads raw provider records and returns new values.
Parcel data is the default for every field; places data overrides the business name,
phone, hours and operation description.
"""

import logging
import math
import re
from typing import Any, Dict, List, Optional

from .sources.places_provider import GAS_STATION_TYPES

logger = logging.getLogger(__name__)

MAP_EMBED_URL = (
    "https://www.google.com/maps/embed/v1/streetview"
    "?key={key}&location={lat},{lng}&heading=0&pitch=0&fov=100"
)

# (form field, parcel attribute)
OWNER_FIELDS = (
    ("deedOwnerFullName", "deed_owner_full_name"),
    ("deedOwnerLastName", "deed_owner_last_name"),
    ("ownerFullName", "owner_full_name"),
    ("ownerOccupancyStatus", "owner_occupancy_status"),
    ("ownershipType", "ownership_type"),
    ("companyFlag", "company_flag"),
)

BUILDING_FIELDS = (
    ("buildingSqft", "building_sqft"),
    ("assessedValue", "assessed_value"),
    ("elevationFeet", "elevation_feet"),
    ("exteriorWalls", "exterior_walls"),
    ("flooring", "flooring"),
    ("storiesNumber", "stories_number"),
    ("yearBuilt", "year_built"),
    ("numberOfBuildings", "number_of_buildings"),
    ("canopy", "canopy"),
    ("canopySqft", "canopy_sqft"),
    ("landUseGroup", "land_use_group"),
    ("landUseStandard", "land_use_standard"),
    ("legalDescription", "legal_description"),
)

MORTGAGE_FIELDS = (
    ("mortgageAmount", "mortgage_amount"),
    ("mortgageDueDate", "mortgage_due_date"),
    ("mortgageRecordingDate", "mortgage_recording_date"),
    ("mortgageTerm", "mortgage_term"),
    ("mortgageTermType", "mortgage_term_type"),
    ("mortgageType", "mortgage_type"),
    ("lenderName", "lender_name"),
    ("lenderLastName", "lender_last_name"),
    ("mortgageLenderCode", "mortgage_lender_code"),
)

# Surfaced under their provider names. Agents pick what they need from the side panel,
# so everything the provider knows about the building is included.
PASS_THROUGH_ATTRIBUTES = (
    # financial
    "assessed_improvement_value",
    "assessed_land_value",
    "market_value_year",
    "deed_sale_price",
    "deed_sale_date",
    # lot
    "acres",
    "lot_sqft",
    "1st_floor_sqft",
    "2nd_floor_sqft",
    # building
    "bedrooms",
    "bathrooms_total",
    "bathrooms_partial",
    "garage",
    "garage_sqft",
    "construction_type",
    "roof_cover",
    "foundation",
    # utilities
    "air_conditioner",
    "heat",
    "heat_fuel_type",
    "sewer_type",
    "water_service_type",
    "fireplace",
    "fireplace_number",
    "pool",
    "pool_area",
    # commercial
    "parking_spaces",
    "loading_platform",
    "loading_platform_sqft",
    "overhead_door",
    "office_sqft",
    # security
    "security_alarm",
    "fire_sprinklers_flag",
    "fire_resistance_code",
    "sprinklers",
    # geo
    "latitude",
    "longitude",
    "elevation_feet",
    "congressional_district",
    "census_tract",
    "census_block",
    "fips_code",
    # zoning and legal
    "zoning",
    "legal_description",
    "parcel_number_formatted",
    # owner contact
    "contact_house_number",
    "contact_street_name",
    "contact_suffix",
    "contact_unit_designator",
    "contact_mail_info_format",
    "contact_mailing_fips",
    "contact_crrt",
    # land
    "land_use_code",
    "topography_code",
    "view_description",
)

CORPORATION_INDICATORS = ("LLC", "INC", "CORP", "CORPORATION", "COMPANY", "LP", "LTD")
CORPORATION_NAME_FIELDS = ("deed_owner_full_name", "owner_full_name", "deed_owner_last_name")

# Non-individual keywords that do not pick a more specific applicant type
OTHER_ENTITY_KEYWORDS = ("COMPANY", "CO", "LTD", "LLP", "TRUST", "ASSOCIATION", "CHURCH")

GENERIC_PLACE_TYPES = frozenset({"point_of_interest", "establishment"})

RISK_RATINGS = (
    ("CFLD_RISKR", "Flood Risk"),
    ("HWAV_RISKR", "Hurricane Risk"),
    ("LTNG_RISKR", "Lightning Risk"),
)

HOURS_PATTERN = re.compile(
    r"(\d{1,2}):(\d{2})\s*([AP]M)\s*[–—-]\s*(\d{1,2}):(\d{2})\s*([AP]M)", re.IGNORECASE
)


def _present(value) -> bool:
    return value is not None and value != ""


def _has_keyword(text: str, keyword: str) -> bool:
    return re.search(rf"\b{re.escape(keyword)}\b", text) is not None


def _to_number(value) -> Optional[float]:
    if not _present(value):
        return None
    try:
        return float(str(value).replace(",", ""))
    except ValueError:
        return None


def _to_24_hour(hour: int, period: str) -> int:
    period = period.upper()
    if period == "PM" and hour != 12:
        return hour + 12
    if period == "AM" and hour == 12:
        return 0
    return hour


def compute_operating_hours(opening_hours: Optional[Dict[str, Any]]) -> Optional[int]:
    """
    Derive daily operating hours from a place's structured opening hours.

    A single period that opens and never closes means the store is open around the
    clock. Otherwise the first weekday line ("Monday: 6:00 AM – 11:00 PM") is parsed;
    closing before opening wraps past midnight.

    Returns:
        int: Hours per day rounded to the nearest hour, or None if they cannot be parsed
    """
    if not opening_hours:
        return None

    periods = opening_hours.get("periods") or []
    if len(periods) == 1 and periods[0].get("open") and not periods[0].get("close"):
        return 24

    weekday_text = opening_hours.get("weekday_text") or []
    if not weekday_text:
        return None

    match = HOURS_PATTERN.search(weekday_text[0])
    if not match:
        return None

    open_hour, open_min, open_period, close_hour, close_min, close_period = match.groups()
    opens = _to_24_hour(int(open_hour), open_period) + int(open_min) / 60
    closes = _to_24_hour(int(close_hour), close_period) + int(close_min) / 60

    hours = closes - opens
    if hours < 0:
        hours += 24
    return int(math.floor(hours + 0.5))


def extract_corporation_name(attributes: Dict[str, Any]) -> Optional[str]:
    """Return the first owner-name field that contains a business indicator."""
    for field in CORPORATION_NAME_FIELDS:
        name = attributes.get(field)
        if name and isinstance(name, str):
            upper_name = name.upper()
            if any(_has_keyword(upper_name, k) for k in CORPORATION_INDICATORS):
                return name
    return None


def determine_applicant_type(attributes: Dict[str, Any]) -> str:
    """Classify the applicant from the recorded owner name."""
    owner_name = attributes.get("deed_owner_full_name") or attributes.get("owner_full_name") or ""
    upper_name = str(owner_name).upper()

    if _has_keyword(upper_name, "LLC"):
        return "llc"
    if any(_has_keyword(upper_name, k) for k in ("CORP", "CORPORATION", "INC")):
        return "corporation"
    if any(_has_keyword(upper_name, k) for k in ("PARTNERSHIP", "LP")):
        return "partnership"
    if _has_keyword(upper_name, "JOINT VENTURE"):
        return "jointVenture"
    if attributes.get("owner_occupancy_status") == "OWNER OCCUPIED" or not any(
        _has_keyword(upper_name, k) for k in OTHER_ENTITY_KEYWORDS
    ):
        return "individual"
    return "other"


def determine_operation_type(attributes: Dict[str, Any]) -> Optional[str]:
    """Describe the operation from the assessor's land use and zoning codes."""
    land_use = str(attributes.get("land_use_standard") or attributes.get("land_use_code") or "")
    land_use = land_use.lower()
    zoning = str(attributes.get("zoning") or "").lower()

    if any(k in land_use for k in ("gas", "fuel", "service station")) or any(
        k in zoning for k in ("gas", "fuel", "service")
    ):
        return "Gas Station with Convenience Store"
    if any(k in land_use for k in ("retail", "commercial", "store")):
        return "Convenience Store"
    if any(k in land_use for k in ("restaurant", "food")):
        return "Food Service/Restaurant"
    if "office" in land_use:
        return "Office"
    if any(k in land_use for k in ("warehouse", "industrial")):
        return "Warehouse/Industrial"
    if "commercial" in zoning:
        return "Commercial Business"
    return None


def determine_construction_type(attributes: Dict[str, Any]) -> Optional[str]:
    if _present(attributes.get("construction_type")):
        return attributes["construction_type"]

    land_use = str(attributes.get("land_use_standard") or "").lower()
    year_built = _to_number(attributes.get("year_built"))

    if any(k in land_use for k in ("frame", "wood")):
        return "Frame"
    if any(k in land_use for k in ("masonry", "brick", "block")):
        return "Masonry Non-Combustible"
    if any(k in land_use for k in ("steel", "metal")):
        return "Non-Combustible"
    if year_built and year_built > 1990 and "commercial" in land_use:
        return "Non-Combustible"
    if year_built and year_built < 1960:
        return "Frame"
    return None


def calculate_total_square_footage(attributes: Dict[str, Any]) -> Optional[int]:
    """Building square footage, falling back to gross and then to the sum of floors."""
    for field in ("building_sqft", "gross_sqft"):
        value = _to_number(attributes.get(field))
        if value:
            return int(value)

    total = sum(
        _to_number(attributes.get(field)) or 0
        for field in ("1st_floor_sqft", "2nd_floor_sqft", "upper_floors_sqft")
    )
    return int(total) if total > 0 else None


def format_additional_insured(
    lender_name: Optional[str], mortgage_amount: Any
) -> Optional[str]:
    if not lender_name or not _present(mortgage_amount):
        return None
    amount = _to_number(mortgage_amount)
    amount_text = f"{int(amount):,}" if amount is not None else str(mortgage_amount)
    return f"{lender_name} - Mortgagee (${amount_text})"


def _readable_types(types: List[str], exclude=GENERIC_PLACE_TYPES) -> List[str]:
    return [t.replace("_", " ") for t in types if t not in exclude]


def describe_business_operation(business: Dict[str, Any], operating_hours: Optional[int]) -> str:
    """
    Build the operation description from a place record.

    C-stores read "C-Store with N hours operation" followed by the editorial summary
    or the remaining place types. Other businesses get their summary or their types.
    """
    types = business.get("types") or []
    overview = (business.get("editorial_summary") or {}).get("overview")

    if any(t in GAS_STATION_TYPES for t in types):
        description = (
            f"C-Store with {operating_hours} hours operation" if operating_hours else "C-Store"
        )
        if overview:
            description += f". {overview}"
        else:
            other_types = _readable_types(types, GENERIC_PLACE_TYPES | GAS_STATION_TYPES)
            if other_types:
                description += f" with {', '.join(other_types)}"
        return description

    if overview:
        return overview
    return ", ".join(t.upper() for t in _readable_types(types))


def _map_address(principal: Dict[str, Any], attributes: Dict[str, Any]) -> Dict[str, Any]:
    mapped = {}

    matched = principal.get("matched_address") or {}
    if matched.get("street"):
        mapped["matchedAddress"] = {
            "street": matched.get("street") or "",
            "city": matched.get("city") or "",
            "state": matched.get("state") or "",
            "zipcode": matched.get("zipcode") or "",
        }
        mapped["address"] = (
            f"{matched.get('street') or ''}, {matched.get('city') or ''}, "
            f"{matched.get('state') or ''} {matched.get('zipcode') or ''}"
        ).strip()

    if attributes.get("contact_full_address"):
        mapped["mailingAddress"] = {
            "fullAddress": attributes.get("contact_full_address") or "",
            "city": attributes.get("contact_city") or "",
            "state": attributes.get("contact_state") or "",
            "zipcode": attributes.get("contact_zip") or "",
            "zip4": attributes.get("contact_zip4") or "",
            "county": attributes.get("contact_mailing_county") or "",
        }
        parts = [
            attributes.get(field)
            for field in ("contact_full_address", "contact_city", "contact_state", "contact_zip")
        ]
        mapped["fullMailingAddress"] = ", ".join(str(p) for p in parts if p)

    return mapped


def _map_datasets(datasets: Dict[str, Any]) -> Dict[str, Any]:
    mapped = {}

    geo = (datasets.get("geo_reference") or datasets.get("geo_reference_2020") or {}).get(
        "attributes"
    )
    if geo:
        mapped["geoReference"] = {
            "place": (geo.get("place") or {}).get("name", ""),
            "county": (geo.get("census_county_division") or {}).get("name", ""),
            "metroArea": (geo.get("core_based_stat_area") or {}).get("name", ""),
            "censusBlock": (geo.get("census_block") or {}).get("geoid", ""),
            "censusTract": (geo.get("census_tract") or {}).get("code", ""),
        }

    financial = (datasets.get("property_financial") or {}).get("attributes") or {}
    history = financial.get("financial_history")
    if isinstance(history, list):
        mapped["financialHistory"] = [
            {
                "lenderName": record.get("lender_name") or "",
                "mortgageAmount": record.get("mortgage_amount") or "",
                "mortgageDueDate": record.get("mortgage_due_date") or "",
                "mortgageType": record.get("mortgage_type") or "",
                "documentType": record.get("document_type_description") or "",
                "recordingDate": record.get("mortgage_recording_date") or "",
            }
            for record in history
        ]

    risk = (datasets.get("risk") or {}).get("attributes")
    if risk:
        factors = [
            f"{label}: {risk[key]}"
            for key, label in RISK_RATINGS
            if risk.get(key) and risk[key] != "No Rating"
        ]
        if factors:
            mapped["riskFactors"] = factors

    return mapped


def _map_business(business: Dict[str, Any]) -> Dict[str, Any]:
    mapped = {}

    if business.get("name"):
        mapped["dba"] = business["name"]
        mapped["businessName"] = business["name"]

    if business.get("formatted_phone_number"):
        mapped["contactNumber"] = business["formatted_phone_number"]
        mapped["phoneNumber"] = business["formatted_phone_number"]

    opening_hours = business.get("opening_hours") or {}
    operating_hours = compute_operating_hours(opening_hours)
    if opening_hours.get("weekday_text"):
        mapped["hoursOfOperationFull"] = ", ".join(opening_hours["weekday_text"])
    if operating_hours is not None:
        mapped["hoursOfOperation"] = str(operating_hours)
    if opening_hours.get("open_now") is not None:
        mapped["currentlyOpen"] = opening_hours["open_now"]

    description = describe_business_operation(business, operating_hours)
    if description:
        mapped["operationDescription"] = description

    business_types = ", ".join(t.upper() for t in _readable_types(business.get("types") or []))
    if business_types:
        mapped["businessTypes"] = business_types

    overview = (business.get("editorial_summary") or {}).get("overview")
    if overview:
        mapped["editorialSummary"] = overview

    for field, key in (
        ("website", "website"),
        ("businessStatus", "business_status"),
        ("googleRating", "rating"),
        ("totalReviews", "user_ratings_total"),
    ):
        if business.get(key):
            mapped[field] = business[key]

    return mapped


def map_to_insurance_form(
    property_data: Dict[str, Any],
    places_data: Optional[Dict[str, Any]],
    address: str,
    maps_api_key: str = "",
) -> Dict[str, Any]:
    """
    Fuse parcel and places records into the flat insurance-form field set.

    Args:
        property_data: Parcel record ({"principal": ..., "datasets": ...})
        places_data: Places record, or None when no business presence is known
        address: The address as entered; used when the provider has no matched address
        maps_api_key: Key embedded in the street-view URL

    Returns:
        dict: Form field name to value; absent source data means an absent field
    """
    principal = property_data.get("principal") or {}
    attributes = principal.get("attributes") or {}

    mapped: Dict[str, Any] = {"address": address}
    mapped.update(_map_address(principal, attributes))

    for field, key in OWNER_FIELDS + BUILDING_FIELDS + MORTGAGE_FIELDS:
        if _present(attributes.get(key)):
            mapped[field] = attributes[key]

    corporation_name = extract_corporation_name(attributes)
    if corporation_name:
        mapped["corporationName"] = corporation_name

    mapped["applicantType"] = determine_applicant_type(attributes)

    operation = determine_operation_type(attributes)
    if operation:
        mapped["operationDescription"] = operation

    construction = determine_construction_type(attributes)
    if construction:
        mapped["constructionType"] = construction

    total_sqft = calculate_total_square_footage(attributes)
    if total_sqft:
        mapped["totalSqFootage"] = total_sqft

    additional_insured = format_additional_insured(
        attributes.get("lender_name"), attributes.get("mortgage_amount")
    )
    if additional_insured:
        mapped["additionalInsured"] = additional_insured
        logger.info(f"✅ Auto-generated Additional Insured: {additional_insured}")

    for key in PASS_THROUGH_ATTRIBUTES:
        if _present(attributes.get(key)):
            mapped[key] = attributes[key]

    mapped.update(_map_datasets(property_data.get("datasets") or {}))

    if places_data:
        if places_data.get("business"):
            mapped.update(_map_business(places_data["business"]))
            logger.info(f"✅ Added places business data: {places_data['business'].get('name')}")

        location = places_data.get("location")
        if location:
            mapped["coordinates"] = {"lat": location["lat"], "lng": location["lng"]}
            mapped["mapEmbedUrl"] = MAP_EMBED_URL.format(
                key=maps_api_key, lat=location["lat"], lng=location["lng"]
            )

    logger.info(f"🎯 Mapped {len(mapped)} form fields")
    return mapped


def apply_registry_match(
    mapped: Dict[str, Any], registry: Optional[Dict[str, Any]]
) -> Dict[str, Any]:
    """Return a copy of the form data enriched with license and corporate registry fields."""
    enriched = dict(mapped)
    if not registry:
        return enriched

    business = registry.get("business") or {}
    for field, key in (
        ("registeredAgentName", "registered_agent_name"),
        ("registeredAgentAddress", "registered_agent_physical_address"),
        ("naicsCode", "naics_code"),
        ("naicsSubCode", "naics_sub_code"),
        ("yearsAtLocation", "years_at_location"),
    ):
        if _present(business.get(key)):
            enriched[field] = business[key]

    license_name = (registry.get("license") or {}).get("list_format_name")
    if license_name:
        enriched["registryBusinessName"] = license_name

    return enriched
