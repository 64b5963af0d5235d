import pytest

from prefill_engine.models import Confidence, PropertyType, ValidationVerdict
from prefill_engine.validation import (
    check_square_footage,
    collect_facts,
    validate_property,
)


def _parcel(**attributes):
    return {"principal": {"attributes": attributes}, "datasets": {}}


def test_operating_gas_station_is_valid(property_data, gas_station_places_data):
    verdict = validate_property(property_data, gas_station_places_data)

    assert verdict.is_valid is True
    assert verdict.property_type == PropertyType.GAS_STATION
    assert verdict.confidence == Confidence.HIGH
    assert verdict.warnings == ()
    assert verdict.info == ()


def test_tiny_gas_station_stays_valid_with_warning(gas_station_places_data):
    property_data = _parcel(building_sqft="5", land_use_standard="service_station")

    verdict = validate_property(property_data, gas_station_places_data)

    assert verdict.is_valid is True
    assert verdict.property_type == PropertyType.GAS_STATION
    assert any("Very low square footage" in w for w in verdict.warnings)


@pytest.mark.parametrize("land_use", ["vacant_land", "vacant land", "Vacant Commercial"])
def test_vacant_land_without_places_record(land_use):
    property_data = _parcel(building_sqft="0", land_use_standard=land_use)

    verdict = validate_property(property_data, None)

    assert verdict.is_valid is False
    assert verdict.property_type == PropertyType.VACANT_LAND
    assert verdict.confidence == Confidence.LOW
    assert any("Unable to verify" in w for w in verdict.warnings)
    assert any("VACANT LAND" in w for w in verdict.warnings)
    assert any("classified as VACANT with no operating business" in w for w in verdict.warnings)


def test_low_square_footage_without_station_is_vacant_land():
    property_data = _parcel(building_sqft="8", land_use_standard="retail")

    verdict = validate_property(property_data, None)

    assert verdict.is_valid is False
    assert verdict.property_type == PropertyType.VACANT_LAND


def test_wrong_business_type(restaurant_places_data):
    property_data = _parcel(
        building_sqft="3200", land_use_standard="restaurant", land_use_group="commercial"
    )

    verdict = validate_property(property_data, restaurant_places_data)

    assert verdict.is_valid is False
    assert verdict.property_type == PropertyType.WRONG_BUSINESS_TYPE
    assert verdict.confidence == Confidence.HIGH
    assert verdict.warnings[0] == (
        '🚨 CRITICAL: Google Maps shows "Taqueria El Sol" - NOT a gas station/convenience store!'
    )
    assert verdict.warnings[1] == (
        "📍 Business types detected: restaurant, food, point_of_interest, establishment"
    )
    assert verdict.warnings[2] == (
        "🏢 Businesses at this location: Taqueria El Sol, Nail Studio, Dry Cleaners..."
    )
    assert verdict.warnings[3] == "⚠️ Property land use: commercial"


def test_office_building_without_station():
    property_data = _parcel(
        building_sqft="12000", land_use_standard="office_building", land_use_group="commercial"
    )

    verdict = validate_property(property_data, None)

    assert verdict.is_valid is False
    assert verdict.property_type == PropertyType.OFFICE_BUILDING
    assert verdict.confidence == Confidence.HIGH


def test_nearby_gas_station_adds_info(property_data, gas_station_places_data):
    gas_station_places_data["data_source"] = "nearby_gas_station"

    verdict = validate_property(property_data, gas_station_places_data)

    assert verdict.is_valid is True
    assert verdict.info == (
        "ℹ️ Note: Using nearby gas station data (QuickStop Food Mart) "
        "instead of primary address business",
    )


def test_geocoded_without_business(property_data, location):
    places_data = {
        "location": location,
        "place_id": None,
        "business": None,
        "is_gas_station": False,
        "data_source": "primary_address",
        "all_businesses_nearby": [],
    }

    verdict = validate_property(property_data, places_data)

    assert verdict.is_valid is True
    assert verdict.property_type == PropertyType.UNKNOWN
    assert verdict.confidence == Confidence.LOW
    assert any("No business found" in w for w in verdict.warnings)


def test_custom_rule_list():
    verdict = validate_property(_parcel(building_sqft="2"), None, rules=(check_square_footage,))

    assert verdict.is_valid is True
    assert verdict.confidence == Confidence.LOW
    assert len(verdict.warnings) == 1


def test_unparseable_square_footage_counts_as_zero():
    facts = collect_facts(_parcel(building_sqft="n/a"), None)

    assert facts.building_sqft == 0.0
    assert facts.low_square_footage is True


def test_verdict_serializes_with_camel_case_keys():
    verdict = ValidationVerdict(is_valid=False, property_type=PropertyType.VACANT_LAND)

    assert verdict.to_dict() == {
        "isValid": False,
        "confidence": "high",
        "propertyType": "vacant_land",
        "warnings": [],
        "info": [],
    }
