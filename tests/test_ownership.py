from prefill_engine.models import OwnershipStatus
from prefill_engine.ownership import comparison_name, owner_name_candidates, resolve_ownership


def test_owner_when_names_match_after_normalization():
    mapped = {
        "corporationName": "Quickstop Holdings LLC",
        "ownerFullName": "QUICKSTOP HOLDINGS LLC",
    }

    verdict = resolve_ownership(mapped, "QUICKSTOP HOLDINGS, L.L.C.")

    assert verdict.status == OwnershipStatus.OWNER
    assert verdict.matched_name == "Quickstop Holdings LLC"
    assert verdict.registry_business_name == "QUICKSTOP HOLDINGS, L.L.C."


def test_owner_when_one_name_contains_the_other():
    mapped = {"deedOwnerFullName": "QuickStop Food Mart LLC"}

    verdict = resolve_ownership(mapped, "QuickStop Food Mart #12")

    assert verdict.status == OwnershipStatus.OWNER


def test_minimum_match_length_blocks_short_containment():
    mapped = {"deedOwnerFullName": "QuickStop Food Mart LLC"}

    verdict = resolve_ownership(mapped, "QuickStop Food Mart #12", min_match_length=25)

    assert verdict.status == OwnershipStatus.TENANT


def test_holding_company_owner_is_not_the_store_operator():
    mapped = {"deedOwnerFullName": "Quickstop Holdings LLC"}

    verdict = resolve_ownership(mapped, "QuickStop Food Mart")

    assert verdict.status == OwnershipStatus.TENANT
    assert verdict.matched_name == "Quickstop Holdings LLC"


def test_tenant_when_owner_differs():
    mapped = {"ownerFullName": "Patel Raj", "deedOwnerLastName": "Patel"}

    verdict = resolve_ownership(mapped, "Peach Fuel Inc")

    assert verdict.status == OwnershipStatus.TENANT
    assert verdict.matched_name == "Patel Raj"
    assert verdict.registry_business_name == "Peach Fuel Inc"


def test_unknown_without_registry_name():
    verdict = resolve_ownership({"ownerFullName": "Patel Raj"}, None)

    assert verdict.status == OwnershipStatus.UNKNOWN
    assert verdict.matched_name is None
    assert verdict.registry_business_name is None


def test_unknown_without_owner_names():
    verdict = resolve_ownership({"address": "12 Main St"}, "Peach Fuel Inc")

    assert verdict.status == OwnershipStatus.UNKNOWN
    assert verdict.registry_business_name == "Peach Fuel Inc"


def test_candidates_in_preference_order():
    mapped = {
        "deedOwnerLastName": "Patel",
        "ownerFullName": "Patel Raj",
        "corporationName": "",
        "deedOwnerFullName": "Raj Patel",
    }

    assert owner_name_candidates(mapped) == ["Patel Raj", "Raj Patel", "Patel"]


def test_comparison_name_prefers_registry_business():
    registry = {
        "license": {"list_format_name": "QUICKSTOP FOOD MART"},
        "business": {"business_name": "QUICKSTOP HOLDINGS LLC"},
    }

    assert comparison_name(registry) == "QUICKSTOP HOLDINGS LLC"
    assert comparison_name({**registry, "business": None}) == "QUICKSTOP FOOD MART"
    assert comparison_name(None) is None


def test_ownership_serializes_with_camel_case_keys():
    verdict = resolve_ownership({"ownerFullName": "Patel Raj"}, "Peach Fuel Inc")

    assert verdict.to_dict() == {
        "status": "tenant",
        "matchedName": "Patel Raj",
        "registryBusinessName": "Peach Fuel Inc",
    }


def test_numbered_entity_names_match_across_suffixes():
    verdict = resolve_ownership({"corporationName": "123 MAIN LLC"}, "123 Main Corp")

    assert verdict.status == OwnershipStatus.OWNER
    assert verdict.matched_name == "123 MAIN LLC"


def test_individual_owner_of_corporate_store_is_tenant():
    verdict = resolve_ownership({"ownerFullName": "Jane Doe"}, "XYZ FUEL INC")

    assert verdict.status == OwnershipStatus.TENANT
    assert verdict.matched_name == "Jane Doe"
