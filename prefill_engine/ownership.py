import logging
from typing import Any, Dict, List, Optional

from .models import OwnershipStatus, OwnershipVerdict
from .normalization import normalize_business_name

logger = logging.getLogger(__name__)

# Display preference order of the property-side owner names
CANDIDATE_FIELDS = ("corporationName", "ownerFullName", "deedOwnerFullName", "deedOwnerLastName")


def owner_name_candidates(mapped: Dict[str, Any]) -> List[str]:
    return [mapped[field] for field in CANDIDATE_FIELDS if mapped.get(field)]


def comparison_name(registry: Optional[Dict[str, Any]]) -> Optional[str]:
    """The registry business name, or the license name when no registry record matched."""
    if not registry:
        return None
    business = registry.get("business") or {}
    license_record = registry.get("license") or {}
    return business.get("business_name") or license_record.get("list_format_name") or None


def _names_match(candidate: str, target: str, min_match_length: int) -> bool:
    if not candidate or not target:
        return False
    if candidate == target:
        return True
    # Containment needs both keys to be at least min_match_length characters
    if min_match_length and min(len(candidate), len(target)) < min_match_length:
        return False
    return candidate in target or target in candidate


def resolve_ownership(
    mapped: Dict[str, Any], business_name: Optional[str], min_match_length: int = 0
) -> OwnershipVerdict:
    """
    Decide whether the business operating at the address owns the parcel.

    The property-side owner names are compared with the registry business name after
    normalization. Equal names, or one contained in the other, mean the applicant owns
    the property. Owner names that exist but do not match mean the applicant is a tenant.

    Args:
        mapped: Form data holding the owner name candidates
        business_name: Registry business name (or license name) of the operating business
        min_match_length: When set, containment only counts for keys at least this many
            characters long; exact matches always count

    Returns:
        OwnershipVerdict: owner, tenant or unknown
    """
    if not business_name:
        return OwnershipVerdict()

    candidates = owner_name_candidates(mapped)
    target = normalize_business_name(business_name)

    for name in candidates:
        if _names_match(normalize_business_name(name), target, min_match_length):
            logger.info(f"🏠 Applicant owns the property: {name} ~ {business_name}")
            return OwnershipVerdict(
                status=OwnershipStatus.OWNER,
                matched_name=name,
                registry_business_name=business_name,
            )

    if not candidates:
        return OwnershipVerdict(registry_business_name=business_name)

    logger.info(f"🔑 Applicant appears to be a tenant: owner {candidates[0]} vs {business_name}")
    return OwnershipVerdict(
        status=OwnershipStatus.TENANT,
        matched_name=candidates[0],
        registry_business_name=business_name,
    )
