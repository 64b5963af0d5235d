import re
from types import MappingProxyType
from typing import List, Optional

# Tokens that carry no matching value for a street address (unit designators,
# state and country names of the markets we write in)
ADDRESS_STOP_WORDS = frozenset(
    {
        "USA",
        "UNITED",
        "STATES",
        "APT",
        "APARTMENT",
        "SUITE",
        "STE",
        "BLDG",
        "FLOOR",
        "FL",
        "UNIT",
        "GA",
        "GEORGIA",
        "SC",
        "SOUTH",
        "CAROLINA",
    }
)

STREET_SUFFIXES = MappingProxyType(
    {
        "ROAD": "RD",
        "RD": "RD",
        "STREET": "ST",
        "ST": "ST",
        "AVENUE": "AVE",
        "AVE": "AVE",
        "DRIVE": "DR",
        "DR": "DR",
        "BOULEVARD": "BLVD",
        "BLVD": "BLVD",
        "HIGHWAY": "HWY",
        "HWY": "HWY",
        "COURT": "CT",
        "CT": "CT",
        "LANE": "LN",
        "LN": "LN",
        "PARKWAY": "PKWY",
        "PKWY": "PKWY",
        "TRACE": "TRCE",
        "TRCE": "TRCE",
        "TERRACE": "TER",
        "TER": "TER",
    }
)

BUSINESS_SUFFIXES = (
    "LLC",
    "L L C",
    "INC",
    "CORP",
    "CORPORATION",
    "COMPANY",
    "CO",
    "LTD",
    "LP",
    "LLP",
    "LIMITED",
    "PLC",
    "PC",
    "GROUP",
    "HOLDINGS",
)

_BUSINESS_SUFFIX_PATTERNS = tuple(
    re.compile(rf"\b{re.escape(suffix)}$") for suffix in BUSINESS_SUFFIXES
)


def _clean(text: str, punctuation: str) -> str:
    """Upper-case, turn the given punctuation into spaces and collapse whitespace."""
    result = re.sub(f"[{re.escape(punctuation)}]", " ", text.upper())
    return re.sub(r"\s+", " ", result).strip()


def _to_like_pattern(tokens: List[str]) -> str:
    return "%" + "%".join(tokens) + "%"


def normalize_address_tokens(address: str) -> List[str]:
    """
    Tokenize a free-text address for fuzzy matching.

    Street suffixes are replaced by their USPS abbreviation and stop words
    (unit designators, state and country names) are dropped. The first surviving
    token is treated as the street number by callers.

    Args:
        address: Free-text address, e.g. "123 Main Street, Suite 4, Atlanta, GA"

    Returns:
        list: Ordered address tokens, e.g. ["123", "MAIN", "ST", "4", "ATLANTA"]
    """
    if not address:
        return []

    cleaned = _clean(address, ".,#")
    if not cleaned:
        return []

    tokens = [STREET_SUFFIXES.get(token, token) for token in cleaned.split(" ")]
    return [token for token in tokens if token not in ADDRESS_STOP_WORDS]


def build_address_patterns(address: str) -> List[str]:
    """
    Build SQL LIKE patterns for an address, most specific first.

    The "full" pattern places a wildcard between every token. The "street" pattern
    keeps only the street number and the next two tokens, and is omitted when the
    address has nothing after the street number.

    Returns:
        list: Up to two patterns; empty when the address has no usable tokens
    """
    tokens = normalize_address_tokens(address)
    if not tokens:
        return []

    street_number = tokens[0]
    street_tokens = tokens[1:3]

    patterns = [_to_like_pattern(tokens)]
    if street_tokens:
        patterns.append(_to_like_pattern([street_number] + street_tokens))
    return patterns


def normalize_business_name(name: Optional[str]) -> str:
    """
    Normalize a business name into a comparable key.

    Periods and commas become spaces, whitespace is collapsed and one trailing
    corporate suffix ("LLC", "INC", "CORP", ...) is removed. A suffix is only ever
    stripped from the end of the name, and never when it is the whole name.

    Examples:
        "Acme Stores, LLC"       -> "ACME STORES"
        "123 Main Corp."         -> "123 MAIN"
        "Quickstop Holdings LLC" -> "QUICKSTOP HOLDINGS"
    """
    if not name:
        return ""

    result = _clean(name, ".,")
    return _strip_business_suffix(result) or result


def _strip_business_suffix(name: str) -> str:
    for pattern in _BUSINESS_SUFFIX_PATTERNS:
        if pattern.search(name):
            return pattern.sub("", name).strip()
    return name


def build_business_patterns(name: Optional[str]) -> List[str]:
    """
    Build SQL LIKE patterns for a business name.

    Returns the full-name pattern followed by a partial pattern made of the first two
    tokens. Single-token names yield the same pattern twice.
    """
    normalized = normalize_business_name(name)
    if not normalized:
        return []

    tokens = normalized.split(" ")
    full_pattern = _to_like_pattern(tokens)
    partial_pattern = _to_like_pattern(tokens[:2]) if len(tokens) > 1 else full_pattern
    return [full_pattern, partial_pattern]
