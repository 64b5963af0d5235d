import logging
import math
from datetime import date, datetime, timezone
from typing import Any, Callable, Dict, List, Optional

import psycopg2
import psycopg2.extras

from ..config import Settings
from ..normalization import build_address_patterns, build_business_patterns

logger = logging.getLogger(__name__)

LICENSE_MATCH_LIMIT = 5
BUSINESS_MATCH_LIMIT = 3
DAYS_PER_YEAR = 365.25

# Rows matching the first pattern rank 1, rows matching only the second rank 2
LICENSE_SQL = """
    SELECT id, list_format_name, list_format_address, license_id, tbl_license_type,
           created_at, match_priority
    FROM (
        SELECT *,
            CASE
                WHEN UPPER(list_format_address) LIKE %(first)s THEN 1
                WHEN UPPER(list_format_address) LIKE %(second)s THEN 2
                ELSE 3
            END AS match_priority
        FROM tobacco_licenses
        WHERE UPPER(list_format_address) LIKE ANY(%(patterns)s)
    ) AS matches
    WHERE match_priority <= 2
    ORDER BY match_priority ASC, created_at DESC
    LIMIT %(limit)s;
"""

BUSINESS_SQL = """
    SELECT business_name, business_status, business_type, naics_code, naics_sub_code,
           formation_date, registered_agent_name, registered_agent_physical_address,
           control_number, match_priority
    FROM (
        SELECT *,
            CASE
                WHEN UPPER(business_name) LIKE %(first)s THEN 1
                WHEN UPPER(business_name) LIKE %(second)s THEN 2
                ELSE 3
            END AS match_priority
        FROM gsos_business_details
        WHERE UPPER(business_name) LIKE ANY(%(patterns)s)
    ) AS matches
    WHERE match_priority <= 2
    ORDER BY match_priority ASC, formation_date DESC
    LIMIT %(limit)s;
"""

DATE_FORMATS = ("%Y-%m-%d", "%m/%d/%Y", "%Y/%m/%d", "%m-%d-%Y")


def parse_date(value) -> Optional[datetime]:
    """Coerce a DB date, datetime or date string into a naive UTC datetime."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime(value.year, value.month, value.day)
    elif isinstance(value, str):
        parsed = None
        try:
            parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
        except ValueError:
            for fmt in DATE_FORMATS:
                try:
                    parsed = datetime.strptime(value.strip(), fmt)
                    break
                except ValueError:
                    continue
        if parsed is None:
            return None
    else:
        return None

    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def calculate_years_at_location(formation_date, now: Optional[datetime] = None) -> Optional[int]:
    """Whole years since formation, or None when the date is missing or unparseable."""
    formed = parse_date(formation_date)
    if formed is None:
        return None
    now = now or datetime.now(timezone.utc).replace(tzinfo=None)
    return math.floor((now - formed).days / DAYS_PER_YEAR)


def rank_matches(rows: List[Dict[str, Any]], date_key: str) -> List[Dict[str, Any]]:
    """
    Order registry rows best first.

    A match_priority 1 row always beats a priority 2 row; within a priority the most
    recent date wins and rows without a date go last.
    """
    by_recency = sorted(
        rows, key=lambda row: parse_date(row.get(date_key)) or datetime.min, reverse=True
    )
    return sorted(by_recency, key=lambda row: row.get("match_priority", 3))


def _pattern_params(patterns: List[str], limit: int) -> Dict[str, Any]:
    upper = [pattern.upper() for pattern in patterns]
    return {
        "patterns": upper,
        "first": upper[0],
        "second": upper[1] if len(upper) > 1 else upper[0],
        "limit": limit,
    }


def query_licenses(conn, patterns: List[str]) -> List[Dict[str, Any]]:
    with conn.cursor(cursor_factory=psycopg2.extras.RealDictCursor) as cur:
        cur.execute(LICENSE_SQL, _pattern_params(patterns, LICENSE_MATCH_LIMIT))
        return [dict(row) for row in cur.fetchall()]


def query_business_details(conn, patterns: List[str]) -> List[Dict[str, Any]]:
    with conn.cursor(cursor_factory=psycopg2.extras.RealDictCursor) as cur:
        cur.execute(BUSINESS_SQL, _pattern_params(patterns, BUSINESS_MATCH_LIMIT))
        return [dict(row) for row in cur.fetchall()]


def find_registry_match(
    address: str,
    settings: Settings,
    connect: Callable[..., Any] = psycopg2.connect,
) -> Optional[Dict[str, Any]]:
    """
    Match an address to a tobacco license, then the license's business to the state
    corporate registry.

    The lookup is optional: no connection string, an address without usable tokens,
    no license hit and any database error all yield None. The connection is closed
    on every path.

    Args:
        address: Free-text address as entered by the agent
        settings: Holds the registry connection string
        connect: Connection factory, psycopg2.connect by default

    Returns:
        dict: {"license": {...}, "business": {...} or None}, or None without a license match
    """
    if not settings.registry_enabled:
        logger.info("ℹ️ Registry connection string not configured. Skipping registry lookup.")
        return None

    patterns = build_address_patterns(address)
    if not patterns:
        logger.info("ℹ️ Unable to build registry search patterns for address")
        return None

    conn = None
    try:
        conn = connect(settings.registry_connection_string)

        licenses = rank_matches(query_licenses(conn, patterns), "created_at")
        if not licenses:
            logger.info(f"No license match for: {address}")
            return None

        license_record = licenses[0]
        logger.info(f"🪪 License match: {license_record.get('list_format_name')}")

        business_record = None
        name_patterns = build_business_patterns(license_record.get("list_format_name"))
        if name_patterns:
            businesses = rank_matches(query_business_details(conn, name_patterns), "formation_date")
            if businesses:
                business_record = dict(businesses[0])
                business_record["years_at_location"] = calculate_years_at_location(
                    business_record.get("formation_date")
                )
                logger.info(f"🏢 Registry match: {business_record.get('business_name')}")

        return {"license": license_record, "business": business_record}

    except psycopg2.Error as e:
        logger.error(f"❌ Registry lookup failed: {e}")
        return None

    finally:
        if conn is not None:
            try:
                conn.close()
            except psycopg2.Error as close_error:
                logger.error(f"❌ Failed to close registry connection: {close_error}")
