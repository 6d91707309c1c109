"""
Geographic Normalizer

Maps free-form region names and abbreviations found in query results to a
canonical two-letter code, so the map view can key its data by region.
"""

from __future__ import annotations

from src.core.logging import get_logger

logger = get_logger(__name__)

US_STATES: dict[str, str] = {
    "alabama": "AL", "alaska": "AK", "arizona": "AZ", "arkansas": "AR",
    "california": "CA", "colorado": "CO", "connecticut": "CT", "delaware": "DE",
    "district of columbia": "DC", "florida": "FL", "georgia": "GA", "hawaii": "HI",
    "idaho": "ID", "illinois": "IL", "indiana": "IN", "iowa": "IA",
    "kansas": "KS", "kentucky": "KY", "louisiana": "LA", "maine": "ME",
    "maryland": "MD", "massachusetts": "MA", "michigan": "MI", "minnesota": "MN",
    "mississippi": "MS", "missouri": "MO", "montana": "MT", "nebraska": "NE",
    "nevada": "NV", "new hampshire": "NH", "new jersey": "NJ", "new mexico": "NM",
    "new york": "NY", "north carolina": "NC", "north dakota": "ND", "ohio": "OH",
    "oklahoma": "OK", "oregon": "OR", "pennsylvania": "PA", "rhode island": "RI",
    "south carolina": "SC", "south dakota": "SD", "tennessee": "TN", "texas": "TX",
    "utah": "UT", "vermont": "VT", "virginia": "VA", "washington": "WA",
    "west virginia": "WV", "wisconsin": "WI", "wyoming": "WY",
}

CANADIAN_PROVINCES: dict[str, str] = {
    "alberta": "AB", "british columbia": "BC", "manitoba": "MB", "new brunswick": "NB",
    "newfoundland and labrador": "NL", "nova scotia": "NS", "ontario": "ON",
    "prince edward island": "PE", "quebec": "QC", "saskatchewan": "SK",
    "northwest territories": "NT", "nunavut": "NU", "yukon": "YT",
}

REGION_NAME_TO_CODE: dict[str, str] = {**US_STATES, **CANADIAN_PROVINCES}

CODE_TO_REGION_NAME: dict[str, str] = {
    code: name.title().replace(" Of ", " of ").replace(" And ", " and ")
    for name, code in REGION_NAME_TO_CODE.items()
}

# Fuzzy matching on very short strings ("a", "ne") hits half the table
MIN_FUZZY_LENGTH = 3


def normalize_region(name) -> str | None:
    """
    Normalize a region name or abbreviation to its two-letter code.

    Accepts, in order:
    1. A two-letter code, any case ("ca" -> "CA")
    2. A full region name ("New York" -> "NY")
    3. A substring match either way ("State of Texas" -> "TX",
       "Dakota" -> "ND")

    Args:
        name: Raw cell value from the place column

    Returns:
        Two-letter code, or None when the value cannot be placed
    """
    if name is None:
        return None

    text = str(name).strip()
    if not text:
        return None

    if len(text) == 2 and text.isascii() and text.isalpha():
        return text.upper()

    lower = " ".join(text.lower().split())
    code = REGION_NAME_TO_CODE.get(lower)
    if code:
        return code

    if len(lower) < MIN_FUZZY_LENGTH:
        return None

    # "State of West Virginia" must land on WV, not VA
    contained = [key for key in REGION_NAME_TO_CODE if key in lower]
    if contained:
        return REGION_NAME_TO_CODE[max(contained, key=len)]

    # "Carolina" style fragments: closest (shortest) enclosing name, table order on ties
    enclosing = [key for key in REGION_NAME_TO_CODE if lower in key]
    if enclosing:
        return REGION_NAME_TO_CODE[min(enclosing, key=len)]

    logger.debug(f"Could not normalize region name: {text!r}")
    return None


def region_name(code: str) -> str:
    """Display name for a region code, or the code itself if unknown."""
    return CODE_TO_REGION_NAME.get(code.upper(), code.upper()) if code else ""
