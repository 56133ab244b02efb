"""
taxdocs/jurisdiction.py

Domestic vs cross-jurisdiction decision for a document.

Two paths:
- Explicit codes: when both the document and the company carry a validated
  2-letter jurisdiction code, the codes are compared directly.
- Free-text fallback (legacy, best-effort): the document's place of supply
  is matched against the company's home jurisdiction string.

Free-text precedence (kept stable, persisted totals depend on it):
1) direct substring match in either direction
2) "XY (24)" style code, mapped through JURISDICTION_CODES
3) "XY" / "XY something" style code, mapped through JURISDICTION_CODES
Anything else is cross-jurisdiction, including empty input.
"""

from __future__ import annotations

import re

from .errors import ValidationError

# Code -> lowercase fragment expected in the full jurisdiction name.
JURISDICTION_CODES: dict[str, str] = {
    "AN": "andaman",
    "AP": "andhra",
    "AR": "arunachal",
    "AS": "assam",
    "BR": "bihar",
    "CH": "chandigarh",
    "CT": "chhattisgarh",
    "DL": "delhi",
    "GA": "goa",
    "GJ": "gujarat",
    "HP": "himachal",
    "HR": "haryana",
    "JH": "jharkhand",
    "JK": "jammu",
    "KA": "karnataka",
    "KL": "kerala",
    "LA": "ladakh",
    "MH": "maharashtra",
    "ML": "meghalaya",
    "MN": "manipur",
    "MP": "madhya",
    "MZ": "mizoram",
    "NL": "nagaland",
    "OR": "odisha",
    "PB": "punjab",
    "PY": "puducherry",
    "RJ": "rajasthan",
    "SK": "sikkim",
    "TN": "tamil",
    "TR": "tripura",
    "TS": "telangana",
    "UP": "uttar",
    "UK": "uttarakhand",
    "WB": "west",
}

_CODE_BEFORE_PAREN = re.compile(r"^([A-Za-z]{2})\s*\(")
_CODE_ALONE = re.compile(r"^([A-Za-z]{2})(\s|$)")


def normalize_jurisdiction_code(code: str | None) -> str | None:
    """
    Validate a jurisdiction code at the data-entry boundary.

    Returns the upper-cased code, or None for empty input.
    Raises ValidationError for codes missing from JURISDICTION_CODES.
    """
    if code is None:
        return None
    raw = str(code).strip().upper()
    if raw == "":
        return None
    if raw not in JURISDICTION_CODES:
        raise ValidationError(f"Unknown jurisdiction code: {raw}")
    return raw


def _code_matches_home(match: re.Match | None, home_lower: str) -> bool:
    if not match:
        return False
    name = JURISDICTION_CODES.get(match.group(1).upper())
    return bool(name and name in home_lower)


def is_cross_jurisdiction(place_of_supply: str | None, home_jurisdiction: str | None) -> bool:
    """Return False (domestic) only on a positive match."""
    place = (place_of_supply or "").strip()
    home = (home_jurisdiction or "").strip()
    if not place or not home:
        return True

    place_lower = place.lower()
    home_lower = home.lower()

    if place_lower in home_lower or home_lower in place_lower:
        return False

    if _code_matches_home(_CODE_BEFORE_PAREN.match(place), home_lower):
        return False

    if _code_matches_home(_CODE_ALONE.match(place), home_lower):
        return False

    return True


def resolve_cross_jurisdiction(
    place_of_supply: str | None,
    home_jurisdiction: str | None,
    supply_code: str | None = None,
    home_code: str | None = None,
) -> bool:
    """Prefer explicit codes; fall back to free-text matching."""
    if supply_code and home_code:
        return supply_code.strip().upper() != home_code.strip().upper()
    return is_cross_jurisdiction(place_of_supply, home_jurisdiction)
