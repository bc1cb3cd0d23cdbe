"""
Preprocessor Module - Normalization of raw listing text

Handles:
1. Whitespace normalization of scraped strings
2. Digit-only integer parsing ("₪ 89,000" -> 89000)
3. Model year detection inside listing titles
4. Assembling scraped fields into VehicleAttributes
"""

import re
from typing import Any, Dict, Optional

from carcheck.domains.cars.schemas import VehicleAttributes

YEAR_PATTERN = re.compile(r'\b(?:19|20)\d{2}\b')


def normalize_text(text: Optional[str]) -> str:
    """
    Collapse runs of whitespace and strip the ends.
    """
    if not text:
        return ""
    # Remove extra whitespace (including non-breaking spaces)
    text = re.sub(r'\s+', ' ', text.replace('\xa0', ' '))
    return text.strip()


def parse_int(text: Optional[str]) -> Optional[int]:
    """
    Strip every non-digit character and parse what remains.

    Returns None when no digits are left.
    """
    if not text:
        return None
    digits = re.sub(r'[^0-9]', '', text)
    return int(digits) if digits else None


def year_from_title(title: Optional[str]) -> Optional[int]:
    """Return the first 19xx/20xx token in a title, if any."""
    if not title:
        return None
    match = YEAR_PATTERN.search(title)
    return int(match.group()) if match else None


def build_attributes(fields: Dict[str, Any]) -> VehicleAttributes:
    """
    Turn the raw field strings of a listing into VehicleAttributes.

    Numeric fields keep None when missing so that guardrails can tell
    "absent" from "zero"; gearbox/engine/ownership fall back to defaults.
    """
    title = normalize_text(fields.get("title")) or None

    year = fields.get("year")
    if year is None:
        year = year_from_title(title)

    return VehicleAttributes(
        title=title,
        year=year,
        mileage=fields.get("mileage"),
        price=fields.get("price"),
        ownership=fields.get("ownership"),
        gearbox=normalize_text(fields.get("gearbox")) or None,
        engine_type=normalize_text(fields.get("engine_type")) or None,
    )
