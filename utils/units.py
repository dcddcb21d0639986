# dairy_admin/utils/units.py

import math
import re
from typing import Optional

from domain.models import ParsedUnit

# Units per crate for loading / delivery planning
CRATE_SIZE = 12

# Unanchored, first match only. "G" sits before "GM" in the alternation,
# so "200GM" matches on "G"; both normalise to "gm".
UNIT_PATTERN = re.compile(r"(\d+\.?\d*)\s*(ML|LTR|KG|GRMS|G|GM|ML)", re.IGNORECASE)

_CANONICAL_UNITS = {
    "grms": "gm",
    "g": "gm",
    "gm": "gm",
    "ltr": "ltr",
    "kg": "kg",
    "ml": "ml",
}

_PER_THOUSAND_UNITS = {"ml", "gm"}
_WHOLE_UNITS = {"ltr", "kg"}


def normalize_unit(token: Optional[str]) -> str:
    """
    Map a raw unit token (any case) to one of "ml", "gm", "ltr", "kg",
    falling back to "unit".
    """
    if not token:
        return "unit"
    return _CANONICAL_UNITS.get(token.lower(), "unit")


def parse_unit(product_name: Optional[str]) -> ParsedUnit:
    """
    Extract the pack size from a free-text product name.

    Examples:
      "Toned Milk 500ML" -> ParsedUnit(500.0, "ml")
      "Paneer 200GM"     -> ParsedUnit(200.0, "gm")
      "Generic Item"     -> ParsedUnit(1, "unit")

    Names without a recognised size count as one "unit" each.
    """
    match = UNIT_PATTERN.search(product_name) if product_name else None
    if not match:
        return ParsedUnit(quantity_value=1, unit="unit")

    return ParsedUnit(
        quantity_value=float(match.group(1)),
        unit=normalize_unit(match.group(2)),
    )


def to_base_units(quantity_value: float, unit: str, line_quantity: float) -> float:
    """
    Convert pack size x ordered quantity into liters (ml/ltr), kilograms
    (gm/kg), or the raw ordered count for "unit" products.
    """
    if unit in _PER_THOUSAND_UNITS:
        return (quantity_value * line_quantity) / 1000
    if unit in _WHOLE_UNITS:
        return quantity_value * line_quantity
    return line_quantity


def crates_for(base_unit_quantity: float) -> int:
    return math.floor(base_unit_quantity / CRATE_SIZE)
