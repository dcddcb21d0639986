# dairy_admin/utils/formatting.py

import logging
from typing import Any

logger = logging.getLogger(__name__)


def to_number(value: Any) -> float:
    """
    Numbers from the API arrive as int, float, numeric string or nothing.
    Blank and non-numeric values count as 0.
    """
    if value is None or value == "":
        return 0
    if isinstance(value, (int, float)):
        return value
    try:
        return float(value)
    except (TypeError, ValueError):
        logger.warning("Non-numeric value %r counted as 0", value)
        return 0


def format_fixed(n: float, digits: int = 2) -> str:
    """
    Fixed-point display used in report tables.
    Example: 9 -> "9.00", format_fixed(36, 0) -> "36"
    """
    return f"{n:.{digits}f}"


def format_rupees(n: float) -> str:
    """
    Format an amount with Indian digit grouping.
    Example: 1234567.5 -> "₹12,34,567.50"
    """
    sign = "-" if n < 0 else ""
    whole, frac = f"{abs(n):.2f}".split(".")

    if len(whole) > 3:
        head, tail = whole[:-3], whole[-3:]
        groups = []
        while len(head) > 2:
            groups.insert(0, head[-2:])
            head = head[:-2]
        if head:
            groups.insert(0, head)
        whole = ",".join(groups + [tail])

    return f"{sign}₹{whole}.{frac}"
