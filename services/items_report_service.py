# dairy_admin/services/items_report_service.py

import io
import logging
import re
from typing import Any, Dict, List, Optional, Sequence, Tuple

import pandas as pd

from api_client import ApiClient, ApiError

logger = logging.getLogger(__name__)

ITEM_COLUMNS = ["Route", "Product Name", "Total Quantity"]
ALL_ROUTES_SHEET = "AllRoutes"
MAX_SHEET_NAME = 31  # Excel limit
INVALID_SHEET_CHARS = re.compile(r"[\[\]:*?/\\]")


def fetch_item_report(
        client: ApiClient,
        from_date: str,
        to_date: str,
        routes: Optional[Sequence[str]] = None,
) -> Tuple[bool, str, List[Dict[str, Any]]]:
    try:
        rows = client.get_item_report(from_date, to_date, routes)
    except ApiError as e:
        logger.error("Failed to fetch item report: %s", e)
        return False, "No item report data", []

    if not rows:
        return True, "No item report data", []
    return True, f"Fetched {len(rows)} rows", rows


def fetch_route_names(client: ApiClient) -> Tuple[bool, str, List[str]]:
    try:
        routes = client.get_routes()
    except ApiError as e:
        logger.error("Failed to fetch routes: %s", e)
        return False, "Failed to fetch routes", []
    return True, "Fetched", [r["name"] for r in routes if r.get("name")]


def filter_item_rows(
        rows: List[Dict[str, Any]],
        routes: Optional[Sequence[str]] = None,
        search: str = "",
) -> List[Dict[str, Any]]:
    """
    Keep rows on one of `routes` (all rows when none selected) whose route
    or product name contains `search`, case-insensitively.
    """
    filtered = rows
    if routes:
        wanted = set(routes)
        filtered = [r for r in filtered if r.get("route") in wanted]

    term = (search or "").strip().lower()
    if term:
        filtered = [
            r for r in filtered
            if term in (r.get("route") or "").lower()
            or term in (r.get("product_name") or "").lower()
        ]
    return filtered


def sort_item_rows(
        rows: List[Dict[str, Any]],
        key: str,
        descending: bool = False,
) -> List[Dict[str, Any]]:
    # rows missing the key sort last in both directions
    present = [r for r in rows if r.get(key) is not None]
    missing = [r for r in rows if r.get(key) is None]
    return sorted(present, key=lambda r: r[key], reverse=descending) + missing


def items_frame(rows: List[Dict[str, Any]]) -> pd.DataFrame:
    return pd.DataFrame(
        [
            [r.get("route") or "", r.get("product_name") or "", r.get("total_quantity") or 0]
            for r in rows
        ],
        columns=ITEM_COLUMNS,
    )


def items_report_filename(from_date: Optional[str], to_date: Optional[str]) -> str:
    return f"item_report_{from_date or 'start'}_to_{to_date or 'end'}.xlsx"


def _safe_sheet_name(name: str, used: set) -> str:
    """
    Excel sheet names: at most 31 characters, none of []:*?/\\, no
    apostrophe at either end, unique regardless of case. Clashes get a
    ~2, ~3, ... suffix.
    """
    base = INVALID_SHEET_CHARS.sub("", name or "").strip().strip("'") or "Route"
    candidate = base[:MAX_SHEET_NAME]
    n = 1
    while candidate.lower() in used:
        n += 1
        suffix = f"~{n}"
        candidate = base[:MAX_SHEET_NAME - len(suffix)] + suffix
    used.add(candidate.lower())
    return candidate


def build_items_report_excel(
        rows: List[Dict[str, Any]],
        routes: Optional[Sequence[str]] = None,
) -> bytes:
    """
    One sheet per selected route that has rows, plus an AllRoutes sheet.
    Without a route selection only AllRoutes is written.
    """
    if not rows:
        raise ValueError("No data to export")

    buffer = io.BytesIO()
    used = {ALL_ROUTES_SHEET.lower()}
    with pd.ExcelWriter(buffer, engine="xlsxwriter") as writer:
        for route in routes or []:
            route_rows = [r for r in rows if r.get("route") == route]
            if route_rows:
                items_frame(route_rows).to_excel(writer, sheet_name=_safe_sheet_name(route, used), index=False)

        items_frame(rows).to_excel(writer, sheet_name=ALL_ROUTES_SHEET, index=False)

    return buffer.getvalue()
