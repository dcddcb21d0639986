# dairy_admin/services/brand_report_service.py

import logging
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple

from api_client import ApiClient, ApiError
from domain.models import (
    BrandReport,
    BrandReportResult,
    CategoryTotals,
    ConsolidatedProduct,
    OrderLine,
    ReportInfo,
)
from utils.formatting import to_number
from utils.units import crates_for, parse_unit, to_base_units

logger = logging.getLogger(__name__)

EMPTY_SUMMARY = {
    "total_orders": 0,
    "total_products": 0,
    "total_amount": 0,
}


def order_lines_from_orders(orders: Iterable[Dict[str, Any]]) -> List[OrderLine]:
    """
    Flatten API orders into OrderLine objects, keeping input order.

    Each order is expected to look like:
      {
        "products": [
          {"product_name" | "name": str, "quantity": int,
           "category": str | None, "brand": str | None},
          ...
        ],
        ...
      }
    """
    lines: List[OrderLine] = []

    for order in orders or []:
        products = order.get("products") if isinstance(order, dict) else None
        if not isinstance(products, list):
            continue

        for product in products:
            name = product.get("product_name") or product.get("name")
            if not name:
                logger.warning("Skipping product line without a name: %s", product)
                continue

            lines.append(
                OrderLine(
                    product_name=name,
                    quantity=to_number(product.get("quantity")),
                    category=product.get("category") or "Unknown",
                    brand=product.get("brand") or "Unknown",
                )
            )

    return lines


def consolidate_products(lines: Iterable[OrderLine]) -> List[ConsolidatedProduct]:
    """
    Merge order lines by exact product name, in first-appearance order.

    Crates are floored per line and then summed, so two half-crate lines
    never add up to a crate.
    """
    consolidated: Dict[str, ConsolidatedProduct] = {}

    for line in lines:
        parsed = parse_unit(line.product_name)
        base_qty = to_base_units(parsed.quantity_value, parsed.unit, line.quantity)
        crates = crates_for(base_qty)

        current = consolidated.get(line.product_name)
        if current is None:
            consolidated[line.product_name] = ConsolidatedProduct(
                name=line.product_name,
                total_quantity=line.quantity,
                category=line.category,
                brand=line.brand,
                total_base_unit_quantity=base_qty,
                total_crates=crates,
                total_packets=line.quantity,
            )
            continue

        current.total_quantity += line.quantity
        current.total_base_unit_quantity += base_qty
        current.total_crates += crates
        current.total_packets += line.quantity

    return list(consolidated.values())


def _matches(keyword: str) -> Callable[[ConsolidatedProduct], bool]:
    def predicate(product: ConsolidatedProduct) -> bool:
        return keyword in product.category.lower() or keyword in product.name.lower()
    return predicate


is_milk_product = _matches("milk")
is_curd_product = _matches("curd")


def sum_totals(products: Iterable[ConsolidatedProduct]) -> CategoryTotals:
    totals = CategoryTotals()
    for p in products:
        totals.crates += p.total_crates
        totals.liters += p.total_base_unit_quantity
        totals.packets += p.total_packets
    return totals


def aggregate_categories(
        products: List[ConsolidatedProduct],
) -> Tuple[CategoryTotals, CategoryTotals, CategoryTotals]:
    """
    Returns (milk_totals, curd_totals, grand_totals).

    The milk and curd buckets are independent substring matches on category
    or name, so "Milk Curd Combo" lands in both. Grand totals count every
    product once, including products in neither bucket.
    """
    milk = sum_totals(p for p in products if is_milk_product(p))
    curd = sum_totals(p for p in products if is_curd_product(p))
    grand = sum_totals(products)
    return milk, curd, grand


def build_brand_report(orders: Iterable[Dict[str, Any]]) -> BrandReport:
    product_list = consolidate_products(order_lines_from_orders(orders))
    milk, curd, grand = aggregate_categories(product_list)

    return BrandReport(
        product_list=product_list,
        totals=grand,
        milk_totals=milk,
        curd_totals=curd,
    )


def fetch_unique_brands(client: ApiClient) -> Tuple[bool, str, List[str]]:
    try:
        brands = client.get_unique_brands()
    except ApiError as e:
        logger.error("Failed to fetch brands: %s", e)
        return False, "Failed to fetch brands", []

    if not brands:
        return True, "No brands found", []
    return True, "Fetched", brands


def fetch_brand_report(
        client: ApiClient,
        from_date: str,
        to_date: str,
        order_type: str,
        brand: str,
) -> Tuple[bool, str, BrandReportResult]:
    """
    Fetch orders for one brand/date range/order type and build the report.

    Returns (ok, message, result). On API failure `ok` is False and the
    result carries an empty report with zeroed totals.
    """
    info = ReportInfo(
        from_date=from_date,
        to_date=to_date,
        order_type=order_type,
        brand=brand,
    )

    try:
        data = client.get_brand_report(from_date, to_date, order_type, brand)
    except ApiError as e:
        logger.error("Failed to fetch brand report: %s", e)
        return False, f"Failed to fetch brand report: {e}", BrandReportResult(
            report=BrandReport(),
            info=info,
            summary=dict(EMPTY_SUMMARY),
        )

    orders = data.get("orders") or []
    summary = {**EMPTY_SUMMARY, **(data.get("summary") or {})}
    info.total_orders = len(orders)

    report = build_brand_report(orders)
    result = BrandReportResult(report=report, info=info, summary=summary)

    if not orders:
        return True, f"No {order_type} orders found for the selected date range", result
    if report.is_empty:
        return True, (
            f"Found {len(orders)} {order_type} orders but no products from {brand} brand"
        ), result

    total_products = summary.get("total_products") or len(report.product_list)
    return True, (
        f"Found {len(orders)} {order_type} orders with {total_products} products from {brand} brand"
    ), result


def no_products_message(result: Optional[BrandReportResult]) -> str:
    if result is None or result.info.total_orders == 0:
        return "No orders found for the selected date range"
    return (
        f"Found {result.info.total_orders} {result.info.order_type} orders but no products "
        f"from {result.info.brand} brand for the selected date range"
    )
