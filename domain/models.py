# dairy_admin/domain/models.py

from dataclasses import dataclass, field
from typing import List, Optional


@dataclass
class OrderLine:
    """
    One product within one order, as returned by the order-query API.
    """
    product_name: str  # consolidation key, exact match
    quantity: float
    category: str = "Unknown"
    brand: str = "Unknown"


@dataclass
class ParsedUnit:
    quantity_value: float  # e.g. 500 for "Toned Milk 500ML"
    unit: str  # "ml" | "gm" | "ltr" | "kg" | "unit"


@dataclass
class ConsolidatedProduct:
    """
    Running totals for every order line sharing one product name.
    """
    name: str
    total_quantity: float
    category: str  # first-seen line wins
    brand: str  # first-seen line wins
    total_base_unit_quantity: float  # liters / kilograms / raw count
    total_crates: int
    total_packets: float


@dataclass
class CategoryTotals:
    crates: float = 0
    liters: float = 0  # base-unit quantity, labeled liters in the report
    packets: float = 0


@dataclass
class BrandReport:
    """
    Consolidated brand-wise report, ready for the table and the exporters.
    """
    product_list: List[ConsolidatedProduct] = field(default_factory=list)
    totals: CategoryTotals = field(default_factory=CategoryTotals)
    milk_totals: CategoryTotals = field(default_factory=CategoryTotals)
    curd_totals: CategoryTotals = field(default_factory=CategoryTotals)

    @property
    def is_empty(self) -> bool:
        return not self.product_list


@dataclass
class ReportInfo:
    from_date: str  # ISO date, e.g. "2024-05-01"
    to_date: str
    order_type: str  # "AM" | "Evening"
    brand: str
    total_orders: int = 0


@dataclass
class ReportRow:
    """
    One display row of the brand report table.
    """
    sl_no: Optional[int]  # None for total / separator rows
    particulars: str
    crates: str
    liters: str
    packets: str
    kind: str = "product"  # "product" | "total" | "grand_total" | "separator"


@dataclass
class BrandReportResult:
    report: BrandReport
    info: ReportInfo
    summary: dict  # server summary: total_orders, total_products, total_amount
