"""Data Transfer Objects returned by the application handlers.

Sale results and alerts carry domain objects; the report DTOs carry
preformatted money strings ready for the CLI to print.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date

from ims.domain.model.inventory import InventoryItem
from ims.domain.model.sale import SalesTransaction


@dataclass(frozen=True)
class LowStockAlert:
    """Signal raised when a sale leaves an item at or below its threshold."""

    item_id: str
    item_name: str
    quantity: int
    threshold: int
    unit: str

    @property
    def message(self) -> str:
        return (
            f"{self.item_name} is below the minimum threshold "
            f"({self.quantity} {self.unit} left, threshold {self.threshold})"
        )


@dataclass(frozen=True)
class SaleResult:
    """Output of a successful sale."""

    transaction: SalesTransaction
    new_quantity: int
    low_stock_triggered: bool
    alert: LowStockAlert | None = None


@dataclass(frozen=True)
class DailyAmount:
    day: date
    amount: str  # formatted, e.g. "₹850.00"


@dataclass(frozen=True)
class SaleLineDTO:
    """A single sale as displayed to the user."""

    id: str
    product_name: str
    quantity: int
    unit_price: str
    total_amount: str
    date: str

    @staticmethod
    def from_transaction(sale: SalesTransaction) -> SaleLineDTO:
        return SaleLineDTO(
            id=sale.id or "",
            product_name=sale.product_name,
            quantity=sale.quantity,
            unit_price=str(sale.unit_price),
            total_amount=str(sale.total_amount),
            date=sale.date.strftime("%Y-%m-%d %H:%M UTC"),
        )


@dataclass(frozen=True)
class DashboardSummaryDTO:
    total_products: int
    total_inventory_value: str
    low_stock_items: list[InventoryItem]
    total_sales: str
    recent_sales: list[SaleLineDTO]
    stock_by_category: dict[str, int]
    daily_sales: list[DailyAmount]


@dataclass(frozen=True)
class ProductSalesDTO:
    product_id: str
    product_name: str
    quantity: int
    value: str


@dataclass(frozen=True)
class SalesReportDTO:
    period: str
    start: date
    end: date
    total_sales: str
    total_items: int
    average_order_value: str
    top_products: list[ProductSalesDTO]
    revenue_by_category: dict[str, str]
    trend: list[DailyAmount] = field(default_factory=list)


@dataclass(frozen=True)
class ReceiptDTO:
    lines: list[SaleLineDTO]
    subtotal: str
    tax_rate: str  # e.g. "18%"
    tax: str
    total: str
