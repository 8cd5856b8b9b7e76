"""Application services: read-only reporting queries.

All figures are derived on demand from the repositories' current
snapshots.  Sales are always described by their own snapshot fields;
the live item is consulted only for its category.
"""

from __future__ import annotations

from collections import Counter, defaultdict
from datetime import date, datetime, time, timedelta, timezone
from decimal import Decimal
from typing import Callable, Iterable

from ims.application.dto import (
    DailyAmount,
    DashboardSummaryDTO,
    ProductSalesDTO,
    ReceiptDTO,
    SaleLineDTO,
    SalesReportDTO,
)
from ims.domain.exceptions import EntityNotFoundError, ValidationError
from ims.domain.model.sale import SalesTransaction
from ims.domain.model.value_objects import Money
from ims.domain.repository.inventory_repository import InventoryRepository
from ims.domain.repository.sales_repository import SalesRepository
from ims.domain.service.low_stock_evaluator import LowStockEvaluator

REPORT_PERIODS = {"7days": 7, "30days": 30, "90days": 90}
RECENT_SALES = 5
TOP_PRODUCTS = 5
DASHBOARD_DAYS = 7
DEFAULT_TAX_RATE = Decimal("0.18")

Clock = Callable[[], datetime]


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _sum(amounts: Iterable[Money]) -> Money:
    total = Money.zero()
    for amount in amounts:
        total = total + amount
    return total


def _daily_amounts(sales: list[SalesTransaction], today: date, days: int) -> list[DailyAmount]:
    """Revenue per day for the ``days`` days ending today, oldest first."""
    per_day: dict[date, Money] = defaultdict(Money.zero)
    for sale in sales:
        day = sale.date.astimezone(timezone.utc).date()
        per_day[day] = per_day[day] + sale.total_amount
    return [
        DailyAmount(day=day, amount=str(per_day.get(day, Money.zero())))
        for day in (today - timedelta(days=offset) for offset in reversed(range(days)))
    ]


class DashboardSummaryHandler:

    def __init__(
        self,
        inventory_repo: InventoryRepository,
        sales_repo: SalesRepository,
        clock: Clock | None = None,
    ) -> None:
        self._inventory_repo = inventory_repo
        self._sales_repo = sales_repo
        self._clock = clock or _utc_now

    def handle(self) -> DashboardSummaryDTO:
        items = self._inventory_repo.list()
        sales = self._sales_repo.list()

        stock_by_category: Counter[str] = Counter()
        for item in items:
            stock_by_category[item.category] += item.quantity

        return DashboardSummaryDTO(
            total_products=len(items),
            total_inventory_value=str(_sum(item.stock_value for item in items)),
            low_stock_items=LowStockEvaluator(self._inventory_repo).get(),
            total_sales=str(_sum(sale.total_amount for sale in sales)),
            recent_sales=[SaleLineDTO.from_transaction(s) for s in sales[:RECENT_SALES]],
            stock_by_category=dict(stock_by_category),
            daily_sales=_daily_amounts(sales, self._clock().date(), DASHBOARD_DAYS),
        )


class SalesReportHandler:

    def __init__(
        self,
        inventory_repo: InventoryRepository,
        sales_repo: SalesRepository,
        clock: Clock | None = None,
    ) -> None:
        self._inventory_repo = inventory_repo
        self._sales_repo = sales_repo
        self._clock = clock or _utc_now

    def handle(self, period: str = "7days") -> SalesReportDTO:
        if period not in REPORT_PERIODS:
            raise ValidationError(
                f"Unknown report period '{period}', expected one of {', '.join(REPORT_PERIODS)}"
            )
        days = REPORT_PERIODS[period]
        now = self._clock()
        start = datetime.combine(now.date() - timedelta(days=days), time.min, tzinfo=timezone.utc)
        sales = [s for s in self._sales_repo.list() if start <= s.date <= now]

        total = _sum(s.total_amount for s in sales)
        average = total.divide(len(sales)) if sales else Money.zero()

        return SalesReportDTO(
            period=period,
            start=start.date(),
            end=now.date(),
            total_sales=str(total),
            total_items=sum(s.quantity for s in sales),
            average_order_value=str(average),
            top_products=self._top_products(sales),
            revenue_by_category=self._revenue_by_category(sales),
            trend=_daily_amounts(sales, now.date(), days),
        )

    @staticmethod
    def _top_products(sales: list[SalesTransaction]) -> list[ProductSalesDTO]:
        units: Counter[str] = Counter()
        value: dict[str, Money] = defaultdict(Money.zero)
        names: dict[str, str] = {}
        for sale in sales:
            units[sale.product_id] += sale.quantity
            value[sale.product_id] = value[sale.product_id] + sale.total_amount
            names.setdefault(sale.product_id, sale.product_name)
        return [
            ProductSalesDTO(
                product_id=product_id,
                product_name=names[product_id],
                quantity=quantity,
                value=str(value[product_id]),
            )
            for product_id, quantity in units.most_common(TOP_PRODUCTS)
        ]

    def _revenue_by_category(self, sales: list[SalesTransaction]) -> dict[str, str]:
        revenue: dict[str, Money] = defaultdict(Money.zero)
        for sale in sales:
            item = self._inventory_repo.get(sale.product_id)
            category = item.category if item is not None else "Unknown"
            revenue[category] = revenue[category] + sale.total_amount
        return {category: str(amount) for category, amount in revenue.items()}


class ReceiptHandler:
    """Builds a receipt with a fixed-rate surcharge (GST by default)."""

    def __init__(self, sales_repo: SalesRepository, tax_rate: Decimal = DEFAULT_TAX_RATE) -> None:
        self._sales_repo = sales_repo
        self._tax_rate = tax_rate

    def handle(self, transaction_ids: list[str] | None = None) -> ReceiptDTO:
        """Receipt for the given sales, or for every sale when ids is None."""
        if transaction_ids is None:
            sales = self._sales_repo.list()
        else:
            sales = []
            for transaction_id in transaction_ids:
                sale = self._sales_repo.get(transaction_id)
                if sale is None:
                    raise EntityNotFoundError(f"Sale '{transaction_id}' not found")
                sales.append(sale)

        subtotal = _sum(s.total_amount for s in sales)
        tax = subtotal.percent(self._tax_rate)
        return ReceiptDTO(
            lines=[SaleLineDTO.from_transaction(s) for s in sales],
            subtotal=str(subtotal),
            tax_rate=f"{(self._tax_rate * 100).normalize():f}%",
            tax=str(tax),
            total=str(subtotal + tax),
        )
