"""Composition root — wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module receives its collaborators through its constructor.
"""

from __future__ import annotations

from dataclasses import dataclass

from ims.application.record_sale import AlertListener, RecordSaleHandler
from ims.application.reports import DashboardSummaryHandler, ReceiptHandler, SalesReportHandler
from ims.application.seed_store import SeedStoreHandler
from ims.domain.repository.document_store import DocumentStore
from ims.domain.repository.inventory_repository import InventoryRepository
from ims.domain.repository.sales_repository import SalesRepository
from ims.domain.service.low_stock_evaluator import LowStockEvaluator
from ims.infrastructure.config import Settings
from ims.infrastructure.persistence.in_memory_document_store import InMemoryDocumentStore
from ims.infrastructure.persistence.json_document_store import JsonDocumentStore


@dataclass
class Services:
    store: DocumentStore
    inventory: InventoryRepository
    sales: SalesRepository
    low_stock: LowStockEvaluator
    record_sale: RecordSaleHandler
    seed: SeedStoreHandler
    dashboard: DashboardSummaryHandler
    sales_report: SalesReportHandler
    receipt: ReceiptHandler

    def close(self) -> None:
        self.inventory.close()
        self.sales.close()


def document_store(settings: Settings) -> DocumentStore:
    if settings.store == "memory":
        return InMemoryDocumentStore()
    return JsonDocumentStore(settings.data_dir)


def build_services(
    settings: Settings,
    store: DocumentStore | None = None,
    on_low_stock: AlertListener | None = None,
) -> Services:
    """Construct and start one session's repositories and handlers."""
    store = store or document_store(settings)
    inventory = InventoryRepository(store)
    sales = SalesRepository(store)
    seed = SeedStoreHandler(inventory, sales)
    if settings.seed_on_start:
        seed.handle()
    inventory.start()
    sales.start()
    return Services(
        store=store,
        inventory=inventory,
        sales=sales,
        low_stock=LowStockEvaluator(inventory),
        record_sale=RecordSaleHandler(inventory, sales, on_low_stock=on_low_stock),
        seed=seed,
        dashboard=DashboardSummaryHandler(inventory, sales),
        sales_report=SalesReportHandler(inventory, sales),
        receipt=ReceiptHandler(sales, tax_rate=settings.tax_rate),
    )
