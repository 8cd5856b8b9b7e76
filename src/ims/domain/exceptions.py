"""Domain-level exceptions.

All business rule violations are expressed as subclasses of DomainException
so the CLI layer can catch them uniformly and display user-friendly messages.
"""

from __future__ import annotations

from typing import Any


class DomainException(Exception):
    """Base class for all domain errors."""


class ValidationError(DomainException):
    """A business rule or invariant was violated."""


class InvalidQuantityError(ValidationError):
    """A sale quantity was zero, negative or not an integer."""


class MissingFieldError(ValidationError):

    def __init__(self, field: str) -> None:
        super().__init__(f"Field '{field}' is required")
        self.field = field


class EntityNotFoundError(DomainException):
    """A requested entity does not exist."""


class ProductNotFoundError(EntityNotFoundError):

    def __init__(self, product_id: str) -> None:
        super().__init__(f"Product '{product_id}' not found")
        self.product_id = product_id


class InsufficientStockError(DomainException):
    """Business-rule rejection: the sale asks for more than is on hand."""

    def __init__(
        self,
        product_name: str,
        requested: int,
        available: int,
        unit: str = "",
    ) -> None:
        suffix = f" {unit}" if unit else ""
        super().__init__(
            f"Insufficient stock for {product_name} "
            f"(requested {requested}, only {available}{suffix} available)"
        )
        self.product_name = product_name
        self.requested = requested
        self.available = available


class StoreError(DomainException):
    """The document store failed or refused an operation."""


class DocumentNotFoundError(StoreError):

    def __init__(self, collection: str, doc_id: str) -> None:
        super().__init__(f"Document '{doc_id}' not found in '{collection}'")
        self.collection = collection
        self.doc_id = doc_id


class GuardViolationError(StoreError):
    """A guarded increment would have pushed a field below its floor."""

    def __init__(self, collection: str, doc_id: str, field: str, current: Any) -> None:
        super().__init__(
            f"Update of '{field}' on {collection}/{doc_id} refused "
            f"(current value {current})"
        )
        self.collection = collection
        self.doc_id = doc_id
        self.field = field
        self.current = current


class PartialSaleError(DomainException):
    """The sale was recorded but the inventory decrement did not happen.

    Not reconciled automatically. ``transaction`` is the recorded sale.
    """

    def __init__(self, transaction: Any, reason: str) -> None:
        super().__init__(
            f"Sale {transaction.id} of {transaction.quantity} x "
            f"{transaction.product_name} was recorded but stock was not "
            f"decremented: {reason}"
        )
        self.transaction = transaction
