"""InventoryItem entity — one stocked product.

Items are created, edited and deleted explicitly, and decremented by
sales.  ``quantity`` is the one shared mutable value with a real invariant:
it never drops below zero.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Mapping

from ims.domain.exceptions import MissingFieldError, ValidationError
from ims.domain.model.value_objects import Money

SUGGESTED_CATEGORIES = ("Rice", "Wheat", "Oil", "Pulses", "Spices", "Other")

EDITABLE_FIELDS = ("name", "category", "quantity", "unit", "unit_price", "threshold", "notes")
REQUIRED_FIELDS = ("name", "category", "quantity", "unit", "unit_price", "threshold")


@dataclass(frozen=True)
class InventoryItem:
    """A stocked product.

    Frozen: the repository rebuilds an item from every confirmed store
    document, so snapshots handed to callers are read-only copies.
    """

    id: str
    name: str
    category: str
    quantity: int
    unit: str
    unit_price: Money
    threshold: int
    last_updated: datetime
    notes: str | None = None

    @property
    def is_low_stock(self) -> bool:
        return self.quantity <= self.threshold

    @property
    def stock_value(self) -> Money:
        return self.unit_price * self.quantity


def validate_item_fields(fields: Mapping[str, Any], partial: bool = False) -> dict[str, Any]:
    """Check and normalise item fields supplied by a caller.

    With ``partial=False`` every required field must be present (used by
    *add*); with ``partial=True`` only the supplied keys are checked (used
    by *update*).  Returns a new dict with stripped strings and ``Money``
    prices.
    """
    unknown = set(fields) - set(EDITABLE_FIELDS)
    if unknown:
        raise ValidationError(f"Unknown or read-only item field(s): {', '.join(sorted(unknown))}")

    if not partial:
        for name in REQUIRED_FIELDS:
            if fields.get(name) is None:
                raise MissingFieldError(name)

    clean: dict[str, Any] = {}
    for name, value in fields.items():
        if name in ("name", "category", "unit"):
            clean[name] = _non_empty_text(name, value)
        elif name in ("quantity", "threshold"):
            clean[name] = _non_negative_int(name, value)
        elif name == "unit_price":
            clean[name] = value if isinstance(value, Money) else Money.of(value)
        elif name == "notes":
            clean[name] = _optional_text(value)
    return clean


# --- Field checks -------------------------------------------------------------


def _non_empty_text(name: str, value: Any) -> str:
    if value is None:
        raise MissingFieldError(name)
    if not isinstance(value, str):
        raise ValidationError(f"Field '{name}' must be text")
    if not value.strip():
        raise MissingFieldError(name)
    return value.strip()


def _non_negative_int(name: str, value: Any) -> int:
    if value is None:
        raise MissingFieldError(name)
    if not isinstance(value, int) or isinstance(value, bool):
        raise ValidationError(f"Field '{name}' must be a whole number, got {value!r}")
    if value < 0:
        raise ValidationError(f"Field '{name}' cannot be negative, got {value}")
    return value


def _optional_text(value: Any) -> str | None:
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValidationError("Field 'notes' must be text")
    return value.strip() or None
