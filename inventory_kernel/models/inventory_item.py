"""
Module: inventory_kernel.models.inventory_item
Responsibility: Read-side value object for an inventory item and its
    soft-delete lifecycle.
Architecture position: Kernel > Models.

Invariants enforced:
    - ACTIVE -> DELETED is the only transition; DELETED is terminal
      (``deleted_at`` is never cleared by any service).
    - ``item_id`` is generated on create and never rewritten.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from inventory_kernel.domain.values import FieldValue

# Fields owned by the kernel; callers cannot set them through create/update.
SYSTEM_FIELDS: tuple[str, ...] = (
    "item_id",
    "created_at",
    "updated_at",
    "deleted_at",
    "created_by",
    "updated_by",
)

# Fields a PATCH may touch.
UPDATABLE_FIELDS: tuple[str, ...] = (
    "product_name",
    "category",
    "quantity",
    "supplier",
    "price",
    "location",
    "metadata",
)

NUMERIC_FIELDS: frozenset[str] = frozenset({"quantity", "price"})


class ItemState(str, Enum):
    """Soft-delete lifecycle of an inventory item."""

    ACTIVE = "active"
    DELETED = "deleted"


@dataclass(frozen=True)
class InventoryItem:
    """
    Immutable snapshot of one stored item record.

    ``attributes`` holds every key that is not a system field, sku or
    product_name (category, quantity, supplier, price, location, metadata
    and any caller-defined extras).
    """

    item_id: str
    sku: str
    product_name: str
    created_at: str
    updated_at: str
    deleted_at: str | None
    created_by: str | None
    updated_by: str | None
    attributes: dict[str, FieldValue] = field(default_factory=dict)

    @property
    def state(self) -> ItemState:
        return ItemState.DELETED if self.deleted_at else ItemState.ACTIVE

    @property
    def is_deleted(self) -> bool:
        return self.state is ItemState.DELETED

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> InventoryItem:
        known = set(SYSTEM_FIELDS) | {"sku", "product_name"}
        return cls(
            item_id=record.get("item_id"),
            sku=record.get("sku"),
            product_name=record.get("product_name"),
            created_at=record.get("created_at"),
            updated_at=record.get("updated_at"),
            deleted_at=record.get("deleted_at"),
            created_by=record.get("created_by"),
            updated_by=record.get("updated_by"),
            attributes=copy.deepcopy(
                {k: v for k, v in record.items() if k not in known}
            ),
        )

    def to_record(self) -> dict[str, Any]:
        """Plain dict in stored key order, independent of this instance."""
        record: dict[str, Any] = {
            "item_id": self.item_id,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
            "deleted_at": self.deleted_at,
            "created_by": self.created_by,
            "updated_by": self.updated_by,
            "sku": self.sku,
            "product_name": self.product_name,
        }
        record.update(copy.deepcopy(self.attributes))
        return record
