"""
Module: inventory_kernel.selectors.inventory_selector
Responsibility: Read-only queries over inventory items, their audit trail,
    users and application metadata.
Architecture position: Kernel > Selectors.

Failure modes:
    - ItemNotFoundError from ``get_item``.
    - StorageIOError propagated from ``DocumentStore.load``.
"""

from __future__ import annotations

import copy
from typing import Any

from inventory_kernel.exceptions import ItemNotFoundError
from inventory_kernel.models.audit_entry import AuditEntry
from inventory_kernel.models.inventory_item import InventoryItem
from inventory_kernel.models.user import User
from inventory_kernel.selectors.base import BaseSelector


class InventorySelector(BaseSelector):
    """Selector for inventory items and audit entries."""

    def list_items(self, include_deleted: bool = False) -> list[InventoryItem]:
        """Items in storage insertion order; ACTIVE only unless ``include_deleted``."""
        document = self._load()
        return [
            InventoryItem.from_record(record)
            for record in document.inventory_items
            if include_deleted or not record.get("deleted_at")
        ]

    def get_item(self, item_id: str) -> InventoryItem:
        """
        Fetch one item regardless of state.

        Raises:
            ItemNotFoundError: If no item has this id.
        """
        record = self._load().find_item(item_id)
        if record is None:
            raise ItemNotFoundError(item_id)
        return InventoryItem.from_record(record)

    def get_audit(self, item_id: str) -> list[AuditEntry]:
        """
        Audit entries for ``item_id``, newest first.

        Sorted by ``changed_at`` descending.  The sort is stable, so entries
        with equal timestamps keep their stored (newest-first) order.  An
        unknown id yields an empty list.
        """
        document = self._load()
        entries = [
            AuditEntry.from_record(record)
            for record in document.inventory_audit
            if record.get("item_id") == item_id
        ]
        return sorted(entries, key=lambda e: e.changed_at or "", reverse=True)

    def list_users(self) -> list[User]:
        return [User.from_record(record) for record in self._load().users]

    def get_meta(self, key: str, default: Any = None) -> Any:
        """Value from ``app_meta`` (e.g. ``ADMIN_TOKEN``), or ``default``."""
        return copy.deepcopy(self._load().app_meta.get(key, default))
