"""
Data model of the inventory document.

The Document holds plain dict records; the frozen dataclasses here are the
typed views services and selectors hand back to callers.
"""

from inventory_kernel.models.audit_entry import AuditEntry, AuditOperation, FieldChange
from inventory_kernel.models.document import Document
from inventory_kernel.models.inventory_item import (
    NUMERIC_FIELDS,
    SYSTEM_FIELDS,
    UPDATABLE_FIELDS,
    InventoryItem,
    ItemState,
)
from inventory_kernel.models.user import User

__all__ = [
    "AuditEntry",
    "AuditOperation",
    "Document",
    "FieldChange",
    "InventoryItem",
    "ItemState",
    "NUMERIC_FIELDS",
    "SYSTEM_FIELDS",
    "UPDATABLE_FIELDS",
    "User",
]
