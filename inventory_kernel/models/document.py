"""
Module: inventory_kernel.models.document
Responsibility: The root persisted object -- the whole database as one
    JSON-like document.
Architecture position: Kernel > Models.  May import from domain/ and
    sibling models only.

Invariants enforced:
    - ``users`` and ``inventory_items`` are in insertion order.
    - ``inventory_audit`` is newest-first; entries are only ever prepended.
    - Unknown top-level keys read from disk survive a load/save cycle
      unchanged (forward-compatible additive fields).

Failure modes:
    - ValueError from ``from_dict`` when the parsed JSON is not an object,
      a known collection has the wrong container type, a record inside one
      is not an object, or an audit entry names an unknown operation.
      DocumentStore turns this into StorageCorruptError.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from inventory_kernel.models.audit_entry import AuditOperation

USERS = "users"
INVENTORY_ITEMS = "inventory_items"
INVENTORY_AUDIT = "inventory_audit"
APP_META = "app_meta"

_LIST_KEYS = (USERS, INVENTORY_ITEMS, INVENTORY_AUDIT)
_AUDIT_OPERATIONS = frozenset(op.value for op in AuditOperation)


@dataclass
class Document:
    """
    Mutable in-memory image of the data file.

    Contract:
        A Document is only mutated inside ``TransactionCoordinator.run_exclusive``
        and is persisted before any other operation can observe the change.
        Records are plain dicts so that whatever is on disk round-trips
        exactly.
    """

    users: list[dict[str, Any]] = field(default_factory=list)
    inventory_items: list[dict[str, Any]] = field(default_factory=list)
    inventory_audit: list[dict[str, Any]] = field(default_factory=list)
    app_meta: dict[str, Any] = field(default_factory=dict)
    extra: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def empty(cls) -> Document:
        return cls()

    @classmethod
    def from_dict(cls, data: Any) -> Document:
        """
        Build a Document from parsed JSON.

        Missing collections default to empty.

        Raises:
            ValueError: If ``data`` is not a dict, a collection or one of its
                records has the wrong type, or an audit entry has an
                unknown operation.
        """
        if not isinstance(data, dict):
            raise ValueError(f"top-level value is {type(data).__name__}, expected object")

        for key in _LIST_KEYS:
            value = data.get(key)
            if value is None:
                continue
            if not isinstance(value, list):
                raise ValueError(f"'{key}' is {type(value).__name__}, expected array")
            for index, record in enumerate(value):
                if not isinstance(record, dict):
                    raise ValueError(
                        f"'{key}'[{index}] is {type(record).__name__}, expected object"
                    )
        for index, entry in enumerate(data.get(INVENTORY_AUDIT) or []):
            if entry.get("operation") not in _AUDIT_OPERATIONS:
                raise ValueError(
                    f"'{INVENTORY_AUDIT}'[{index}] has unknown operation {entry.get('operation')!r}"
                )
        meta = data.get(APP_META)
        if meta is not None and not isinstance(meta, dict):
            raise ValueError(f"'{APP_META}' is {type(meta).__name__}, expected object")

        known = set(_LIST_KEYS) | {APP_META}
        return cls(
            users=data.get(USERS) or [],
            inventory_items=data.get(INVENTORY_ITEMS) or [],
            inventory_audit=data.get(INVENTORY_AUDIT) or [],
            app_meta=meta or {},
            extra={k: v for k, v in data.items() if k not in known},
        )

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            USERS: self.users,
            INVENTORY_ITEMS: self.inventory_items,
            INVENTORY_AUDIT: self.inventory_audit,
            APP_META: self.app_meta,
        }
        out.update(self.extra)
        return out

    # -- lookups used inside transactions ---------------------------------

    def find_item(self, item_id: str) -> dict[str, Any] | None:
        """Return the stored item record (live reference) or None."""
        for record in self.inventory_items:
            if record.get("item_id") == item_id:
                return record
        return None

    def find_active_by_sku(self, sku: str) -> dict[str, Any] | None:
        for record in self.inventory_items:
            if record.get("sku") == sku and not record.get("deleted_at"):
                return record
        return None

    def find_user(self, username: str) -> dict[str, Any] | None:
        for record in self.users:
            if record.get("username") == username:
                return record
        return None
