"""
InventoryService -- create, update and soft-delete inventory items.

Responsibility:
    Expresses each item mutation as a transform over the Document executed
    inside ``TransactionCoordinator.run_exclusive``, recording exactly one
    audit entry per successful mutation.

Architecture position:
    Kernel > Services -- composed from TransactionCoordinator and
    AuditorService.  Read operations live in InventorySelector.

Invariants enforced:
    - SKU uniqueness among ACTIVE items, checked inside the exclusive slot so
      concurrent creates with the same SKU cannot both succeed.
    - Soft delete is terminal: ``deleted_at`` is never cleared.
    - ``item_id``, ``created_at`` and ``created_by`` are never rewritten.
    - Input validation happens before the slot is taken; a rejected
      request produces no write and no audit entry.

Failure modes:
    - ValidationError: missing/invalid sku or product_name, non-JSON field
      value, non-numeric quantity/price.
    - NoUpdatesError: patch has no updatable fields (raised before the
      transaction).
    - ItemNotFoundError: unknown item_id on update/delete.
    - DuplicateSkuError: active item already uses the SKU.
    - StorageIOError: propagated from the coordinator.

Audit relevance:
    Every successful call appends one AuditEntry whose ``full_record``
    equals the item state the call returns.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any
from uuid import uuid4

from inventory_kernel.domain.clock import Clock
from inventory_kernel.domain.values import (
    coerce_numeric,
    format_timestamp,
    snapshot,
    validate_field_value,
)
from inventory_kernel.exceptions import (
    DuplicateSkuError,
    ItemNotFoundError,
    NoUpdatesError,
    ValidationError,
)
from inventory_kernel.logging_config import LogContext, get_logger
from inventory_kernel.models.audit_entry import AuditOperation
from inventory_kernel.models.document import Document
from inventory_kernel.models.inventory_item import (
    NUMERIC_FIELDS,
    SYSTEM_FIELDS,
    UPDATABLE_FIELDS,
    InventoryItem,
)
from inventory_kernel.services.auditor_service import AuditorService
from inventory_kernel.services.base import BaseService
from inventory_kernel.services.transaction_coordinator import TransactionCoordinator

logger = get_logger("services.inventory")


class InventoryService(BaseService):
    """
    Mutation entry points for inventory items.

    Contract:
        Each public method either returns the item as persisted or raises a
        typed InventoryKernelError; in the error case the document on disk
        is unchanged.
    """

    def __init__(
        self,
        coordinator: TransactionCoordinator,
        clock: Clock | None = None,
        auditor: AuditorService | None = None,
    ):
        super().__init__(coordinator, clock)
        self._auditor = auditor or AuditorService(self.clock)

    # ------------------------------------------------------------------
    # Create
    # ------------------------------------------------------------------

    def create_item(
        self,
        sku: Any,
        product_name: Any,
        fields: Mapping[str, Any] | None = None,
        actor: str = "admin",
    ) -> InventoryItem:
        """
        Create a new ACTIVE item.

        Preconditions:
            - ``sku`` and ``product_name`` are non-empty strings.
            - ``fields`` values are JSON values.  Kernel-owned keys, sku and
              product_name inside ``fields`` are ignored.

        Postconditions:
            - The item is appended to ``inventory_items`` and a CREATE
              audit entry is prepended to ``inventory_audit``.

        Raises:
            ValidationError, DuplicateSkuError, StorageIOError.
        """
        _require_text(sku, "sku")
        _require_text(product_name, "product_name")
        extra = self._clean_create_fields(fields)

        def _create(document: Document) -> InventoryItem:
            existing = document.find_active_by_sku(sku)
            if existing is not None:
                raise DuplicateSkuError(sku, existing.get("item_id"))

            now = format_timestamp(self.clock.now())
            record: dict[str, Any] = {
                "item_id": str(uuid4()),
                "created_at": now,
                "updated_at": now,
                "deleted_at": None,
                "created_by": actor,
                "updated_by": actor,
                "sku": sku,
                "product_name": product_name,
            }
            record.update(extra)
            document.inventory_items.append(record)
            self._auditor.record(document, AuditOperation.CREATE, None, record, actor)
            return InventoryItem.from_record(record)

        with LogContext.bind(actor_id=actor):
            item = self.coordinator.run_exclusive(_create, operation="create_item")
            logger.info("item_created", extra={"item_id": item.item_id, "sku": sku})
        return item

    # ------------------------------------------------------------------
    # Update
    # ------------------------------------------------------------------

    def update_item(
        self,
        item_id: str,
        patch: Mapping[str, Any],
        actor: str = "admin",
    ) -> InventoryItem:
        """
        Apply the updatable subset of ``patch`` to an item.

        Items in DELETED state can still be patched.  ``quantity`` and
        ``price`` are coerced to a number or None.

        Raises:
            NoUpdatesError: Before the transaction, if the patch has no
                updatable fields.
            ValidationError, ItemNotFoundError, StorageIOError.
        """
        if not isinstance(patch, Mapping):
            raise ValidationError("Patch must be an object")

        updates: dict[str, Any] = {}
        for name in UPDATABLE_FIELDS:
            if name not in patch:
                continue
            value = patch[name]
            if name in NUMERIC_FIELDS:
                updates[name] = coerce_numeric(value, name)
            elif name == "product_name":
                _require_text(value, name)
                updates[name] = value
            else:
                updates[name] = validate_field_value(value, name)
        if not updates:
            raise NoUpdatesError(UPDATABLE_FIELDS)

        def _update(document: Document) -> InventoryItem:
            record = document.find_item(item_id)
            if record is None:
                raise ItemNotFoundError(item_id)

            before = snapshot(record)
            record.update(snapshot(updates))
            record["updated_at"] = format_timestamp(self.clock.now())
            record["updated_by"] = actor
            self._auditor.record(
                document, AuditOperation.UPDATE, before, record, actor, fields=updates.keys()
            )
            return InventoryItem.from_record(record)

        with LogContext.bind(actor_id=actor, item_id=item_id):
            item = self.coordinator.run_exclusive(_update, operation="update_item")
            logger.info("item_updated", extra={"fields": sorted(updates)})
        return item

    # ------------------------------------------------------------------
    # Soft delete
    # ------------------------------------------------------------------

    def delete_item(self, item_id: str, actor: str = "admin") -> InventoryItem:
        """
        Soft-delete an item by stamping ``deleted_at``.

        Deleting an already deleted item stamps a new ``deleted_at``; the
        item stays DELETED.

        Raises:
            ItemNotFoundError, StorageIOError.
        """

        def _delete(document: Document) -> tuple[InventoryItem, bool]:
            record = document.find_item(item_id)
            if record is None:
                raise ItemNotFoundError(item_id)

            before = snapshot(record)
            now = format_timestamp(self.clock.now())
            record["deleted_at"] = now
            record["updated_at"] = now
            record["updated_by"] = actor
            self._auditor.record(document, AuditOperation.DELETE, before, record, actor)
            return InventoryItem.from_record(record), bool(before.get("deleted_at"))

        with LogContext.bind(actor_id=actor, item_id=item_id):
            item, was_deleted = self.coordinator.run_exclusive(_delete, operation="delete_item")
            logger.info("item_deleted", extra={"redelete": was_deleted})
        return item

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _clean_create_fields(self, fields: Mapping[str, Any] | None) -> dict[str, Any]:
        if fields is None:
            return {}
        if not isinstance(fields, Mapping):
            raise ValidationError("Item fields must be an object")

        reserved = set(SYSTEM_FIELDS) | {"sku", "product_name"}
        ignored = sorted(k for k in fields if k in reserved)
        if ignored:
            logger.debug("reserved_fields_ignored", extra={"fields": ignored})

        return {
            name: validate_field_value(value, name)
            for name, value in fields.items()
            if name not in reserved
        }


def _require_text(value: Any, field: str) -> None:
    if not isinstance(value, str) or not value:
        raise ValidationError(f"{field} is required and must be a non-empty string", field=field)
