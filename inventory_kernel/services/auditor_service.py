"""
AuditorService -- append-only audit trail for inventory mutations.

Responsibility:
    Builds one AuditEntry per create, update or soft delete, with a
    field-level diff and an independent snapshot of the item, and prepends
    it to ``document.inventory_audit`` (newest-first).

Architecture position:
    Kernel > Services -- called by InventoryService from inside
    ``TransactionCoordinator.run_exclusive``.  Never persists on its own;
    the coordinator saves the document the entry was added to.

Invariants enforced:
    - Append-only: existing entries are never modified or removed.
    - Newest-first: entries are inserted at index 0.
    - Snapshot isolation: ``full_record`` and diff values are deep copies.
    - CREATE has ``diff = None``; UPDATE diffs exactly the requested
      fields (no-op fields included); DELETE diffs only ``deleted_at``.

Failure modes:
    - ValueError if an UPDATE is recorded without a field list.
"""

from __future__ import annotations

import copy
from collections.abc import Iterable
from typing import Any
from uuid import uuid4

from inventory_kernel.domain.clock import Clock, SystemClock
from inventory_kernel.domain.values import format_timestamp, snapshot
from inventory_kernel.logging_config import get_logger
from inventory_kernel.models.audit_entry import AuditEntry, AuditOperation, FieldChange
from inventory_kernel.models.document import Document

logger = get_logger("services.auditor")


class AuditorService:
    """
    Service for creating inventory audit entries.

    Contract:
        ``record`` builds the entry and prepends it to the document it is
        given.  The caller is inside an exclusive transaction.

    Non-goals:
        - Does NOT save the document (the coordinator does).
        - Does NOT query the trail (that is InventorySelector.get_audit).
    """

    def __init__(self, clock: Clock | None = None):
        self._clock = clock or SystemClock()

    def build_entry(
        self,
        operation: AuditOperation,
        before: dict[str, Any] | None,
        after: dict[str, Any],
        actor: str,
        fields: Iterable[str] | None = None,
    ) -> AuditEntry:
        """
        Build (but do not store) an audit entry.

        Args:
            operation: CREATE, UPDATE or DELETE.
            before: Item record before the mutation (None for CREATE).
            after: Item record after the mutation.
            actor: Acting principal id.
            fields: For UPDATE, the fields present in the request.

        Returns:
            A new AuditEntry with a fresh id and the current timestamp.
        """
        if operation is AuditOperation.CREATE:
            diff = None
        elif operation is AuditOperation.UPDATE:
            if fields is None:
                raise ValueError("UPDATE audit entries require the requested field list")
            diff = _diff(before or {}, after, fields)
        else:
            diff = _diff(before or {}, after, ("deleted_at",))

        return AuditEntry(
            audit_id=str(uuid4()),
            item_id=after["item_id"],
            operation=operation,
            changed_by=actor,
            changed_at=format_timestamp(self._clock.now()),
            diff=diff,
            full_record=snapshot(after),
        )

    def record(
        self,
        document: Document,
        operation: AuditOperation,
        before: dict[str, Any] | None,
        after: dict[str, Any],
        actor: str,
        fields: Iterable[str] | None = None,
    ) -> AuditEntry:
        """Build an entry and prepend it to ``document.inventory_audit``."""
        entry = self.build_entry(operation, before, after, actor, fields)
        document.inventory_audit.insert(0, entry.to_record())
        logger.info(
            "audit_recorded",
            extra={
                "audit_id": entry.audit_id,
                "item_id": entry.item_id,
                "operation": entry.operation.value,
                "changed_by": actor,
                "diff_fields": sorted(entry.diff) if entry.diff else [],
            },
        )
        return entry


def _diff(
    before: dict[str, Any],
    after: dict[str, Any],
    fields: Iterable[str],
) -> dict[str, FieldChange]:
    return {
        name: FieldChange(
            before=copy.deepcopy(before.get(name)),
            after=copy.deepcopy(after.get(name)),
        )
        for name in fields
    }
