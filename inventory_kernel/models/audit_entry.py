"""
Module: inventory_kernel.models.audit_entry
Responsibility: Value object for one entry of the inventory audit trail.
Architecture position: Kernel > Models.

Invariants enforced:
    - Audit entries are append-only: AuditorService prepends them and no
      service mutates or removes an existing entry.
    - ``full_record`` is an independent copy of the item after the
      operation; later item mutations never reach it.
    - ``diff`` is None for CREATE and a ``{field: {before, after}}``
      mapping for UPDATE and DELETE.

Audit relevance:
    AuditEntry IS the audit trail.  Every create, update and soft delete
    produces exactly one.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass
from enum import Enum
from typing import Any

from inventory_kernel.domain.values import FieldValue


class AuditOperation(str, Enum):
    """Kinds of auditable item mutations."""

    CREATE = "CREATE"
    UPDATE = "UPDATE"
    DELETE = "DELETE"


@dataclass(frozen=True)
class FieldChange:
    """Before/after pair for one changed field."""

    before: FieldValue
    after: FieldValue

    def to_dict(self) -> dict[str, FieldValue]:
        return {"before": copy.deepcopy(self.before), "after": copy.deepcopy(self.after)}


@dataclass(frozen=True)
class AuditEntry:
    audit_id: str
    item_id: str
    operation: AuditOperation
    changed_by: str
    changed_at: str
    diff: dict[str, FieldChange] | None
    full_record: dict[str, Any]

    def to_record(self) -> dict[str, Any]:
        return {
            "audit_id": self.audit_id,
            "item_id": self.item_id,
            "operation": self.operation.value,
            "changed_by": self.changed_by,
            "changed_at": self.changed_at,
            "diff": (
                None
                if self.diff is None
                else {name: change.to_dict() for name, change in self.diff.items()}
            ),
            "full_record": copy.deepcopy(self.full_record),
        }

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> AuditEntry:
        raw_diff = record.get("diff")
        diff = None
        if raw_diff is not None:
            diff = {
                name: FieldChange(before=pair.get("before"), after=pair.get("after"))
                for name, pair in raw_diff.items()
            }
        return cls(
            audit_id=record.get("audit_id"),
            item_id=record.get("item_id"),
            operation=AuditOperation(record.get("operation")),
            changed_by=record.get("changed_by"),
            changed_at=record.get("changed_at"),
            diff=diff,
            full_record=copy.deepcopy(record.get("full_record") or {}),
        )
