"""
AuditorService tests.

Verifies:
- Diff shape per operation
- Snapshot isolation of diff values and full_record
- Newest-first insertion, existing entries untouched
"""

import pytest

from inventory_kernel.models.audit_entry import AuditEntry, AuditOperation, FieldChange
from inventory_kernel.models.document import Document


@pytest.fixture
def item_record():
    return {
        "item_id": "item-1",
        "created_at": "2024-01-01T12:00:00.000Z",
        "updated_at": "2024-01-01T12:00:00.000Z",
        "deleted_at": None,
        "created_by": "admin",
        "updated_by": "admin",
        "sku": "A1",
        "product_name": "Widget",
        "metadata": {"tags": ["x"]},
    }


class TestBuildEntry:
    def test_create_has_no_diff(self, auditor_service, item_record):
        entry = auditor_service.build_entry(AuditOperation.CREATE, None, item_record, "admin")

        assert entry.operation is AuditOperation.CREATE
        assert entry.diff is None
        assert entry.item_id == "item-1"
        assert entry.changed_by == "admin"
        assert entry.changed_at == "2024-01-01T12:00:00.000Z"
        assert entry.full_record == item_record

    def test_update_diffs_requested_fields_only(self, auditor_service, item_record):
        after = dict(item_record, quantity=5, product_name="Widget", updated_at="later")

        entry = auditor_service.build_entry(
            AuditOperation.UPDATE, item_record, after, "admin", fields=["quantity", "product_name"]
        )

        assert entry.diff == {
            "quantity": FieldChange(before=None, after=5),
            "product_name": FieldChange(before="Widget", after="Widget"),
        }

    def test_update_without_fields_rejected(self, auditor_service, item_record):
        with pytest.raises(ValueError):
            auditor_service.build_entry(AuditOperation.UPDATE, item_record, item_record, "admin")

    def test_delete_diffs_deleted_at_only(self, auditor_service, item_record):
        after = dict(item_record, deleted_at="2024-01-02T00:00:00.000Z", updated_at="x")

        entry = auditor_service.build_entry(AuditOperation.DELETE, item_record, after, "admin")

        assert entry.diff == {
            "deleted_at": FieldChange(before=None, after="2024-01-02T00:00:00.000Z")
        }

    def test_each_entry_gets_fresh_id(self, auditor_service, item_record):
        first = auditor_service.build_entry(AuditOperation.CREATE, None, item_record, "admin")
        second = auditor_service.build_entry(AuditOperation.CREATE, None, item_record, "admin")
        assert first.audit_id != second.audit_id

    def test_snapshot_isolated_from_later_mutation(self, auditor_service, item_record):
        entry = auditor_service.build_entry(
            AuditOperation.UPDATE, item_record, item_record, "admin", fields=["metadata"]
        )

        item_record["metadata"]["tags"].append("y")

        assert entry.full_record["metadata"] == {"tags": ["x"]}
        assert entry.diff["metadata"].after == {"tags": ["x"]}


class TestRecord:
    def test_entries_prepended(self, auditor_service, item_record):
        document = Document(inventory_items=[item_record])

        first = auditor_service.record(document, AuditOperation.CREATE, None, item_record, "admin")
        second = auditor_service.record(
            document, AuditOperation.DELETE, item_record, item_record, "admin"
        )

        assert [e["audit_id"] for e in document.inventory_audit] == [
            second.audit_id,
            first.audit_id,
        ]

    def test_existing_entries_unchanged(self, auditor_service, item_record):
        document = Document()
        auditor_service.record(document, AuditOperation.CREATE, None, item_record, "admin")
        original = [dict(e) for e in document.inventory_audit]

        auditor_service.record(
            document, AuditOperation.UPDATE, item_record, item_record, "admin", fields=["sku"]
        )

        assert document.inventory_audit[1:] == original

    def test_stored_record_round_trips(self, auditor_service, item_record):
        document = Document()
        entry = auditor_service.record(
            document, AuditOperation.UPDATE, item_record, item_record, "admin", fields=["sku"]
        )

        stored = document.inventory_audit[0]
        assert stored["operation"] == "UPDATE"
        assert stored["diff"] == {"sku": {"before": "A1", "after": "A1"}}
        assert AuditEntry.from_record(stored) == entry

    def test_record_is_logged(self, auditor_service, item_record, captured_logs):
        auditor_service.record(Document(), AuditOperation.CREATE, None, item_record, "admin")

        logs = [r for r in captured_logs() if r["message"] == "audit_recorded"]
        assert logs[0]["operation"] == "CREATE"
        assert logs[0]["diff_fields"] == []
