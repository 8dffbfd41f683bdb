"""
DocumentStore tests.

Verifies:
- Fresh document when no file exists
- Round-trip stability, including unknown top-level keys
- Quarantine of unreadable files, and only of the file that was read
- No caching between loads
- StorageIOError on filesystem failures
"""

import json

import pytest

from inventory_kernel.db.document_store import DocumentStore
from inventory_kernel.exceptions import StorageIOError
from inventory_kernel.models.document import Document
from inventory_kernel.services.inventory_service import InventoryService
from inventory_kernel.services.transaction_coordinator import TransactionCoordinator


class TestLoad:
    def test_missing_file_returns_empty_document(self, store, data_file):
        document = store.load()

        assert document == Document.empty()
        assert document.to_dict() == {
            "users": [],
            "inventory_items": [],
            "inventory_audit": [],
            "app_meta": {},
        }
        assert not data_file.exists()

    def test_missing_collections_default_to_empty(self, store, data_file):
        data_file.write_text(json.dumps({"users": [{"id": "u1"}]}), encoding="utf-8")

        document = store.load()

        assert document.users == [{"id": "u1"}]
        assert document.inventory_items == []
        assert document.app_meta == {}

    def test_each_load_rereads_disk(self, store, data_file):
        store.save(Document.empty())
        first = store.load()

        data_file.write_text(
            json.dumps({"app_meta": {"ADMIN_TOKEN": "external"}}), encoding="utf-8"
        )

        assert first.app_meta == {}
        assert store.load().app_meta == {"ADMIN_TOKEN": "external"}

    def test_unreadable_path_raises_storage_io_error(self, tmp_path):
        directory = tmp_path / "data.json"
        directory.mkdir()

        with pytest.raises(StorageIOError) as exc_info:
            DocumentStore(directory).load()
        assert exc_info.value.code == "STORAGE_IO_FAILURE"
        assert exc_info.value.operation == "read"


class TestQuarantine:
    @pytest.mark.parametrize(
        "content",
        [
            b"{not json",
            b"",
            b"[1, 2, 3]",
            b'{"inventory_items": {}}',
            b"\xff\xfe\x00",
            b'{"inventory_items": [1]}',
            b'{"users": ["admin"]}',
            b'{"inventory_audit": [{"operation": "PURGE"}]}',
        ],
        ids=[
            "syntax",
            "empty",
            "array",
            "wrong-collection-type",
            "bad-utf8",
            "scalar-item",
            "scalar-user",
            "unknown-audit-operation",
        ],
    )
    def test_corrupt_file_is_quarantined(self, store, data_file, content, captured_logs):
        data_file.write_bytes(content)

        document = store.load()

        assert document == Document.empty()
        assert not data_file.exists()
        quarantined = list(data_file.parent.glob("data.json.corrupt.*"))
        assert len(quarantined) == 1
        assert quarantined[0].read_bytes() == content
        assert any(r["message"] == "store_quarantined" for r in captured_logs())

    def test_quarantine_name_uses_clock_millis(self, store, data_file, deterministic_clock):
        data_file.write_text("garbage", encoding="utf-8")
        millis = int(deterministic_clock.now().timestamp() * 1000)

        store.load()

        assert (data_file.parent / f"data.json.corrupt.{millis}").exists()

    def test_repeated_corruption_keeps_every_copy(self, store, data_file):
        data_file.write_text("first", encoding="utf-8")
        store.load()
        data_file.write_text("second", encoding="utf-8")
        store.load()

        contents = sorted(p.read_text() for p in data_file.parent.glob("data.json.corrupt.*"))
        assert contents == ["first", "second"]

    def test_service_continues_after_quarantine(self, store, data_file):
        data_file.write_text("garbage", encoding="utf-8")
        document = store.load()
        document.app_meta["k"] = "v"

        store.save(document)

        assert store.load().app_meta == {"k": "v"}

    def test_writes_work_after_malformed_elements(self, inventory_service, store, data_file):
        data_file.write_text(json.dumps({"inventory_items": [1, "x"]}), encoding="utf-8")

        item = inventory_service.create_item("A1", "Widget")

        assert [i["sku"] for i in store.load().inventory_items] == ["A1"]
        assert item.sku == "A1"

    def test_read_only_load_leaves_corrupt_file(self, store, data_file, captured_logs):
        data_file.write_text("garbage", encoding="utf-8")

        document = store.load(quarantine=False)

        assert document == Document.empty()
        assert data_file.read_text() == "garbage"
        assert list(data_file.parent.glob("data.json.corrupt.*")) == []
        assert any(r["message"] == "store_unreadable" for r in captured_logs())

    def test_selector_never_renames_data_file(self, selector, data_file):
        data_file.write_text("garbage", encoding="utf-8")

        assert selector.list_items() == []
        assert data_file.read_text() == "garbage"

    def test_commit_between_read_and_rename_is_not_quarantined(
        self, data_file, deterministic_clock, captured_logs
    ):
        writer = InventoryService(
            TransactionCoordinator(DocumentStore(data_file, deterministic_clock)),
            deterministic_clock,
        )

        class RacingStore(DocumentStore):
            """Another writer recovers the file and commits while this load parses."""

            parses = 0

            def _parse(self, raw):
                self.parses += 1
                if self.parses == 1:
                    writer.create_item("A1", "Widget")
                return super()._parse(raw)

        data_file.write_text("garbage", encoding="utf-8")
        racing = RacingStore(data_file, deterministic_clock)

        document = racing.load()

        assert [i["sku"] for i in document.inventory_items] == ["A1"]
        assert [i["sku"] for i in DocumentStore(data_file).load().inventory_items] == ["A1"]
        quarantined = list(data_file.parent.glob("data.json.corrupt.*"))
        assert [p.read_text() for p in quarantined] == ["garbage"]
        assert any(r["message"] == "quarantine_skipped" for r in captured_logs())


class TestSave:
    def test_round_trip_is_stable(self, store, data_file):
        document = Document(
            users=[{"id": "u1", "username": "admin", "role": "admin", "created_at": "t"}],
            inventory_items=[{"item_id": "i1", "sku": "A1", "metadata": {"x": [1, None]}}],
            inventory_audit=[{"audit_id": "a1", "item_id": "i1", "operation": "CREATE", "diff": None}],
            app_meta={"ADMIN_TOKEN": "tok"},
        )
        store.save(document)
        first = data_file.read_bytes()

        store.save(store.load())

        assert data_file.read_bytes() == first
        assert store.load() == document

    def test_unknown_top_level_keys_preserved(self, store, data_file):
        data_file.write_text(
            json.dumps({"inventory_items": [], "schema_hint": {"v": 2}}), encoding="utf-8"
        )

        store.save(store.load())

        assert json.loads(data_file.read_text())["schema_hint"] == {"v": 2}

    def test_non_ascii_written_verbatim(self, store, data_file):
        store.save(Document(app_meta={"name": "Kho hàng"}))

        assert "Kho hàng" in data_file.read_text(encoding="utf-8")

    def test_no_temp_files_left_behind(self, store, data_file):
        store.save(Document.empty())
        store.save(Document.empty())

        assert [p.name for p in data_file.parent.iterdir()] == ["data.json"]

    def test_creates_parent_directories(self, tmp_path):
        target = tmp_path / "nested" / "dir" / "data.json"

        DocumentStore(target).save(Document.empty())

        assert target.exists()

    def test_write_failure_raises_and_keeps_previous_file(self, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory")
        store = DocumentStore(blocker / "data.json")

        with pytest.raises(StorageIOError) as exc_info:
            store.save(Document.empty())
        assert exc_info.value.operation == "write"
        assert blocker.read_text() == "not a directory"
