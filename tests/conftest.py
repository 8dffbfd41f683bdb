"""
Pytest fixtures for the inventory kernel test suite.

Provides:
- Structured logging fixtures
- A temp-dir DocumentStore per test
- Coordinator, service and selector fixtures wired to a DeterministicClock
- HTTP test client for the FastAPI app
"""

import json
import logging
from io import StringIO
from pathlib import Path

import pytest

from inventory_kernel.db.document_store import DocumentStore
from inventory_kernel.domain.clock import DeterministicClock
from inventory_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    reset_logging,
)
from inventory_kernel.selectors.inventory_selector import InventorySelector
from inventory_kernel.services.auditor_service import AuditorService
from inventory_kernel.services.bootstrap_service import BootstrapService
from inventory_kernel.services.inventory_service import InventoryService
from inventory_kernel.services.transaction_coordinator import TransactionCoordinator

# Test actor for all test operations
TEST_ACTOR_ID = "tester"


# =============================================================================
# Logging fixtures
# =============================================================================


@pytest.fixture(autouse=True, scope="session")
def _configure_test_logging():
    """Configure structured logging for the test suite."""
    reset_logging()
    configure_logging(level=logging.DEBUG, stream=StringIO())
    yield
    reset_logging()


@pytest.fixture(autouse=True)
def _clear_log_context():
    """Clear LogContext between tests to prevent cross-test contamination."""
    LogContext.clear()
    yield
    LogContext.clear()


@pytest.fixture
def captured_logs():
    """
    Capture inventory_kernel logs as parsed JSON dicts.

    Usage::

        def test_something(captured_logs, inventory_service):
            inventory_service.create_item("A1", "Widget")
            logs = captured_logs()
            assert any(r["message"] == "item_created" for r in logs)
    """
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    root = logging.getLogger("inventory_kernel")
    previous_level = root.level
    root.setLevel(logging.DEBUG)
    root.addHandler(handler)

    def _get_records() -> list[dict]:
        lines = stream.getvalue().strip().split("\n")
        return [json.loads(line) for line in lines if line]

    yield _get_records

    root.removeHandler(handler)
    root.setLevel(previous_level)


# =============================================================================
# Kernel fixtures
# =============================================================================


@pytest.fixture
def test_actor_id() -> str:
    return TEST_ACTOR_ID


@pytest.fixture
def deterministic_clock():
    """Provide a deterministic clock for testing."""
    return DeterministicClock()


@pytest.fixture
def data_file(tmp_path) -> Path:
    return tmp_path / "data.json"


@pytest.fixture
def store(data_file, deterministic_clock) -> DocumentStore:
    return DocumentStore(data_file, deterministic_clock)


@pytest.fixture
def coordinator(store) -> TransactionCoordinator:
    return TransactionCoordinator(store)


@pytest.fixture
def auditor_service(deterministic_clock) -> AuditorService:
    return AuditorService(deterministic_clock)


@pytest.fixture
def inventory_service(coordinator, deterministic_clock) -> InventoryService:
    return InventoryService(coordinator, deterministic_clock)


@pytest.fixture
def bootstrap_service(coordinator, deterministic_clock) -> BootstrapService:
    return BootstrapService(coordinator, deterministic_clock)


@pytest.fixture
def selector(store) -> InventorySelector:
    return InventorySelector(store)


@pytest.fixture
def raw_document(data_file):
    """Callable that parses the data file directly, bypassing the store."""

    def _read() -> dict:
        return json.loads(data_file.read_text(encoding="utf-8"))

    return _read


# =============================================================================
# HTTP fixtures
# =============================================================================

API_TOKEN = "test-token"


@pytest.fixture
def api_config(data_file):
    from inventory_config import ServiceConfig

    return ServiceConfig(data_file=data_file, admin_token=API_TOKEN, log_level="DEBUG")


@pytest.fixture
def api_client(api_config, deterministic_clock):
    """TestClient for an app bound to the per-test data file."""
    from fastapi.testclient import TestClient

    from inventory_api.app import create_app

    with TestClient(create_app(api_config, deterministic_clock)) as client:
        yield client


@pytest.fixture
def auth_headers() -> dict[str, str]:
    return {"Authorization": f"Bearer {API_TOKEN}"}
