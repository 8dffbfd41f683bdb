"""
FastAPI application factory.

Wires one DocumentStore, one TransactionCoordinator and the kernel
services/selectors into ``app.state``; the routes in ``routes.py`` reach
them through the dependencies in ``dependencies.py``.
"""

from __future__ import annotations

from uuid import uuid4

from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse

from inventory_api.errors import install_error_handlers
from inventory_api.routes import router as inventory_router
from inventory_config import ServiceConfig, get_active_config
from inventory_kernel import __version__
from inventory_kernel.db.document_store import DocumentStore
from inventory_kernel.domain.clock import Clock
from inventory_kernel.logging_config import LogContext, configure_logging, get_logger
from inventory_kernel.selectors.inventory_selector import InventorySelector
from inventory_kernel.services.bootstrap_service import ADMIN_TOKEN_KEY
from inventory_kernel.services.inventory_service import InventoryService
from inventory_kernel.services.transaction_coordinator import TransactionCoordinator

logger = get_logger("api")


def resolve_admin_token(config: ServiceConfig, selector: InventorySelector) -> str:
    """Configured token, else the one stored by bootstrap, else the default."""
    return (
        config.admin_token
        or selector.get_meta(ADMIN_TOKEN_KEY)
        or config.default_admin_token
    )


def create_app(config: ServiceConfig | None = None, clock: Clock | None = None) -> FastAPI:
    config = config or get_active_config()
    configure_logging(level=config.log_level)

    store = DocumentStore(config.data_file, clock)
    coordinator = TransactionCoordinator(store)
    selector = InventorySelector(store)

    app = FastAPI(
        title="Inventory API",
        description="Inventory items with soft delete and an append-only audit trail",
        version=__version__,
    )
    app.state.config = config
    app.state.coordinator = coordinator
    app.state.inventory_service = InventoryService(coordinator, clock)
    app.state.selector = selector
    app.state.admin_token = resolve_admin_token(config, selector)

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        correlation_id = request.headers.get("x-request-id") or str(uuid4())
        with LogContext.bind(correlation_id=correlation_id):
            logger.info(
                "request_received",
                extra={
                    "method": request.method,
                    "path": request.url.path,
                    "auth": "authorization" in request.headers,
                },
            )
            return await call_next(request)

    @app.get("/", response_class=PlainTextResponse)
    async def index() -> str:
        return "Inventory API"

    app.include_router(inventory_router, prefix=config.api_prefix)
    install_error_handlers(app)

    logger.info(
        "app_created",
        extra={"data_file": str(config.data_file), "api_prefix": config.api_prefix},
    )
    return app
