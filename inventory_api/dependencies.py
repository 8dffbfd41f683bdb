"""FastAPI dependencies: kernel objects from app state and bearer-token auth."""

from __future__ import annotations

import hmac

from fastapi import Request

from inventory_api.errors import ApiAuthError
from inventory_kernel.logging_config import LogContext
from inventory_kernel.selectors.inventory_selector import InventorySelector
from inventory_kernel.services.inventory_service import InventoryService

ADMIN_ACTOR = "admin"


def get_inventory_service(request: Request) -> InventoryService:
    return request.app.state.inventory_service


def get_selector(request: Request) -> InventorySelector:
    return request.app.state.selector


def require_actor(request: Request) -> str:
    """Validate ``Authorization: Bearer <token>`` and return the actor id."""
    header = request.headers.get("authorization")
    if not header:
        raise ApiAuthError(401, "NO_AUTH", "Missing Authorization header")

    parts = header.split(" ")
    expected: str = request.app.state.admin_token
    if (
        len(parts) != 2
        or parts[0] != "Bearer"
        or not hmac.compare_digest(parts[1].encode("utf-8"), expected.encode("utf-8"))
    ):
        raise ApiAuthError(403, "FORBIDDEN", "Invalid token")

    LogContext.set(actor_id=ADMIN_ACTOR)
    return ADMIN_ACTOR
