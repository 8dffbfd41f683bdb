from typing import Any

from fastapi import APIRouter, Body, Depends

from inventory_api.dependencies import get_inventory_service, get_selector, require_actor
from inventory_kernel.selectors.inventory_selector import InventorySelector
from inventory_kernel.services.inventory_service import InventoryService

router = APIRouter(prefix="/inventory", tags=["inventory"])


@router.post("", status_code=201)
def create_item(
    payload: dict[str, Any] = Body(...),
    actor: str = Depends(require_actor),
    service: InventoryService = Depends(get_inventory_service),
):
    fields = {k: v for k, v in payload.items() if k not in ("sku", "product_name")}
    item = service.create_item(payload.get("sku"), payload.get("product_name"), fields, actor)
    return item.to_record()


@router.get("")
def list_items(
    include_deleted: str | None = None,
    actor: str = Depends(require_actor),
    selector: InventorySelector = Depends(get_selector),
):
    # only the literal "true" opts in; any other value lists active items
    return [item.to_record() for item in selector.list_items(include_deleted == "true")]


@router.get("/{item_id}")
def get_item(
    item_id: str,
    actor: str = Depends(require_actor),
    selector: InventorySelector = Depends(get_selector),
):
    return selector.get_item(item_id).to_record()


@router.patch("/{item_id}")
def update_item(
    item_id: str,
    payload: dict[str, Any] = Body(...),
    actor: str = Depends(require_actor),
    service: InventoryService = Depends(get_inventory_service),
):
    return service.update_item(item_id, payload, actor).to_record()


@router.delete("/{item_id}")
def delete_item(
    item_id: str,
    actor: str = Depends(require_actor),
    service: InventoryService = Depends(get_inventory_service),
):
    service.delete_item(item_id, actor)
    return {"ok": True}


@router.get("/{item_id}/audit")
def get_audit(
    item_id: str,
    actor: str = Depends(require_actor),
    selector: InventorySelector = Depends(get_selector),
):
    return [entry.to_record() for entry in selector.get_audit(item_id)]
