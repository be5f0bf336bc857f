import logging
from uuid import UUID

from fastapi import APIRouter, HTTPException, status

from rentshop.core.errors import ShopError
from rentshop.schemas.inventory import InventoryItemRequest, InventoryItemResponse, InventoryItemUpdate
from rentshop.schemas.response import SuccessResponse
from rentshop.services.inventory_service import (
    StockedItem,
    create_item,
    delete_item,
    get_item,
    list_inventory,
    update_item,
)

router = APIRouter()
log = logging.getLogger("uvicorn")


def _payload(stocked: StockedItem) -> dict:
    return (
        InventoryItemResponse.model_validate(stocked.item)
        .model_copy(update={"available": stocked.available})
        .model_dump()
    )


@router.get("/", response_model=SuccessResponse)
async def list_inventory_endpoint():
    """Lists every item with its available stock (owned minus rented out)."""
    try:
        stock = await list_inventory()
        return SuccessResponse(data=[_payload(s) for s in stock])
    except Exception as e:
        log.error(f"Error listing inventory: {e}")
        raise HTTPException(status_code=500, detail="Server failed to list inventory.")


@router.post("/", status_code=status.HTTP_201_CREATED, response_model=SuccessResponse)
async def add_inventory_item(item_data: InventoryItemRequest):
    """Adds a new item with its initial stock."""
    try:
        item = await create_item(**item_data.model_dump())
        return SuccessResponse(data=_payload(StockedItem(item, item.total_quantity)))
    except ShopError as e:
        log.error(f"Inventory item rejected: {e}")
        raise
    except Exception as e:
        log.error(f"Error adding inventory item: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Server failed to add inventory item.",
        )


@router.get("/{item_id}", response_model=SuccessResponse)
async def get_inventory_item(item_id: UUID):
    """Fetches one item and its available stock."""
    stocked = await get_item(item_id)
    return SuccessResponse(data=_payload(stocked))


@router.patch("/{item_id}", response_model=SuccessResponse)
async def update_inventory_item(item_id: UUID, payload: InventoryItemUpdate):
    try:
        stocked = await update_item(item_id, payload.model_dump(exclude_unset=True))
        return SuccessResponse(data=_payload(stocked))
    except ShopError as e:
        log.error(f"Inventory update rejected: {e}")
        raise
    except Exception as e:
        log.error(f"Error updating inventory item {item_id}: {e}")
        raise HTTPException(status_code=500, detail="Server failed to update inventory item.")


@router.delete("/{item_id}", response_model=SuccessResponse)
async def delete_inventory_item(item_id: UUID):
    await delete_item(item_id)
    return SuccessResponse(data={"id": str(item_id), "deleted": True})
