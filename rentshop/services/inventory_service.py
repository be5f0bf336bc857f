import logging
from typing import Any, Dict, List, NamedTuple, Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from rentshop.core.db import in_transaction
from rentshop.core.errors import NotFound, ValidationError
from rentshop.models import InventoryItem
from rentshop.services.common import as_money, as_quantity, require_text
from rentshop.services.stock_service import compute_available, rented_quantities

log = logging.getLogger(__name__)


class StockedItem(NamedTuple):
    """An inventory item together with its currently available quantity."""
    item: InventoryItem
    available: int


def _clean_fields(data: Dict[str, Any]) -> Dict[str, Any]:
    cleaned = dict(data)
    if "name" in cleaned:
        cleaned["name"] = require_text(cleaned["name"], "name")
    if "daily_rent_price" in cleaned:
        if cleaned["daily_rent_price"] is None:
            raise ValidationError("daily_rent_price is required.", field="daily_rent_price")
        cleaned["daily_rent_price"] = as_money(cleaned["daily_rent_price"], field="daily_rent_price")
    if cleaned.get("selling_price") is not None:
        cleaned["selling_price"] = as_money(cleaned["selling_price"], field="selling_price")
    if "total_quantity" in cleaned:
        if cleaned["total_quantity"] is None:
            raise ValidationError("total_quantity is required.", field="total_quantity")
        cleaned["total_quantity"] = as_quantity(cleaned["total_quantity"], field="total_quantity", minimum=0)
    return cleaned


_UPDATABLE = ("name", "category", "description", "daily_rent_price", "selling_price", "total_quantity", "photo_url")


async def create_item(
    name: str,
    daily_rent_price,
    total_quantity: int,
    selling_price=None,
    category: Optional[str] = None,
    description: Optional[str] = None,
    photo_url: Optional[str] = None,
    conn: Optional[AsyncSession] = None,
) -> InventoryItem:
    fields = _clean_fields({
        "name": name,
        "daily_rent_price": daily_rent_price,
        "selling_price": selling_price,
        "total_quantity": total_quantity,
    })
    item = InventoryItem(category=category, description=description, photo_url=photo_url, **fields)
    async with in_transaction(conn) as session:
        session.add(item)
        await session.flush()
    log.info(f"Inventory item {item.id} ({item.name}) added with {item.total_quantity} unit(s).")
    return item


async def list_inventory(conn: Optional[AsyncSession] = None) -> List[StockedItem]:
    """Every item, newest first, annotated with its available stock."""
    async with in_transaction(conn) as session:
        result = await session.execute(select(InventoryItem).order_by(InventoryItem.created_at.desc()))
        items = list(result.scalars().all())
        rented = await rented_quantities(conn=session)
    return [StockedItem(item, compute_available(item.total_quantity, rented.get(item.id, 0))) for item in items]


async def get_item(item_id: UUID, conn: Optional[AsyncSession] = None) -> StockedItem:
    async with in_transaction(conn) as session:
        item = await session.get(InventoryItem, item_id)
        if item is None:
            raise NotFound("Inventory item", item_id)
        rented = await rented_quantities([item_id], conn=session)
    return StockedItem(item, compute_available(item.total_quantity, rented.get(item_id, 0)))


async def update_item(item_id: UUID, changes: Dict[str, Any], conn: Optional[AsyncSession] = None) -> StockedItem:
    """
    Partial update. Rate changes only affect future rentals: existing rental lines
    keep the rate they were created with.
    """
    cleaned = _clean_fields({k: v for k, v in changes.items() if k in _UPDATABLE})
    async with in_transaction(conn) as session:
        item = await session.get(InventoryItem, item_id)
        if item is None:
            raise NotFound("Inventory item", item_id)
        for field, value in cleaned.items():
            setattr(item, field, value)
        await session.flush()
        return await get_item(item_id, conn=session)


async def delete_item(item_id: UUID, conn: Optional[AsyncSession] = None) -> None:
    """Removes the item. Rental lines keep its id, name and rate, so open rentals can still be returned."""
    async with in_transaction(conn) as session:
        item = await session.get(InventoryItem, item_id)
        if item is None:
            raise NotFound("Inventory item", item_id)
        await session.delete(item)
    log.info(f"Inventory item {item_id} deleted.")
