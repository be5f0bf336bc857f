import logging
from typing import Dict, Iterable, Optional
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from rentshop.core.db import in_transaction
from rentshop.models import InventoryItem, Rental, RentalItem, RentalStatus

log = logging.getLogger(__name__)


def compute_available(total_quantity: int, rented_quantity: int) -> int:
    """Owned stock minus what is out on rentals, never below zero."""
    return max(0, total_quantity - rented_quantity)


def _outstanding_lines_query():
    # Unreturned lines of every rental that is not closed
    return (
        select(RentalItem.item_id, func.sum(RentalItem.quantity))
        .join(Rental, RentalItem.rental_id == Rental.id)
        .where(
            RentalItem.returned.is_(False),
            RentalItem.item_id.is_not(None),
            Rental.status != RentalStatus.RETURNED,
        )
        .group_by(RentalItem.item_id)
    )


async def rented_quantities(item_ids: Optional[Iterable[UUID]] = None, conn: Optional[AsyncSession] = None) -> Dict[UUID, int]:
    """Maps item id -> quantity currently out on rentals. Items with nothing out are absent."""
    stmt = _outstanding_lines_query()
    if item_ids is not None:
        stmt = stmt.where(RentalItem.item_id.in_(list(item_ids)))

    async with in_transaction(conn) as session:
        rows = (await session.execute(stmt)).all()
    return {item_id: int(qty or 0) for item_id, qty in rows}


async def available_quantity(item_id: UUID, conn: Optional[AsyncSession] = None) -> int:
    """
    Recomputes the available stock for one item from the current store state.
    Unknown items have nothing available.
    """
    async with in_transaction(conn) as session:
        item = await session.get(InventoryItem, item_id)
        if item is None:
            return 0
        rented = await rented_quantities([item_id], conn=session)
    return compute_available(item.total_quantity, rented.get(item_id, 0))


async def lock_items(session: AsyncSession, item_ids: Iterable[UUID]) -> Dict[UUID, InventoryItem]:
    """
    Loads the given inventory rows for a stock-changing operation.
    Rows are locked FOR UPDATE where the backend supports it (SQLite ignores the clause).
    """
    ids = list(item_ids)
    if not ids:
        return {}
    result = await session.execute(
        select(InventoryItem).where(InventoryItem.id.in_(ids)).with_for_update()
    )
    return {item.id: item for item in result.scalars().all()}
