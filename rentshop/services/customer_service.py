import logging
from typing import Any, Dict, List, Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from rentshop.core.db import in_transaction
from rentshop.core.errors import NotFound
from rentshop.models import Customer
from rentshop.services.common import require_text

log = logging.getLogger(__name__)

_UPDATABLE = ("name", "phone", "address", "nid", "photo_url")


async def create_customer(
    name: str,
    phone: str,
    address: Optional[str] = None,
    nid: Optional[str] = None,
    photo_url: Optional[str] = None,
    conn: Optional[AsyncSession] = None,
) -> Customer:
    customer = Customer(
        name=require_text(name, "name"),
        phone=require_text(phone, "phone"),
        address=address,
        nid=nid,
        photo_url=photo_url,
    )
    async with in_transaction(conn) as session:
        session.add(customer)
        await session.flush()
    log.info(f"Customer {customer.id} ({customer.name}) created.")
    return customer


async def get_customer(customer_id: UUID, conn: Optional[AsyncSession] = None) -> Customer:
    async with in_transaction(conn) as session:
        customer = await session.get(Customer, customer_id)
    if customer is None:
        raise NotFound("Customer", customer_id)
    return customer


async def list_customers(conn: Optional[AsyncSession] = None) -> List[Customer]:
    """Newest customers first."""
    async with in_transaction(conn) as session:
        result = await session.execute(select(Customer).order_by(Customer.created_at.desc()))
        return list(result.scalars().all())


async def update_customer(customer_id: UUID, changes: Dict[str, Any], conn: Optional[AsyncSession] = None) -> Customer:
    """Applies a partial update; the id and creation time never change."""
    async with in_transaction(conn) as session:
        customer = await session.get(Customer, customer_id)
        if customer is None:
            raise NotFound("Customer", customer_id)
        for field in _UPDATABLE:
            if field not in changes:
                continue
            value = changes[field]
            if field in ("name", "phone"):
                value = require_text(value, field)
            setattr(customer, field, value)
        await session.flush()
    return customer


async def delete_customer(customer_id: UUID, conn: Optional[AsyncSession] = None) -> None:
    """
    Removes the customer. Their rentals and sales stay on record: the foreign key is
    cleared by the database and the snapshotted customer name remains.
    """
    async with in_transaction(conn) as session:
        customer = await session.get(Customer, customer_id)
        if customer is None:
            raise NotFound("Customer", customer_id)
        await session.delete(customer)
    log.info(f"Customer {customer_id} deleted.")
