import logging
from collections import OrderedDict
from datetime import date
from decimal import Decimal
from typing import Dict, List, Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from rentshop.core.config import SALE_PAYMENT_NOTE, WALK_IN_CUSTOMER_NAME
from rentshop.core.db import in_transaction
from rentshop.core.errors import EmptyOperation, InsufficientStock, NotFound, ValidationError
from rentshop.models import Customer, Sale, SaleItem
from rentshop.services.common import MONEY_PLACES, as_money, as_quantity, as_uuid
from rentshop.services.payment_service import record_payment
from rentshop.services.stock_service import compute_available, lock_items, rented_quantities

log = logging.getLogger(__name__)


async def create_sale(
    items: List[Dict],
    date: date,
    customer_id: Optional[UUID] = None,
    customer_name: Optional[str] = None,
    conn: Optional[AsyncSession] = None,
) -> Sale:
    """
    Point-of-sale transaction.

    All lines are validated against available stock (owned minus rented out) first;
    only then is stock permanently reduced, the sale written and a full payment recorded.
    A failure on any line leaves inventory and records untouched.
    """
    if not items:
        raise EmptyOperation("Sale must contain at least one item.", field="items")

    lines = []
    requested: "OrderedDict[UUID, int]" = OrderedDict()
    for pos, it in enumerate(items):
        item_id = as_uuid(it.get("item_id"), field=f"items[{pos}].item_id")
        qty = as_quantity(it.get("quantity"), field=f"items[{pos}].quantity")
        price = it.get("price")
        price = as_money(price, field=f"items[{pos}].price") if price is not None else None
        lines.append((item_id, qty, price))
        requested[item_id] = requested.get(item_id, 0) + qty

    async with in_transaction(conn) as session:
        customer = None
        if customer_id is not None:
            customer_id = as_uuid(customer_id, field="customer_id")
            customer = await session.get(Customer, customer_id)
            if customer is None:
                raise NotFound("Customer", customer_id, field="customer_id")
        name = (customer_name or "").strip() or (customer.name if customer else WALK_IN_CUSTOMER_NAME)

        inventory = await lock_items(session, requested.keys())
        rented = await rented_quantities(requested.keys(), conn=session)

        # 1. Validate every line before touching stock
        for item_id, qty in requested.items():
            item = inventory.get(item_id)
            if item is None:
                raise NotFound("Inventory item", item_id, field="items")
            available = compute_available(item.total_quantity, rented.get(item_id, 0))
            if qty > available:
                log.warning(f"Sale rejected: {item.name} requested {qty}, available {available}.")
                raise InsufficientStock(item.name, qty, available, item_id=item_id)

        sale_items = []
        for pos, (item_id, qty, price) in enumerate(lines):
            item = inventory[item_id]
            unit_price = price if price is not None else item.selling_price
            if unit_price is None:
                raise ValidationError(
                    f"No price given for {item.name} and it has no selling price.",
                    field=f"items[{pos}].price",
                )
            unit_price = Decimal(unit_price).quantize(MONEY_PLACES)
            sale_items.append(SaleItem(
                position=pos,
                item_id=item.id,
                item_name=item.name,
                quantity=qty,
                unit_price=unit_price,
                total=(unit_price * qty).quantize(MONEY_PLACES),
            ))

        # 2. Permanently reduce owned stock
        for item_id, qty in requested.items():
            inventory[item_id].total_quantity -= qty

        # 3. Sale record with snapshotted lines
        total = sum((line.total for line in sale_items), Decimal("0"))
        sale = Sale(
            customer_id=customer.id if customer else None,
            customer_name=name,
            date=date,
            total_amount=total,
            items=sale_items,
        )
        session.add(sale)
        await session.flush()

        # 4. Sales are settled on the spot
        await record_payment(amount=total, date=date, sale_id=sale.id, note=SALE_PAYMENT_NOTE, conn=session)

    log.info(f"Sale {sale.id} recorded for {sale.customer_name}: {len(sale_items)} line(s), total {sale.total_amount}.")
    return sale


async def get_sale(sale_id: UUID, conn: Optional[AsyncSession] = None) -> Sale:
    async with in_transaction(conn) as session:
        sale = await session.get(Sale, sale_id)
    if sale is None:
        raise NotFound("Sale", sale_id)
    return sale


async def list_sales(conn: Optional[AsyncSession] = None) -> List[Sale]:
    async with in_transaction(conn) as session:
        result = await session.execute(select(Sale).order_by(Sale.date.desc(), Sale.created_at.desc()))
        return list(result.scalars().all())
