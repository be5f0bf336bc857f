import logging
from datetime import date
from decimal import Decimal
from typing import List, Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from rentshop.core.db import in_transaction
from rentshop.core.errors import NotFound, ValidationError
from rentshop.models import Payment, Rental, Sale
from rentshop.services.common import as_money, as_uuid

log = logging.getLogger(__name__)


async def record_payment(
    amount: Decimal,
    date: date,
    rental_id: Optional[UUID] = None,
    sale_id: Optional[UUID] = None,
    note: Optional[str] = None,
    conn: Optional[AsyncSession] = None,
) -> Payment:
    """
    Records money received. A payment belongs to a rental, to a sale, or to neither
    (e.g. a deposit logged by hand), never to both.
    """
    if rental_id is not None and sale_id is not None:
        raise ValidationError("A payment can reference a rental or a sale, not both.", field="sale_id")
    amount = as_money(amount, field="amount")
    if date is None:
        raise ValidationError("date is required.", field="date")

    async with in_transaction(conn) as session:
        if rental_id is not None:
            rental_id = as_uuid(rental_id, field="rental_id")
            if await session.get(Rental, rental_id) is None:
                raise NotFound("Rental", rental_id, field="rental_id")
        if sale_id is not None:
            sale_id = as_uuid(sale_id, field="sale_id")
            if await session.get(Sale, sale_id) is None:
                raise NotFound("Sale", sale_id, field="sale_id")

        payment = Payment(
            rental_id=rental_id,
            sale_id=sale_id,
            amount=amount,
            date=date,
            note=(note or None),
        )
        session.add(payment)
        await session.flush()

    target = f"rental {rental_id}" if rental_id else f"sale {sale_id}" if sale_id else "no reference"
    log.info(f"Payment {payment.id} of {payment.amount} recorded ({target}).")
    return payment


async def get_payment(payment_id: UUID, conn: Optional[AsyncSession] = None) -> Payment:
    async with in_transaction(conn) as session:
        payment = await session.get(Payment, payment_id)
    if payment is None:
        raise NotFound("Payment", payment_id)
    return payment


async def list_payments(
    rental_id: Optional[UUID] = None,
    sale_id: Optional[UUID] = None,
    conn: Optional[AsyncSession] = None,
) -> List[Payment]:
    """Payments, latest date first; narrowed to one rental or sale when given."""
    stmt = select(Payment).order_by(Payment.date.desc(), Payment.created_at.desc())
    if rental_id is not None:
        stmt = stmt.where(Payment.rental_id == rental_id)
    if sale_id is not None:
        stmt = stmt.where(Payment.sale_id == sale_id)

    async with in_transaction(conn) as session:
        result = await session.execute(stmt)
        return list(result.scalars().all())
