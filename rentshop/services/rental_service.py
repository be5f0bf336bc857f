import logging
import math
from collections import OrderedDict
from datetime import date, datetime
from decimal import Decimal
from typing import Dict, Iterable, List, Optional, Sequence
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from rentshop.core.db import in_transaction
from rentshop.core.errors import EmptyOperation, InsufficientStock, NotFound, ValidationError
from rentshop.models import Customer, Payment, Rental, RentalItem, RentalStatus
from rentshop.models.base import utcnow
from rentshop.services.common import MONEY_PLACES, as_quantity, as_uuid, today as _today
from rentshop.services.stock_service import compute_available, lock_items, rented_quantities

log = logging.getLogger(__name__)


# ----------- Pure lifecycle rules -----------

def rental_duration_days(rent_date: date, expected_return_date: date) -> int:
    """Whole days billed for a rental: partial days round up, minimum one day."""
    delta = expected_return_date - rent_date
    return max(1, math.ceil(delta.total_seconds() / 86400))


def compute_rental_total(lines: Iterable[RentalItem], duration_days: int) -> Decimal:
    total = sum(
        (Decimal(line.daily_rent_price) * line.quantity * duration_days for line in lines),
        Decimal("0"),
    )
    return total.quantize(MONEY_PLACES)


def derive_status(rental: Rental, on_date: date) -> RentalStatus:
    """Status as of `on_date`: anything still open past its expected return date is Overdue."""
    if rental.status != RentalStatus.RETURNED and on_date > rental.expected_return_date:
        return RentalStatus.OVERDUE
    return rental.status


def status_after_return(current: RentalStatus, lines: Sequence[RentalItem]) -> RentalStatus:
    """
    Status once some lines have been handed back.
    Only an Active rental moves to Partial Return; an Overdue one stays Overdue until everything is back.
    """
    if lines and all(line.returned for line in lines):
        return RentalStatus.RETURNED
    if current == RentalStatus.ACTIVE and any(line.returned for line in lines):
        return RentalStatus.PARTIAL
    return current


async def refresh_overdue(session: AsyncSession, rentals: Iterable[Rental], on_date: Optional[date] = None) -> None:
    """Persists the Overdue transition for every rental read through the service."""
    on_date = on_date or _today()
    changed = False
    for rental in rentals:
        status = derive_status(rental, on_date)
        if status != rental.status:
            log.info(f"Rental {rental.id} is overdue (expected back {rental.expected_return_date}).")
            rental.status = status
            changed = True
    if changed:
        await session.flush()


def _requested_quantities(items: List[Dict]) -> "OrderedDict[UUID, int]":
    """Validates line input and sums quantities per item, keeping first-seen order."""
    requested: "OrderedDict[UUID, int]" = OrderedDict()
    for pos, it in enumerate(items):
        item_id = as_uuid(it.get("item_id"), field=f"items[{pos}].item_id")
        qty = as_quantity(it.get("quantity"), field=f"items[{pos}].quantity")
        requested[item_id] = requested.get(item_id, 0) + qty
    return requested


# ----------- Service operations -----------

async def create_rental(
    customer_id: UUID,
    rent_date: date,
    expected_return_date: date,
    items: List[Dict],
    notes: Optional[str] = None,
    conn: Optional[AsyncSession] = None,
) -> Rental:
    """
    Issues equipment to a customer.

    Every check (customer, items, dates, stock) runs before anything is written;
    the rental, its lines and the rate snapshots are then stored in one transaction.

    Raises EmptyOperation, NotFound (customer or item) and InsufficientStock. On top
    of those, an expected return date before the rent date raises ValidationError
    rather than being billed as a one-day rental.
    """
    if not items:
        raise EmptyOperation("Rental must contain at least one item.", field="items")
    if expected_return_date < rent_date:
        raise ValidationError("Expected return date cannot be before the rent date.", field="expected_return_date")

    requested = _requested_quantities(items)
    customer_id = as_uuid(customer_id, field="customer_id")

    async with in_transaction(conn) as session:
        customer = await session.get(Customer, customer_id)
        if customer is None:
            raise NotFound("Customer", customer_id, field="customer_id")

        inventory = await lock_items(session, requested.keys())
        rented = await rented_quantities(requested.keys(), conn=session)

        for item_id, qty in requested.items():
            item = inventory.get(item_id)
            if item is None:
                raise NotFound("Inventory item", item_id, field="items")
            available = compute_available(item.total_quantity, rented.get(item_id, 0))
            if qty > available:
                log.warning(f"Rental rejected: {item.name} requested {qty}, available {available}.")
                raise InsufficientStock(item.name, qty, available, item_id=item_id)

        lines = []
        for pos, it in enumerate(items):
            item = inventory[as_uuid(it["item_id"], field=f"items[{pos}].item_id")]
            lines.append(RentalItem(
                position=pos,
                item_id=item.id,
                item_name=item.name,
                quantity=int(it["quantity"]),
                daily_rent_price=Decimal(item.daily_rent_price),
                returned=False,
            ))

        duration = rental_duration_days(rent_date, expected_return_date)
        rental = Rental(
            customer_id=customer.id,
            customer_name=customer.name,
            rent_date=rent_date,
            expected_return_date=expected_return_date,
            status=RentalStatus.ACTIVE,
            total_amount=compute_rental_total(lines, duration),
            notes=notes,
            items=lines,
        )
        session.add(rental)
        await session.flush()

    log.info(f"Rental {rental.id} created for {rental.customer_name}: {duration} day(s), total {rental.total_amount}.")
    return rental


async def get_rental(rental_id: UUID, on_date: Optional[date] = None, conn: Optional[AsyncSession] = None) -> Rental:
    async with in_transaction(conn) as session:
        rental = await session.get(Rental, rental_id)
        if rental is None:
            raise NotFound("Rental", rental_id)
        await refresh_overdue(session, [rental], on_date)
    return rental


async def list_rentals(
    status: Optional[RentalStatus] = None,
    on_date: Optional[date] = None,
    conn: Optional[AsyncSession] = None,
) -> List[Rental]:
    """All rentals, newest first, optionally narrowed to one (refreshed) status."""
    async with in_transaction(conn) as session:
        result = await session.execute(select(Rental).order_by(Rental.created_at.desc()))
        rentals = list(result.scalars().all())
        await refresh_overdue(session, rentals, on_date)

    if status is not None:
        rentals = [r for r in rentals if r.status == status]
    return rentals


async def return_rental_items(
    rental_id: UUID,
    item_ids: List,
    on_date: Optional[date] = None,
    returned_at: Optional[datetime] = None,
    conn: Optional[AsyncSession] = None,
) -> Rental:
    """Marks the rental lines for `item_ids` as returned and moves the rental status forward."""
    wanted = {as_uuid(i, field="item_ids") for i in item_ids}

    async with in_transaction(conn) as session:
        rental = await session.get(Rental, rental_id)
        if rental is None:
            log.warning(f"Return rejected: rental {rental_id} does not exist.")
            raise NotFound("Rental", rental_id)

        unknown = wanted - {line.item_id for line in rental.items}
        if unknown:
            raise ValidationError(
                f"Items not part of rental {rental.id}: {', '.join(sorted(str(u) for u in unknown))}",
                field="item_ids",
            )

        await refresh_overdue(session, [rental], on_date)
        if rental.status == RentalStatus.RETURNED:
            return rental

        returned_at = returned_at or utcnow()
        newly_returned = 0
        for line in rental.items:
            if line.item_id in wanted and not line.returned:
                line.returned = True
                line.returned_date = returned_at
                newly_returned += 1

        previous = rental.status
        rental.status = status_after_return(previous, rental.items)
        await session.flush()

    log.info(f"Rental {rental.id}: {newly_returned} line(s) returned, status {previous.value} -> {rental.status.value}.")
    return rental


async def rental_balance(rental_id: UUID, on_date: Optional[date] = None, conn: Optional[AsyncSession] = None) -> Dict:
    """Total billed, paid so far and the remaining due for one rental, with its payments."""
    async with in_transaction(conn) as session:
        rental = await get_rental(rental_id, on_date=on_date, conn=session)
        result = await session.execute(
            select(Payment).where(Payment.rental_id == rental.id).order_by(Payment.date, Payment.created_at)
        )
        payments = list(result.scalars().all())

    paid = sum((Decimal(p.amount) for p in payments), Decimal("0"))
    total = Decimal(rental.total_amount)
    return {
        "rental": rental,
        "total_amount": total,
        "paid_amount": paid,
        "due_amount": max(Decimal("0"), total - paid),
        "payments": payments,
    }
