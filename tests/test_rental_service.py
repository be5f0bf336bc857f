from datetime import date, timedelta
from decimal import Decimal
from uuid import uuid4

import pytest

from rentshop.core.errors import EmptyOperation, InsufficientStock, NotFound, ValidationError
from rentshop.models import Rental, RentalItem, RentalStatus
from rentshop.services.inventory_service import update_item
from rentshop.services.payment_service import record_payment
from rentshop.services.rental_service import (
    create_rental,
    derive_status,
    get_rental,
    list_rentals,
    rental_balance,
    rental_duration_days,
    return_rental_items,
    status_after_return,
)
from rentshop.services.stock_service import available_quantity

TODAY = date.today()


# --- PURE LIFECYCLE RULES ---

def test_duration_counts_whole_days():
    assert rental_duration_days(date(2026, 3, 1), date(2026, 3, 4)) == 3


def test_same_day_rental_is_billed_one_day():
    assert rental_duration_days(date(2026, 3, 1), date(2026, 3, 1)) == 1


def test_derive_status_marks_open_rentals_overdue_after_expected_date():
    rental = Rental(status=RentalStatus.PARTIAL, expected_return_date=date(2026, 3, 4))

    assert derive_status(rental, date(2026, 3, 4)) == RentalStatus.PARTIAL
    assert derive_status(rental, date(2026, 3, 5)) == RentalStatus.OVERDUE

    rental.status = RentalStatus.RETURNED
    assert derive_status(rental, date(2026, 3, 5)) == RentalStatus.RETURNED


def test_status_after_return_rules():
    back = RentalItem(returned=True)
    out = RentalItem(returned=False)

    assert status_after_return(RentalStatus.ACTIVE, [back, back]) == RentalStatus.RETURNED
    assert status_after_return(RentalStatus.ACTIVE, [back, out]) == RentalStatus.PARTIAL
    assert status_after_return(RentalStatus.ACTIVE, [out, out]) == RentalStatus.ACTIVE
    # Overdue rentals stay overdue until everything is back
    assert status_after_return(RentalStatus.OVERDUE, [back, out]) == RentalStatus.OVERDUE
    assert status_after_return(RentalStatus.OVERDUE, [back, back]) == RentalStatus.RETURNED


# --- CREATION ---

@pytest.mark.asyncio
async def test_rental_total_is_rate_times_quantity_times_days(db, make_customer, make_item):
    customer = await make_customer()
    item_a = await make_item(name="Item A", daily_rent_price="100", total_quantity=5)
    item_b = await make_item(name="Item B", daily_rent_price="50", total_quantity=5)

    rental = await create_rental(
        customer_id=customer.id,
        rent_date=TODAY,
        expected_return_date=TODAY + timedelta(days=3),
        items=[
            {"item_id": item_a.id, "quantity": 2},
            {"item_id": item_b.id, "quantity": 1},
        ],
    )

    assert rental.total_amount == Decimal("750")
    assert rental.status == RentalStatus.ACTIVE
    assert rental.customer_name == "John Doe"
    assert [line.item_name for line in rental.items] == ["Item A", "Item B"]
    assert all(not line.returned for line in rental.items)


@pytest.mark.asyncio
async def test_same_day_rental_charges_one_day(db, make_customer, make_item):
    customer = await make_customer()
    item = await make_item(daily_rent_price="500", total_quantity=3)

    rental = await create_rental(customer.id, TODAY, TODAY, [{"item_id": str(item.id), "quantity": 2}])

    assert rental.total_amount == Decimal("1000")


@pytest.mark.asyncio
async def test_create_rental_rejects_empty_item_list(db, make_customer):
    customer = await make_customer()

    with pytest.raises(EmptyOperation):
        await create_rental(customer.id, TODAY, TODAY, [])


@pytest.mark.asyncio
async def test_create_rental_rejects_unknown_customer(db, make_item):
    item = await make_item()

    with pytest.raises(NotFound) as excinfo:
        await create_rental(uuid4(), TODAY, TODAY, [{"item_id": item.id, "quantity": 1}])

    assert excinfo.value.field == "customer_id"


@pytest.mark.asyncio
async def test_create_rental_rejects_return_date_before_rent_date(db, make_customer, make_item):
    customer = await make_customer()
    item = await make_item()

    with pytest.raises(ValidationError):
        await create_rental(customer.id, TODAY, TODAY - timedelta(days=1), [{"item_id": item.id, "quantity": 1}])


@pytest.mark.asyncio
async def test_create_rental_rejects_more_than_available(db, make_customer, make_item):
    customer = await make_customer()
    item = await make_item(name="Projector 4K", total_quantity=2)
    await create_rental(customer.id, TODAY, TODAY, [{"item_id": item.id, "quantity": 1}])

    with pytest.raises(InsufficientStock) as excinfo:
        # Two lines of the same item are counted together
        await create_rental(customer.id, TODAY, TODAY, [
            {"item_id": item.id, "quantity": 1},
            {"item_id": item.id, "quantity": 1},
        ])

    assert excinfo.value.item_name == "Projector 4K"
    assert excinfo.value.available == 1
    assert len(await list_rentals()) == 1


@pytest.mark.asyncio
async def test_rental_keeps_rate_snapshot_after_price_change(db, make_customer, make_item):
    customer = await make_customer()
    item = await make_item(daily_rent_price="100", total_quantity=5)
    rental = await create_rental(customer.id, TODAY, TODAY + timedelta(days=2), [{"item_id": item.id, "quantity": 1}])

    await update_item(item.id, {"daily_rent_price": "999", "name": "Renamed"})
    reloaded = await get_rental(rental.id)

    assert reloaded.total_amount == Decimal("200")
    assert reloaded.items[0].daily_rent_price == Decimal("100")
    assert reloaded.items[0].item_name == "LED Par Light"


@pytest.mark.asyncio
async def test_reload_preserves_fields_and_line_order(db, make_customer, make_item):
    customer = await make_customer()
    items = [await make_item(name=f"Item {n}", total_quantity=5) for n in "CAB"]
    rental = await create_rental(
        customer.id, TODAY, TODAY + timedelta(days=1),
        [{"item_id": i.id, "quantity": q} for i, q in zip(items, (3, 1, 2))],
        notes="Wedding stage",
    )

    reloaded = await get_rental(rental.id)

    assert reloaded is not rental
    assert [(l.item_name, l.quantity) for l in reloaded.items] == [("Item C", 3), ("Item A", 1), ("Item B", 2)]
    assert reloaded.notes == "Wedding stage"
    assert reloaded.rent_date == rental.rent_date
    assert reloaded.expected_return_date == rental.expected_return_date
    assert reloaded.total_amount == rental.total_amount
    assert reloaded.customer_id == customer.id


# --- RETURNS ---

@pytest.mark.asyncio
async def test_returning_all_lines_closes_rental_and_frees_stock(db, make_customer, make_item):
    customer = await make_customer()
    item_a = await make_item(name="Item A", total_quantity=4)
    item_b = await make_item(name="Item B", total_quantity=4)
    rental = await create_rental(customer.id, TODAY, TODAY + timedelta(days=1), [
        {"item_id": item_a.id, "quantity": 3},
        {"item_id": item_b.id, "quantity": 1},
    ])
    assert await available_quantity(item_a.id) == 1

    returned = await return_rental_items(rental.id, [item_a.id, item_b.id])

    assert returned.status == RentalStatus.RETURNED
    assert all(line.returned and line.returned_date is not None for line in returned.items)
    assert await available_quantity(item_a.id) == 4


@pytest.mark.asyncio
async def test_returning_subset_moves_active_rental_to_partial(db, make_customer, make_item):
    customer = await make_customer()
    item_a = await make_item(name="Item A", total_quantity=4)
    item_b = await make_item(name="Item B", total_quantity=4)
    rental = await create_rental(customer.id, TODAY, TODAY + timedelta(days=1), [
        {"item_id": item_a.id, "quantity": 2},
        {"item_id": item_b.id, "quantity": 2},
    ])

    partial = await return_rental_items(rental.id, [item_a.id])

    assert partial.status == RentalStatus.PARTIAL
    assert await available_quantity(item_a.id) == 4
    assert await available_quantity(item_b.id) == 2

    done = await return_rental_items(rental.id, [item_b.id])
    assert done.status == RentalStatus.RETURNED


@pytest.mark.asyncio
async def test_returning_nothing_leaves_status_unchanged(db, make_customer, make_item):
    customer = await make_customer()
    item = await make_item()
    rental = await create_rental(customer.id, TODAY, TODAY + timedelta(days=1), [{"item_id": item.id, "quantity": 1}])

    unchanged = await return_rental_items(rental.id, [])

    assert unchanged.status == RentalStatus.ACTIVE


@pytest.mark.asyncio
async def test_return_on_unknown_rental_is_not_found(db):
    with pytest.raises(NotFound):
        await return_rental_items(uuid4(), [uuid4()])


@pytest.mark.asyncio
async def test_return_rejects_items_not_on_rental(db, make_customer, make_item):
    customer = await make_customer()
    item = await make_item()
    other = await make_item(name="Other")
    rental = await create_rental(customer.id, TODAY, TODAY + timedelta(days=1), [{"item_id": item.id, "quantity": 1}])

    with pytest.raises(ValidationError):
        await return_rental_items(rental.id, [other.id])

    assert (await get_rental(rental.id)).status == RentalStatus.ACTIVE


# --- OVERDUE ---

@pytest.mark.asyncio
async def test_overdue_status_is_persisted_on_read(db, make_customer, make_item):
    customer = await make_customer()
    item = await make_item()
    rental = await create_rental(customer.id, TODAY, TODAY + timedelta(days=2), [{"item_id": item.id, "quantity": 1}])

    later = TODAY + timedelta(days=3)
    assert (await get_rental(rental.id, on_date=later)).status == RentalStatus.OVERDUE

    # Read again "before" the due date: the stored value is already Overdue
    assert (await get_rental(rental.id, on_date=TODAY)).status == RentalStatus.OVERDUE
    overdue = await list_rentals(status=RentalStatus.OVERDUE, on_date=TODAY)
    assert [r.id for r in overdue] == [rental.id]


@pytest.mark.asyncio
async def test_overdue_rental_stays_overdue_on_partial_return(db, make_customer, make_item):
    customer = await make_customer()
    item_a = await make_item(name="Item A")
    item_b = await make_item(name="Item B")
    rental = await create_rental(customer.id, TODAY, TODAY + timedelta(days=1), [
        {"item_id": item_a.id, "quantity": 1},
        {"item_id": item_b.id, "quantity": 1},
    ])
    later = TODAY + timedelta(days=5)

    partial = await return_rental_items(rental.id, [item_a.id], on_date=later)
    assert partial.status == RentalStatus.OVERDUE

    done = await return_rental_items(rental.id, [item_b.id], on_date=later)
    assert done.status == RentalStatus.RETURNED
    assert (await get_rental(done.id, on_date=later + timedelta(days=10))).status == RentalStatus.RETURNED


# --- BALANCE ---

@pytest.mark.asyncio
async def test_rental_balance_tracks_payments(db, make_customer, make_item):
    customer = await make_customer()
    item = await make_item(daily_rent_price="250")
    rental = await create_rental(customer.id, TODAY, TODAY + timedelta(days=2), [{"item_id": item.id, "quantity": 2}])
    await record_payment(amount="400", date=TODAY, rental_id=rental.id, note="Advance")

    balance = await rental_balance(rental.id)

    assert balance["total_amount"] == Decimal("1000")
    assert balance["paid_amount"] == Decimal("400")
    assert balance["due_amount"] == Decimal("600")
    assert [p.note for p in balance["payments"]] == ["Advance"]
