from datetime import date, timedelta
from decimal import Decimal
from uuid import uuid4

import pytest

from rentshop.core.errors import NotFound, ValidationError
from rentshop.services.payment_service import get_payment, list_payments, record_payment
from rentshop.services.rental_service import create_rental
from rentshop.services.sale_service import create_sale

TODAY = date.today()


@pytest.mark.asyncio
async def test_payment_against_rental(db, make_customer, make_item):
    customer = await make_customer()
    item = await make_item()
    rental = await create_rental(customer.id, TODAY, TODAY, [{"item_id": item.id, "quantity": 1}])

    payment = await record_payment(amount=Decimal("50.5"), date=TODAY, rental_id=rental.id, note="Deposit")

    fetched = await get_payment(payment.id)
    assert fetched.amount == Decimal("50.50")
    assert fetched.rental_id == rental.id
    assert fetched.sale_id is None
    assert [p.id for p in await list_payments(rental_id=rental.id)] == [payment.id]


@pytest.mark.asyncio
async def test_unreferenced_payment_is_allowed(db):
    payment = await record_payment(amount="0", date=TODAY)

    assert payment.rental_id is None and payment.sale_id is None
    assert payment.amount == Decimal("0")


@pytest.mark.asyncio
async def test_payment_cannot_reference_rental_and_sale(db, make_customer, make_item):
    customer = await make_customer()
    item = await make_item()
    rental = await create_rental(customer.id, TODAY, TODAY, [{"item_id": item.id, "quantity": 1}])
    sale = await create_sale(items=[{"item_id": item.id, "quantity": 1, "price": "10"}], date=TODAY)

    with pytest.raises(ValidationError):
        await record_payment(amount="10", date=TODAY, rental_id=rental.id, sale_id=sale.id)


@pytest.mark.asyncio
async def test_payment_rejects_negative_amount(db):
    with pytest.raises(ValidationError) as excinfo:
        await record_payment(amount="-1", date=TODAY)

    assert excinfo.value.field == "amount"


@pytest.mark.asyncio
async def test_payment_for_unknown_rental_or_sale(db):
    with pytest.raises(NotFound):
        await record_payment(amount="10", date=TODAY, rental_id=uuid4())
    with pytest.raises(NotFound):
        await record_payment(amount="10", date=TODAY, sale_id=uuid4())
    with pytest.raises(NotFound):
        await get_payment(uuid4())


@pytest.mark.asyncio
async def test_payments_listed_latest_date_first(db):
    older = await record_payment(amount="1", date=TODAY - timedelta(days=2))
    newer = await record_payment(amount="2", date=TODAY)

    assert [p.id for p in await list_payments()] == [newer.id, older.id]
