import logging
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, HTTPException, Query, status

from rentshop.core.errors import ShopError
from rentshop.models.rental import RentalStatus
from rentshop.schemas.payment import PaymentResponse
from rentshop.schemas.rental import RentalBalanceResponse, RentalRequest, RentalResponse, RentalReturnRequest
from rentshop.schemas.response import SuccessResponse
from rentshop.services.rental_service import (
    create_rental,
    get_rental,
    list_rentals,
    rental_balance,
    return_rental_items,
)

router = APIRouter()
log = logging.getLogger("uvicorn")


def _payload(rental) -> dict:
    return RentalResponse.model_validate(rental).model_dump()


@router.post("/", status_code=status.HTTP_201_CREATED, response_model=SuccessResponse)
async def create_rental_endpoint(request_data: RentalRequest):
    """
    Issues equipment to a customer. The total is fixed now from the current daily
    rates and the number of days until the expected return date.
    """
    try:
        items_data = [
            {"item_id": item.item_id, "quantity": item.quantity}
            for item in request_data.items
        ]
        rental = await create_rental(
            customer_id=request_data.customer_id,
            rent_date=request_data.rent_date,
            expected_return_date=request_data.expected_return_date,
            items=items_data,
            notes=request_data.notes,
        )
        log.info(f"Rental {rental.id} issued to {rental.customer_name}.")
        return SuccessResponse(data=_payload(rental))
    except ShopError as e:
        log.error(f"Rental rejected: {e}")
        raise
    except Exception as e:
        log.error(f"Error creating rental: {e}")
        raise HTTPException(status_code=500, detail="Server failed to create rental.")


@router.get("/", response_model=SuccessResponse)
async def list_rentals_endpoint(
    status_filter: Optional[str] = Query(None, alias="status", description="all, Active, Overdue, Returned or Partial Return"),
):
    """Lists rentals, newest first. Overdue status is refreshed before filtering."""
    wanted = None
    if status_filter and status_filter.lower() != "all":
        # "Partial" is accepted as shorthand for "Partial Return"
        aliases = {s.value.lower(): s for s in RentalStatus}
        aliases["partial"] = RentalStatus.PARTIAL
        wanted = aliases.get(status_filter.lower())
        if wanted is None:
            raise HTTPException(status_code=400, detail=f"Unknown rental status: {status_filter}")
    rentals = await list_rentals(status=wanted)
    return SuccessResponse(data=[_payload(r) for r in rentals])


@router.get("/{rental_id}", response_model=SuccessResponse)
async def get_rental_endpoint(rental_id: UUID):
    rental = await get_rental(rental_id)
    return SuccessResponse(data=_payload(rental))


@router.post("/{rental_id}/return", response_model=SuccessResponse)
async def return_items_endpoint(rental_id: UUID, payload: RentalReturnRequest):
    """Marks the given items as returned and advances the rental status."""
    try:
        rental = await return_rental_items(rental_id, payload.item_ids)
        return SuccessResponse(data=_payload(rental))
    except ShopError as e:
        log.error(f"Return rejected for rental {rental_id}: {e}")
        raise
    except Exception as e:
        log.error(f"Error returning items for rental {rental_id}: {e}")
        raise HTTPException(status_code=500, detail="Server failed to process the return.")


@router.get("/{rental_id}/balance", response_model=SuccessResponse)
async def rental_balance_endpoint(rental_id: UUID):
    """Total billed, paid so far and remaining due for a rental."""
    balance = await rental_balance(rental_id)
    data = RentalBalanceResponse(
        rental_id=balance["rental"].id,
        status=balance["rental"].status,
        total_amount=balance["total_amount"],
        paid_amount=balance["paid_amount"],
        due_amount=balance["due_amount"],
        payments=[PaymentResponse.model_validate(p) for p in balance["payments"]],
    ).model_dump()
    return SuccessResponse(data=data)
