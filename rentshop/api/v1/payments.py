import logging
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, HTTPException, status

from rentshop.core.errors import ShopError
from rentshop.schemas.payment import PaymentRequest, PaymentResponse
from rentshop.schemas.response import SuccessResponse
from rentshop.services.payment_service import get_payment, list_payments, record_payment

router = APIRouter()
log = logging.getLogger("uvicorn")


def _payload(payment) -> dict:
    return PaymentResponse.model_validate(payment).model_dump()


@router.post("/", status_code=status.HTTP_201_CREATED, response_model=SuccessResponse)
async def record_payment_endpoint(request_data: PaymentRequest):
    """Records a payment against a rental, a sale, or neither."""
    try:
        payment = await record_payment(**request_data.model_dump())
        return SuccessResponse(data=_payload(payment))
    except ShopError as e:
        log.error(f"Payment rejected: {e}")
        raise
    except Exception as e:
        log.error(f"Error recording payment: {e}")
        raise HTTPException(status_code=500, detail="Server failed to record payment.")


@router.get("/", response_model=SuccessResponse)
async def list_payments_endpoint(rental_id: Optional[UUID] = None, sale_id: Optional[UUID] = None):
    payments = await list_payments(rental_id=rental_id, sale_id=sale_id)
    return SuccessResponse(data=[_payload(p) for p in payments])


@router.get("/{payment_id}", response_model=SuccessResponse)
async def get_payment_endpoint(payment_id: UUID):
    payment = await get_payment(payment_id)
    return SuccessResponse(data=_payload(payment))
