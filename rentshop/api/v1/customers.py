import logging
from uuid import UUID

from fastapi import APIRouter, HTTPException, status

from rentshop.core.errors import ShopError
from rentshop.schemas.customer import CustomerRequest, CustomerResponse, CustomerUpdate
from rentshop.schemas.response import SuccessResponse
from rentshop.services.customer_service import (
    create_customer,
    delete_customer,
    get_customer,
    list_customers,
    update_customer,
)

router = APIRouter()
log = logging.getLogger("uvicorn")


def _payload(customer) -> dict:
    return CustomerResponse.model_validate(customer).model_dump()


@router.get("/", response_model=SuccessResponse)
async def list_customers_endpoint():
    """Lists customers, newest first."""
    customers = await list_customers()
    return SuccessResponse(data=[_payload(c) for c in customers])


@router.post("/", status_code=status.HTTP_201_CREATED, response_model=SuccessResponse)
async def create_customer_endpoint(request_data: CustomerRequest):
    try:
        customer = await create_customer(**request_data.model_dump())
        return SuccessResponse(data=_payload(customer))
    except ShopError as e:
        log.error(f"Customer rejected: {e}")
        raise
    except Exception as e:
        log.error(f"Error creating customer: {e}")
        raise HTTPException(status_code=500, detail="Server failed to create customer.")


@router.get("/{customer_id}", response_model=SuccessResponse)
async def get_customer_endpoint(customer_id: UUID):
    customer = await get_customer(customer_id)
    return SuccessResponse(data=_payload(customer))


@router.patch("/{customer_id}", response_model=SuccessResponse)
async def update_customer_endpoint(customer_id: UUID, payload: CustomerUpdate):
    """Updates only the fields present in the request body."""
    try:
        customer = await update_customer(customer_id, payload.model_dump(exclude_unset=True))
        return SuccessResponse(data=_payload(customer))
    except ShopError as e:
        log.error(f"Customer update rejected: {e}")
        raise
    except Exception as e:
        log.error(f"Error updating customer {customer_id}: {e}")
        raise HTTPException(status_code=500, detail="Server failed to update customer.")


@router.delete("/{customer_id}", response_model=SuccessResponse)
async def delete_customer_endpoint(customer_id: UUID):
    """Deletes a customer; their rentals and sales keep the recorded name."""
    await delete_customer(customer_id)
    return SuccessResponse(data={"id": str(customer_id), "deleted": True})
