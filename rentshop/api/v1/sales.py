import logging
from uuid import UUID

from fastapi import APIRouter, HTTPException, status

from rentshop.core.errors import ShopError
from rentshop.schemas.response import SuccessResponse
from rentshop.schemas.sale import SaleRequest, SaleResponse
from rentshop.services.sale_service import create_sale, get_sale, list_sales

router = APIRouter()
log = logging.getLogger("uvicorn")


def _payload(sale) -> dict:
    return SaleResponse.model_validate(sale).model_dump()


@router.post("/", status_code=status.HTTP_201_CREATED, response_model=SuccessResponse)
async def create_sale_endpoint(request_data: SaleRequest):
    """
    Sells items from stock. Either every line is sold and paid in full, or the
    request is rejected and nothing changes.
    """
    try:
        items_data = [
            {"item_id": item.item_id, "quantity": item.quantity, "price": item.price}
            for item in request_data.items
        ]
        sale = await create_sale(
            items=items_data,
            date=request_data.date,
            customer_id=request_data.customer_id,
            customer_name=request_data.customer_name,
        )
        log.info(f"Sale {sale.id} completed for {sale.customer_name}.")
        return SuccessResponse(data=_payload(sale))
    except ShopError as e:
        log.error(f"Sale rejected: {e}")
        raise
    except Exception as e:
        log.error(f"Error creating sale: {e}")
        raise HTTPException(status_code=500, detail="Server failed to record sale.")


@router.get("/", response_model=SuccessResponse)
async def list_sales_endpoint():
    sales = await list_sales()
    return SuccessResponse(data=[_payload(s) for s in sales])


@router.get("/{sale_id}", response_model=SuccessResponse)
async def get_sale_endpoint(sale_id: UUID):
    sale = await get_sale(sale_id)
    return SuccessResponse(data=_payload(sale))
