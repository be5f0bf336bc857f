import uuid
import datetime as dt
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class SaleItemRequest(BaseModel):
    item_id: uuid.UUID
    quantity: int = Field(..., ge=1)
    price: Optional[Decimal] = Field(None, ge=0, description="Unit price; defaults to the item's selling price.")


class SaleRequest(BaseModel):
    customer_id: Optional[uuid.UUID] = None
    customer_name: Optional[str] = Field(None, max_length=255, description="Defaults to the customer's name or a walk-in label.")
    date: dt.date
    items: List[SaleItemRequest]


class SaleItemResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    item_id: Optional[uuid.UUID] = None
    item_name: str
    quantity: int
    unit_price: Decimal
    total: Decimal


class SaleResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    customer_id: Optional[uuid.UUID] = None
    customer_name: str
    items: List[SaleItemResponse]
    total_amount: Decimal
    date: dt.date
    created_at: dt.datetime
