import uuid
from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from rentshop.models.rental import RentalStatus
from rentshop.schemas.payment import PaymentResponse


class RentalItemRequest(BaseModel):
    """Schema for a single item in the rental request."""
    item_id: uuid.UUID
    quantity: int = Field(..., ge=1)


class RentalRequest(BaseModel):
    """Schema for issuing a rental."""
    customer_id: uuid.UUID
    rent_date: date
    expected_return_date: date
    items: List[RentalItemRequest]
    notes: Optional[str] = None


class RentalReturnRequest(BaseModel):
    """Inventory item ids whose rental lines are being handed back."""
    item_ids: List[uuid.UUID]


class RentalItemResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    item_id: Optional[uuid.UUID] = None
    item_name: str
    quantity: int
    daily_rent_price: Decimal
    returned: bool
    returned_date: Optional[datetime] = None


class RentalResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    customer_id: Optional[uuid.UUID] = None
    customer_name: str
    rent_date: date
    expected_return_date: date
    items: List[RentalItemResponse]
    total_amount: Decimal
    status: RentalStatus
    notes: Optional[str] = None
    created_at: datetime


class RentalBalanceResponse(BaseModel):
    rental_id: uuid.UUID
    status: RentalStatus
    total_amount: Decimal
    paid_amount: Decimal
    due_amount: Decimal
    payments: List[PaymentResponse]
