import uuid
import datetime as dt
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class PaymentRequest(BaseModel):
    """At most one of rental_id / sale_id may be set."""
    rental_id: Optional[uuid.UUID] = None
    sale_id: Optional[uuid.UUID] = None
    amount: Decimal = Field(..., ge=0)
    date: dt.date
    note: Optional[str] = None


class PaymentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    rental_id: Optional[uuid.UUID] = None
    sale_id: Optional[uuid.UUID] = None
    amount: Decimal
    date: dt.date
    note: Optional[str] = None
    created_at: dt.datetime
