import uuid
from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class InventoryItemRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=255, description="Name of the equipment (e.g., LED Par Light).")
    category: Optional[str] = Field(None, description="Free-form category such as Lights or Audio.")
    description: Optional[str] = None
    daily_rent_price: Decimal = Field(..., ge=0, description="Rent charged per unit per day.")
    selling_price: Optional[Decimal] = Field(None, ge=0, description="Default unit price when sold.")
    total_quantity: int = Field(..., ge=0, description="Units physically owned.")
    photo_url: Optional[str] = None


class InventoryItemUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    category: Optional[str] = None
    description: Optional[str] = None
    daily_rent_price: Optional[Decimal] = Field(None, ge=0)
    selling_price: Optional[Decimal] = Field(None, ge=0)
    total_quantity: Optional[int] = Field(None, ge=0)
    photo_url: Optional[str] = None


class InventoryItemResponse(BaseModel):
    """An inventory item with its computed available stock."""
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    name: str
    category: Optional[str] = None
    description: Optional[str] = None
    daily_rent_price: Decimal
    selling_price: Optional[Decimal] = None
    total_quantity: int
    available: int = 0
    photo_url: Optional[str] = None
    created_at: datetime
