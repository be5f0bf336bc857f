import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class CustomerRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=255, description="Customer or company name.")
    phone: str = Field(..., min_length=1, max_length=20, description="Contact phone number.")
    address: Optional[str] = Field(None, description="Postal address.")
    nid: Optional[str] = Field(None, description="National ID number.")
    photo_url: Optional[str] = Field(None, description="URL of an already uploaded photo.")


class CustomerUpdate(BaseModel):
    """All fields optional; only the ones sent are changed."""
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    phone: Optional[str] = Field(None, min_length=1, max_length=20)
    address: Optional[str] = None
    nid: Optional[str] = None
    photo_url: Optional[str] = None


class CustomerResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    name: str
    phone: str
    address: Optional[str] = None
    nid: Optional[str] = None
    photo_url: Optional[str] = None
    created_at: datetime
