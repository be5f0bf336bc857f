import uuid
import datetime as dt
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel


class ReportResponse(BaseModel):
    rent_generated: Decimal
    sales_revenue: Decimal
    payments_received: Decimal
    due_from_rent: Decimal


class TransactionResponse(BaseModel):
    """A payment enriched with its source (Rental / Sale / Other) and customer."""
    id: uuid.UUID
    date: dt.date
    amount: Decimal
    note: Optional[str] = None
    rental_id: Optional[uuid.UUID] = None
    sale_id: Optional[uuid.UUID] = None
    source_type: str
    source_ref: str
    customer_name: str


class DashboardSummary(BaseModel):
    total_customers: int
    total_items: int
    items_rented: int
    active_rentals: int
    overdue_count: int
    todays_income: Decimal
