import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class NoteRequest(BaseModel):
    content: str = Field(..., min_length=1, description="Expense, reminder or any free text.")


class NoteResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    content: str
    created_at: datetime
