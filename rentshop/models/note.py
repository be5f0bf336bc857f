import uuid

from sqlalchemy import Column, DateTime, Text, Uuid

from rentshop.models.base import Base, utcnow


class Note(Base):
    __tablename__ = "notes"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    content = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
