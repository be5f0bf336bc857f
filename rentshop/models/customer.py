import uuid

from sqlalchemy import Column, DateTime, Index, String, Text, Uuid

from rentshop.models.base import Base, utcnow


class Customer(Base):
    __tablename__ = "customers"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String(255), nullable=False)
    phone = Column(String(20), nullable=False)
    address = Column(Text, nullable=True)
    nid = Column(String(64), nullable=True)  # national id
    photo_url = Column(String(512), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    __table_args__ = (
        Index("ix_customers_created_at", "created_at"),
    )

    def __repr__(self):
        return f"<Customer(id={self.id}, name={self.name!r})>"
