import enum
import uuid

from sqlalchemy import (
    Boolean, CheckConstraint, Column, Date, DateTime, Enum, ForeignKey, Index, Integer, Numeric, String, Text, Uuid,
)
from sqlalchemy.orm import relationship

from rentshop.models.base import Base, utcnow


class RentalStatus(str, enum.Enum):
    ACTIVE = "Active"
    PARTIAL = "Partial Return"
    OVERDUE = "Overdue"
    RETURNED = "Returned"  # terminal


class Rental(Base):
    __tablename__ = "rentals"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    # Nullable so the rental survives deletion of the customer; customer_name keeps the reference readable
    customer_id = Column(Uuid, ForeignKey("customers.id", ondelete="SET NULL"), nullable=True)
    customer_name = Column(String(255), nullable=False)
    rent_date = Column(Date, nullable=False)
    expected_return_date = Column(Date, nullable=False)
    total_amount = Column(Numeric(14, 2), nullable=False, default=0)
    status = Column(
        Enum(RentalStatus, native_enum=False, length=32, values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=RentalStatus.ACTIVE,
    )
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    items = relationship(
        "RentalItem",
        back_populates="rental",
        cascade="all, delete-orphan",
        order_by="RentalItem.position",
        lazy="selectin",
    )

    __table_args__ = (
        Index("ix_rentals_customer_id", "customer_id"),
        Index("ix_rentals_status", "status"),
        Index("ix_rentals_rent_date", "rent_date"),
    )

    def __repr__(self):
        return f"<Rental(id={self.id}, customer={self.customer_name!r}, status={self.status.value})>"


class RentalItem(Base):
    __tablename__ = "rental_items"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    rental_id = Column(Uuid, ForeignKey("rentals.id", ondelete="CASCADE"), nullable=False)
    # Plain id, not a FK: outlives the inventory row so the line can still be returned
    item_id = Column(Uuid, nullable=True)
    position = Column(Integer, nullable=False, default=0)
    item_name = Column(String(255), nullable=False)
    quantity = Column(Integer, nullable=False)
    # Rate at rental time, later price edits never touch it
    daily_rent_price = Column(Numeric(12, 2), nullable=False)
    returned = Column(Boolean, nullable=False, default=False)
    returned_date = Column(DateTime(timezone=True), nullable=True)

    rental = relationship("Rental", back_populates="items")

    __table_args__ = (
        CheckConstraint("quantity >= 1", name="ck_rental_items_quantity_positive"),
        Index("ix_rental_items_rental_id", "rental_id"),
        Index("ix_rental_items_item_id_returned", "item_id", "returned"),
    )
