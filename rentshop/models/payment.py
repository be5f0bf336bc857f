import uuid

from sqlalchemy import CheckConstraint, Column, Date, DateTime, ForeignKey, Index, Numeric, Text, Uuid

from rentshop.models.base import Base, utcnow


class Payment(Base):
    """Money received, tagged to at most one rental or sale."""
    __tablename__ = "payments"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    rental_id = Column(Uuid, ForeignKey("rentals.id", ondelete="CASCADE"), nullable=True)
    sale_id = Column(Uuid, ForeignKey("sales.id", ondelete="CASCADE"), nullable=True)
    amount = Column(Numeric(14, 2), nullable=False)
    date = Column(Date, nullable=False)
    note = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    __table_args__ = (
        CheckConstraint("amount >= 0", name="ck_payments_amount_non_negative"),
        CheckConstraint("rental_id IS NULL OR sale_id IS NULL", name="ck_payments_single_source"),
        Index("ix_payments_rental_id", "rental_id"),
        Index("ix_payments_sale_id", "sale_id"),
        Index("ix_payments_date", "date"),
    )
