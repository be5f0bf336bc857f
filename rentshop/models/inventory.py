import uuid

from sqlalchemy import CheckConstraint, Column, DateTime, Integer, Numeric, String, Text, Uuid

from rentshop.models.base import Base, utcnow


class InventoryItem(Base):
    """
    Physical stock owned by the shop. total_quantity only ever moves on sales
    (and manual edits); rentals are tracked through unreturned RentalItem lines.
    """
    __tablename__ = "inventory_items"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String(255), nullable=False)
    category = Column(String(128), nullable=True)
    description = Column(Text, nullable=True)
    daily_rent_price = Column(Numeric(12, 2), nullable=False, default=0)
    selling_price = Column(Numeric(12, 2), nullable=True)
    total_quantity = Column(Integer, nullable=False, default=0)
    photo_url = Column(String(512), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    __table_args__ = (
        CheckConstraint("daily_rent_price >= 0", name="ck_inventory_daily_rent_price_non_negative"),
        CheckConstraint("selling_price IS NULL OR selling_price >= 0", name="ck_inventory_selling_price_non_negative"),
        CheckConstraint("total_quantity >= 0", name="ck_inventory_total_quantity_non_negative"),
    )

    def __repr__(self):
        return f"<InventoryItem(id={self.id}, name={self.name!r}, total_quantity={self.total_quantity})>"
