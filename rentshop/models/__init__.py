# rentshop/models/__init__.py
from .base import Base
from .customer import Customer
from .inventory import InventoryItem
from .rental import Rental, RentalItem, RentalStatus
from .sale import Sale, SaleItem
from .payment import Payment
from .note import Note

# Export all models
__all__ = [
    "Base",
    "Customer",
    "InventoryItem",
    "Rental",
    "RentalItem",
    "RentalStatus",
    "Sale",
    "SaleItem",
    "Payment",
    "Note",
]
