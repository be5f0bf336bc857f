from typing import Any, Dict, Optional


class ShopError(ValueError):
    """
    Base class for domain errors raised by the service layer.
    Subclasses ValueError so callers that only care about "bad input" can keep catching that.
    """
    code = "shop_error"
    status_code = 400

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.field = field

    def details(self) -> Dict[str, Any]:
        details: Dict[str, Any] = {}
        if self.field:
            details["field"] = self.field
        return details


class ValidationError(ShopError):
    """Missing or malformed required field."""
    code = "validation_error"
    status_code = 400


class NotFound(ShopError):
    """Reference to a customer/item/rental/sale/payment/note that does not exist."""
    code = "not_found"
    status_code = 404

    def __init__(self, entity: str, entity_id: Any, field: Optional[str] = None):
        super().__init__(f"{entity} {entity_id} not found.", field=field)
        self.entity = entity
        self.entity_id = entity_id

    def details(self) -> Dict[str, Any]:
        details = super().details()
        details["entity"] = self.entity
        details["id"] = str(self.entity_id)
        return details


class InsufficientStock(ShopError):
    code = "insufficient_stock"
    status_code = 409

    def __init__(self, item_name: str, requested: int, available: int, item_id: Any = None):
        super().__init__(
            f"Insufficient stock for item: {item_name}. Available: {available}",
            field="items",
        )
        self.item_name = item_name
        self.item_id = item_id
        self.requested = requested
        self.available = available

    def details(self) -> Dict[str, Any]:
        details = super().details()
        details.update({
            "item_name": self.item_name,
            "item_id": str(self.item_id) if self.item_id is not None else None,
            "requested": self.requested,
            "available": self.available,
        })
        return details


class EmptyOperation(ShopError):
    """A rental or sale submitted without any line items."""
    code = "empty_operation"
    status_code = 400
