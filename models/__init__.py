from .line_item import LineItem, ITEM_FIELDS, NUMERIC_ITEM_FIELDS
from .purchase_order import PaymentMode, OrderMetadata, Order, OrderSnapshot, METADATA_FIELDS
from .supplier import Supplier, Product
from .result import (
    ErrorKey, ValidationErrors, Balance, GatewayAck, GatewayError, GatewayResult,
    SubmitOutcome, Suggestion,
)

__all__ = [
    "LineItem", "ITEM_FIELDS", "NUMERIC_ITEM_FIELDS",
    "PaymentMode", "OrderMetadata", "Order", "OrderSnapshot", "METADATA_FIELDS",
    "Supplier", "Product",
    "ErrorKey", "ValidationErrors", "Balance", "GatewayAck", "GatewayError", "GatewayResult",
    "SubmitOutcome", "Suggestion",
]
