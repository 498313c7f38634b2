from datetime import date
from decimal import Decimal
from enum import Enum
from typing import List

from pydantic import BaseModel, Field

from .line_item import LineItem


class PaymentMode(str, Enum):
    CASH = "Cash"
    CARD = "Card"
    UPI = "UPI"
    BANK_TRANSFER = "Bank Transfer"
    CHEQUE = "Cheque"
    CREDIT = "Credit"


class OrderMetadata(BaseModel):
    """Supplier, date and payment details for the purchase being entered."""
    supplier_name: str = ""
    purchase_date: date = Field(default_factory=date.today)
    payment_mode: PaymentMode = PaymentMode.CASH
    paid_amount: str = ""                   # raw text, optional
    notes: str = ""


METADATA_FIELDS = ("supplier_name", "purchase_date", "payment_mode", "paid_amount", "notes")


class Order(BaseModel):
    """
    The in-progress purchase: one metadata block plus an ordered list of line items.
    Insertion order is display order. The list is never empty.
    """
    metadata: OrderMetadata = Field(default_factory=OrderMetadata)
    items: List[LineItem] = Field(default_factory=lambda: [LineItem()])

    @classmethod
    def blank(cls, payment_mode: PaymentMode | str = PaymentMode.CASH) -> "Order":
        """A fresh order with default metadata and exactly one blank line item."""
        return cls(metadata=OrderMetadata(payment_mode=PaymentMode(payment_mode)))


class OrderSnapshot(BaseModel):
    """
    A validated, detached copy of an Order handed to the submission gateway.
    Edits made to the live order after the snapshot is taken do not leak into it.
    """
    metadata: OrderMetadata
    items: List[LineItem]
    order_total: Decimal
    submitted_at: str                       # ISO 8601 datetime
