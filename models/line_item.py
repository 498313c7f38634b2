import uuid
from datetime import date
from typing import Optional

from pydantic import BaseModel, Field


def new_item_id() -> str:
    """Return a fresh opaque line item id (never reused)."""
    return uuid.uuid4().hex


class LineItem(BaseModel):
    """
    A single product line on a purchase being entered.

    Numeric fields (mrp, quantity, cost_price) hold the raw text the user typed;
    they are parsed on read by the validator and the calculator.
    """
    id: str = Field(default_factory=new_item_id)
    product_name: str = ""
    mrp: str = ""                          # Maximum retail price, optional
    quantity: str = ""
    cost_price: str = ""
    batch_no: str = ""
    expiry_date: Optional[date] = None


# Fields the presentation layer may edit (id is fixed for the item's lifetime)
ITEM_FIELDS = ("product_name", "mrp", "quantity", "cost_price", "batch_no", "expiry_date")
NUMERIC_ITEM_FIELDS = ("mrp", "quantity", "cost_price")
