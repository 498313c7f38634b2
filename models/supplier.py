from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel


class Supplier(BaseModel):
    """
    A known supplier from the supplier catalog.
    aliases is a list of alternative names / trading names used for lookup.
    """
    id: str
    name: str
    aliases: List[str] = []

    @property
    def all_names(self) -> List[str]:
        """Return the canonical name plus all aliases for matching."""
        return [self.name] + self.aliases


class Product(BaseModel):
    """A stocked product offered as a suggestion for line item names."""
    sku: str
    name: str
    mrp: Optional[Decimal] = None
    cost_price: Optional[Decimal] = None   # last known purchase price
