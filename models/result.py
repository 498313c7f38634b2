from decimal import Decimal
from typing import Dict, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict


ErrorScope = Literal["metadata", "line_item"]


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.title() for part in rest)


class ErrorKey(BaseModel):
    """
    Identifies one field that failed validation.

    Line item keys carry the item's display position at the time of validation;
    metadata keys have no position. str(key) gives the flat form used by display
    layers, e.g. "supplierName" or "quantity_0".
    """
    model_config = ConfigDict(frozen=True)

    scope: ErrorScope
    field: str
    item_index: Optional[int] = None

    @classmethod
    def for_metadata(cls, field: str) -> "ErrorKey":
        return cls(scope="metadata", field=field)

    @classmethod
    def for_item(cls, field: str, item_index: int) -> "ErrorKey":
        return cls(scope="line_item", field=field, item_index=item_index)

    def __str__(self) -> str:
        if self.scope == "metadata":
            return _camel(self.field)
        return f"{_camel(self.field)}_{self.item_index}"


# Current violation set: one human-readable message per failing field
ValidationErrors = Dict[ErrorKey, str]


BalanceKind = Literal["excess", "balance_due"]


class Balance(BaseModel):
    """Difference between the paid amount and the order total."""
    kind: BalanceKind
    amount: Decimal                         # always >= 0

    @property
    def label(self) -> str:
        return "Excess" if self.kind == "excess" else "Balance Due"


class GatewayAck(BaseModel):
    """The gateway durably recorded the purchase."""
    reference: str
    recorded_at: str                        # ISO 8601 datetime


class GatewayError(BaseModel):
    """The gateway could not record the purchase; the entered data must be kept."""
    message: str
    retryable: bool = True


GatewayResult = Union[GatewayAck, GatewayError]


SubmitStatus = Literal[
    "recorded",     # gateway acknowledged, order reset
    "invalid",      # validation failed, gateway not called
    "rejected",     # a submission was already in progress
    "failed",       # gateway failure or timeout, data kept
]


class SubmitOutcome(BaseModel):
    """What happened to a single submit() call."""
    status: SubmitStatus
    order_total: Decimal = Decimal("0")
    error_count: int = 0
    ack: Optional[GatewayAck] = None
    failure: Optional[GatewayError] = None

    @property
    def ok(self) -> bool:
        return self.status == "recorded"


class Suggestion(BaseModel):
    """A catalog entry offered while the user types a supplier or product name."""
    kind: Literal["supplier", "product"]
    key: str                                # supplier id or product SKU
    name: str
    score: float                            # 0-1 match confidence
    mrp: Optional[Decimal] = None
    cost_price: Optional[Decimal] = None
