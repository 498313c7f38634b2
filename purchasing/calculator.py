"""
Derived monetary figures for a purchase.

Everything here is recomputed from the current order on every call; nothing is
cached. Amounts stay unrounded until format_money() is applied for display.
"""
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

from models.line_item import LineItem
from models.purchase_order import Order
from models.result import Balance
from .amounts import is_blank, parse_amount

ZERO = Decimal("0")
CENT = Decimal("0.01")


def _non_negative(raw: str) -> Decimal:
    amount = parse_amount(raw)
    if amount is None or amount < ZERO:
        return ZERO
    return amount


def line_total(item: LineItem) -> Decimal:
    """quantity x cost price; blank, non-numeric or negative inputs count as 0."""
    return _non_negative(item.quantity) * _non_negative(item.cost_price)


def order_total(order: Order) -> Decimal:
    return sum((line_total(item) for item in order.items), ZERO)


def balance(order: Order) -> Optional[Balance]:
    """
    Compare the paid amount with the order total.

    Returns None when no paid amount has been entered. Paying exactly the total
    counts as "excess" with amount 0.
    """
    paid_raw = order.metadata.paid_amount
    if is_blank(paid_raw):
        return None
    paid = parse_amount(paid_raw) or ZERO
    total = order_total(order)
    kind = "excess" if paid >= total else "balance_due"
    return Balance(kind=kind, amount=abs(total - paid))


def format_money(amount: Decimal, symbol: str = "₹") -> str:
    """Round half-up to two decimals and prefix the currency symbol."""
    return f"{symbol}{Decimal(amount).quantize(CENT, rounding=ROUND_HALF_UP)}"


def item_total_display(item: LineItem, symbol: str = "₹") -> Optional[str]:
    """
    The per-item total shown under a line item card.

    Only shown once both quantity and cost price have been filled in.
    """
    if is_blank(item.quantity) or is_blank(item.cost_price):
        return None
    return format_money(line_total(item), symbol)
