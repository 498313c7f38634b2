"""
Helpers for reading the raw text held in numeric and date form fields.

Parsing is deliberately lenient: a leading number is taken the way a browser's
parseFloat would ("12abc" -> 12), and text with no leading number reads as
absent rather than raising a format error. Values whose magnitude is beyond
MAX_AMOUNT (for example "1e999999") also read as absent, so totals stay finite.
Date text is read in the common day/month orders; anything else reads as absent.
"""
import re
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

_LEADING_NUMBER = re.compile(r"^\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")

# Largest magnitude a quantity, price or paid amount may have
MAX_AMOUNT = Decimal("1e12")

DATE_FORMATS = ("%Y-%m-%d", "%d/%m/%Y", "%d-%m-%Y", "%Y/%m/%d")


def is_blank(value: Any) -> bool:
    """True for None, empty strings and whitespace-only strings."""
    if value is None:
        return True
    return not str(value).strip()


def parse_amount(value: Any) -> Optional[Decimal]:
    """
    Parse a numeric field value into a Decimal.

    Returns None when the value is blank, has no leading number, or is not a
    finite number within MAX_AMOUNT.
    """
    if is_blank(value):
        return None
    if isinstance(value, Decimal):
        amount = value
    else:
        match = _LEADING_NUMBER.match(str(value))
        if not match:
            return None
        try:
            amount = Decimal(match.group(1))
        except InvalidOperation:
            return None
    if not amount.is_finite() or amount.copy_abs() > MAX_AMOUNT:
        return None
    return amount


def to_field_text(value: Any) -> str:
    """Normalise a value assigned to a text/numeric form field to its stored string."""
    if value is None:
        return ""
    return str(value)


def parse_date(value: Any) -> Optional[date]:
    """Read a date field value; None when blank or in no known format."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if is_blank(value):
        return None
    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(str(value).strip(), fmt).date()
        except ValueError:
            continue
    return None
