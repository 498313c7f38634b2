"""
Field validation for purchase entry.

Checks:
  Metadata:    supplier name present
  Line items:  product name present, quantity present and > 0,
               cost price present and > 0

Every rule runs independently, so one pass reports every violation. Text that
does not read as a number counts as 0 and fails the "> 0" rules; there is no
separate format error.
"""
import logging
from decimal import Decimal

from models.line_item import LineItem
from models.purchase_order import Order, OrderMetadata
from models.result import ErrorKey, ValidationErrors
from .amounts import is_blank, parse_amount

logger = logging.getLogger(__name__)

SUPPLIER_REQUIRED = "Supplier name is required"
PRODUCT_REQUIRED = "Product name is required"
QUANTITY_REQUIRED = "Quantity is required"
QUANTITY_NOT_POSITIVE = "Quantity must be greater than 0"
COST_REQUIRED = "Cost price is required"
COST_NOT_POSITIVE = "Cost price must be greater than 0"


class OrderValidator:
    """
    Produces the ValidationErrors map for an order. Pure: the order is not touched.

    Usage:
        validator = OrderValidator()
        errors = validator.validate(order)
        if not errors:
            ...  # submittable
    """

    def validate(self, order: Order) -> ValidationErrors:
        """Run all checks and return the combined error map."""
        errors: ValidationErrors = {}
        errors.update(self._check_metadata(order.metadata))
        for index, item in enumerate(order.items):
            errors.update(self._check_item(item, index))
        if errors:
            logger.debug("Validation found %d error(s)", len(errors))
        return errors

    # ------------------------------------------------------------------
    # Metadata checks
    # ------------------------------------------------------------------

    def _check_metadata(self, metadata: OrderMetadata) -> ValidationErrors:
        errors: ValidationErrors = {}
        if is_blank(metadata.supplier_name):
            errors[ErrorKey.for_metadata("supplier_name")] = SUPPLIER_REQUIRED
        return errors

    # ------------------------------------------------------------------
    # Line item checks
    # ------------------------------------------------------------------

    def _check_item(self, item: LineItem, index: int) -> ValidationErrors:
        errors: ValidationErrors = {}

        if is_blank(item.product_name):
            errors[ErrorKey.for_item("product_name", index)] = PRODUCT_REQUIRED

        message = _positive_amount_error(item.quantity, QUANTITY_REQUIRED, QUANTITY_NOT_POSITIVE)
        if message:
            errors[ErrorKey.for_item("quantity", index)] = message

        message = _positive_amount_error(item.cost_price, COST_REQUIRED, COST_NOT_POSITIVE)
        if message:
            errors[ErrorKey.for_item("cost_price", index)] = message

        return errors


_default_validator = OrderValidator()


def validate(order: Order) -> ValidationErrors:
    """Validate *order* with the default rules."""
    return _default_validator.validate(order)


# ------------------------------------------------------------------
# Helpers
# ------------------------------------------------------------------

def _positive_amount_error(raw: str, required_msg: str, positive_msg: str) -> str | None:
    if is_blank(raw):
        return required_msg
    amount = parse_amount(raw)
    if amount is None or amount <= Decimal("0"):
        return positive_msg
    return None
