"""
Order form controller.

OrderFormController owns the single in-progress Order and is its only mutator.
The presentation layer reads state from it and issues commands:

  add_item / remove_item / update_item   -- line item edits
  update_metadata_field                  -- supplier, date, payment, notes
  submit()                               -- validate, then await the gateway
  cancel()                               -- discard everything (confirmation is
                                            the caller's job)

Submit lifecycle:
  editing -> validating -> editing                  (errors found)
  editing -> validating -> submitting -> editing    (recorded: fresh order,
                                                     or failed: data kept)

Validation errors and gateway failures are returned as data; nothing is raised
across the controller boundary for user-caused problems.
"""
import asyncio
import logging
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Any, Optional

from config import Config
from models.purchase_order import METADATA_FIELDS, Order, OrderSnapshot, PaymentMode
from models.result import (
    Balance, ErrorKey, GatewayAck, GatewayError, SubmitOutcome, Suggestion, ValidationErrors,
)
from . import calculator
from .amounts import is_blank, parse_date, to_field_text
from .gateway import SubmissionGateway
from .line_items import LineItemStore
from .validator import OrderValidator

logger = logging.getLogger(__name__)

STATE_EDITING = "editing"
STATE_VALIDATING = "validating"
STATE_SUBMITTING = "submitting"


class OrderFormController:
    """
    Drives one purchase entry session.

    Usage:
        controller = OrderFormController(SimulatedGateway())
        item_id = controller.order.items[0].id
        controller.update_metadata_field("supplier_name", "Acme Pharma")
        controller.update_item(item_id, "product_name", "Paracetamol 500mg")
        ...
        outcome = await controller.submit()
    """

    def __init__(
        self,
        gateway: SubmissionGateway,
        config: Optional[Config] = None,
        validator: Optional[OrderValidator] = None,
    ):
        self.config = config or Config()
        self.gateway = gateway
        self.validator = validator or OrderValidator()
        self.state = STATE_EDITING
        self.last_failure: Optional[GatewayError] = None
        # Shared with the line item store; always mutated in place, never rebound
        self._errors: ValidationErrors = {}
        self._reset()

    # ------------------------------------------------------------------
    # Read side
    # ------------------------------------------------------------------

    @property
    def errors(self) -> ValidationErrors:
        """A copy of the current violation set."""
        return dict(self._errors)

    @property
    def is_submitting(self) -> bool:
        return self.state == STATE_SUBMITTING

    @property
    def order_total(self) -> Decimal:
        return calculator.order_total(self.order)

    @property
    def balance(self) -> Optional[Balance]:
        return calculator.balance(self.order)

    def line_total(self, item_id: str) -> Decimal:
        item = self.items.get(item_id)
        return calculator.line_total(item) if item else Decimal("0")

    def error_for(self, field: str, item_id: Optional[str] = None) -> Optional[str]:
        """The message to show next to a field, or None."""
        if item_id is None:
            return self._errors.get(ErrorKey.for_metadata(field))
        index = self.items.index_of(item_id)
        if index is None:
            return None
        return self._errors.get(ErrorKey.for_item(field, index))

    def snapshot(self) -> OrderSnapshot:
        """Detached copy of the current order for the gateway."""
        return OrderSnapshot(
            metadata=self.order.metadata.model_copy(deep=True),
            items=[item.model_copy(deep=True) for item in self.order.items],
            order_total=self.order_total,
            submitted_at=datetime.now(timezone.utc).isoformat(),
        )

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def add_item(self) -> str:
        return self.items.add_item()

    def remove_item(self, item_id: str) -> bool:
        return self.items.remove_item(item_id)

    def update_item(self, item_id: str, field: str, value: Any) -> bool:
        return self.items.update_item(item_id, field, value)

    def update_metadata_field(self, field: str, value: Any) -> None:
        """Set one metadata field and drop its error (re-checked on submit)."""
        if field not in METADATA_FIELDS:
            raise ValueError(f"Unknown order field: {field!r}")

        if field == "payment_mode":
            value = PaymentMode(value)
        elif field == "purchase_date":
            value = _coerce_date(value)
        else:
            value = to_field_text(value)

        setattr(self.order.metadata, field, value)
        self._errors.pop(ErrorKey.for_metadata(field), None)

    def apply_suggestion(self, suggestion: Suggestion, item_id: Optional[str] = None) -> None:
        """
        Fill fields from a picked catalog suggestion.

        Supplier picks set the supplier name. Product picks set the product name
        on *item_id* and fill MRP / cost price only where those are still blank.
        """
        if suggestion.kind == "supplier":
            self.update_metadata_field("supplier_name", suggestion.name)
            return

        item = self.items.get(item_id) if item_id else None
        if item is None:
            logger.debug("Ignoring product suggestion for unknown line item %s", item_id)
            return
        self.update_item(item.id, "product_name", suggestion.name)
        if suggestion.mrp is not None and is_blank(item.mrp):
            self.update_item(item.id, "mrp", suggestion.mrp)
        if suggestion.cost_price is not None and is_blank(item.cost_price):
            self.update_item(item.id, "cost_price", suggestion.cost_price)

    async def submit(self) -> SubmitOutcome:
        """
        Validate the order and, if clean, record it through the gateway.

        A call made while a previous submission is outstanding is rejected
        without side effects. Whatever happens during the attempt, the
        controller is back in the editing state when it returns or raises.
        """
        if self.state != STATE_EDITING:
            logger.warning("Submit ignored: a submission is already in progress")
            return SubmitOutcome(status="rejected", order_total=self.order_total)

        self.state = STATE_VALIDATING
        try:
            return await self._validate_and_record()
        finally:
            self.state = STATE_EDITING

    async def _validate_and_record(self) -> SubmitOutcome:
        found = self.validator.validate(self.order)
        self._errors.clear()
        self._errors.update(found)
        if found:
            logger.info("Submit blocked by %d validation error(s)", len(found))
            return SubmitOutcome(
                status="invalid", order_total=self.order_total, error_count=len(found),
            )

        snapshot = self.snapshot()
        self.last_failure = None
        self.state = STATE_SUBMITTING
        logger.info(
            "Submitting purchase from '%s': %d item(s), total %s",
            snapshot.metadata.supplier_name, len(snapshot.items), snapshot.order_total,
        )

        try:
            result = await asyncio.wait_for(
                self.gateway.submit(snapshot), timeout=self.config.gateway_timeout,
            )
        except asyncio.TimeoutError:
            logger.error(
                "Submission timed out after %ss; keeping entered data",
                self.config.gateway_timeout_seconds,
            )
            result = GatewayError(
                message=f"Submission timed out after {self.config.gateway_timeout_seconds:g}s",
                retryable=True,
            )
        except Exception as exc:
            logger.error("Submission gateway error: %s", exc)
            result = GatewayError(message=str(exc) or exc.__class__.__name__, retryable=True)

        if isinstance(result, GatewayAck):
            logger.info("Purchase recorded as %s", result.reference)
            self._reset()
            return SubmitOutcome(status="recorded", order_total=snapshot.order_total, ack=result)

        self.last_failure = result
        logger.warning("Purchase not recorded: %s", result.message)
        return SubmitOutcome(status="failed", order_total=snapshot.order_total, failure=result)

    def cancel(self) -> bool:
        """
        Discard the order and start a fresh one. The gateway is not called.

        Ignored while a submission is outstanding. Returns True if reset.
        """
        if self.state == STATE_SUBMITTING:
            logger.warning("Cancel ignored: a submission is in progress")
            return False
        self._reset()
        logger.info("Purchase entry cancelled; form reset")
        return True

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _reset(self) -> None:
        self.order = Order.blank(payment_mode=self.config.default_payment_mode)
        self._errors.clear()
        self.items = LineItemStore(self.order.items, self._errors)
        self.last_failure = None


def _coerce_date(value: Any) -> date:
    parsed = parse_date(value)
    if parsed is None:
        if not is_blank(value):
            logger.warning("Unreadable purchase date %r; using today", value)
        return date.today()
    return parsed
