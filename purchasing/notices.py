"""
User-facing notices for the purchase entry screen.

The success notice is rendered with Jinja2 from a built-in default or from an
operator template in the config directory (see Config.notice_template).
"""
import logging
from decimal import Decimal
from pathlib import Path
from typing import Optional

from jinja2 import BaseLoader, Environment, FileSystemLoader

from models.result import GatewayError, SubmitOutcome
from .calculator import format_money

logger = logging.getLogger(__name__)

# Variables: total (formatted), reference, recorded_at, item_count
DEFAULT_SUCCESS_TEMPLATE = """\
Purchase Recorded Successfully! ✅
Total purchase of {{ total }} has been recorded and added to inventory.
{% if reference %}Reference: {{ reference }}
{% endif %}"""

# Variables: message, retryable
DEFAULT_FAILURE_TEMPLATE = """\
Purchase could not be recorded: {{ message }}
Your entries have been kept.{% if retryable %} Please try submitting again.{% endif %}
"""

CANCEL_TITLE = "Cancel Purchase"
CANCEL_MESSAGE = "Are you sure you want to cancel this purchase? All data will be lost."


def _template(source: str, template_file: Optional[Path] = None):
    if template_file and template_file.exists():
        env = Environment(
            loader=FileSystemLoader(str(template_file.parent)),
            autoescape=False,
            keep_trailing_newline=True,
        )
        return env.get_template(template_file.name)
    if template_file:
        logger.warning("Notice template not found: %s — using built-in default", template_file)
    env = Environment(loader=BaseLoader(), autoescape=False, keep_trailing_newline=True)
    return env.from_string(source)


def render_success_notice(
    outcome: SubmitOutcome,
    item_count: int,
    symbol: str = "₹",
    template_file: Optional[Path] = None,
) -> str:
    """Text shown once the gateway has recorded the purchase."""
    tmpl = _template(DEFAULT_SUCCESS_TEMPLATE, template_file)
    return tmpl.render(
        total=format_money(outcome.order_total, symbol),
        reference=outcome.ack.reference if outcome.ack else None,
        recorded_at=outcome.ack.recorded_at if outcome.ack else None,
        item_count=item_count,
    )


def render_failure_notice(failure: GatewayError) -> str:
    """Text shown when the gateway failed; the form keeps its data."""
    return _template(DEFAULT_FAILURE_TEMPLATE).render(
        message=failure.message, retryable=failure.retryable,
    )


def cancel_prompt() -> tuple[str, str]:
    """(title, message) for the confirmation the caller must show before cancel()."""
    return CANCEL_TITLE, CANCEL_MESSAGE


def total_line(total: Decimal, symbol: str = "₹") -> str:
    return f"Total Amount: {format_money(total, symbol)}"
