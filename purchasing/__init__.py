from .validator import OrderValidator, validate
from .line_items import LineItemStore
from .calculator import line_total, order_total, balance, format_money, item_total_display
from .gateway import SubmissionGateway, SimulatedGateway
from .controller import OrderFormController, STATE_EDITING, STATE_VALIDATING, STATE_SUBMITTING
from .catalog import CatalogLookup

__all__ = [
    "OrderValidator", "validate", "LineItemStore",
    "line_total", "order_total", "balance", "format_money", "item_total_display",
    "SubmissionGateway", "SimulatedGateway",
    "OrderFormController", "STATE_EDITING", "STATE_VALIDATING", "STATE_SUBMITTING",
    "CatalogLookup",
]
