"""
Ordered collection of purchase line items.

The store edits the order's item list in place. It shares the controller's
error map so that editing a field clears that field's error straight away
(optimistic clear); the full re-check happens on the next submit.
"""
import logging
from typing import Any, Iterator, Optional

from models.line_item import ITEM_FIELDS, LineItem
from models.result import ErrorKey, ValidationErrors
from .amounts import is_blank, parse_date, to_field_text

logger = logging.getLogger(__name__)


class LineItemStore:
    """
    Add / remove / update operations over a list of LineItems.

    Invariants:
      - the list never becomes empty (removing the last item is a no-op)
      - an item's id is assigned at creation and never changes
    """

    def __init__(self, items: list[LineItem], errors: Optional[ValidationErrors] = None):
        if not items:
            items.append(LineItem())
        self._items = items
        self._errors: ValidationErrors = errors if errors is not None else {}

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[LineItem]:
        return iter(self._items)

    @property
    def ids(self) -> list[str]:
        return [item.id for item in self._items]

    def get(self, item_id: str) -> Optional[LineItem]:
        return next((item for item in self._items if item.id == item_id), None)

    def index_of(self, item_id: str) -> Optional[int]:
        """Current display position of the item, or None if unknown."""
        for index, item in enumerate(self._items):
            if item.id == item_id:
                return index
        return None

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def add_item(self) -> str:
        """Append a blank item and return its id."""
        item = LineItem()
        self._items.append(item)
        logger.debug("Added line item %s (now %d)", item.id, len(self._items))
        return item.id

    def remove_item(self, item_id: str) -> bool:
        """Remove the item unless it is the only one. Returns True if removed."""
        if len(self._items) <= 1:
            logger.debug("Ignoring remove of %s: order must keep one line item", item_id)
            return False
        index = self.index_of(item_id)
        if index is None:
            logger.debug("Ignoring remove of unknown line item %s", item_id)
            return False
        del self._items[index]
        logger.debug("Removed line item %s from position %d", item_id, index)
        return True

    def update_item(self, item_id: str, field: str, value: Any) -> bool:
        """
        Set one field on the item with *item_id*. Unknown ids are ignored.

        The error recorded for (field, current position) is dropped whether or
        not the new value is itself valid.
        """
        if field not in ITEM_FIELDS:
            raise ValueError(f"Unknown line item field: {field!r}")
        index = self.index_of(item_id)
        if index is None:
            logger.debug("Ignoring update of unknown line item %s", item_id)
            return False

        setattr(self._items[index], field, _coerce(field, value))
        self._errors.pop(ErrorKey.for_item(field, index), None)
        return True


def _coerce(field: str, value: Any) -> Any:
    if field == "expiry_date":
        expiry = parse_date(value)
        if expiry is None and not is_blank(value):
            logger.debug("Unreadable expiry date %r; leaving it blank", value)
        return expiry
    return to_field_text(value)
