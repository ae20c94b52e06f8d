"""
Item list port and the in-memory packing-slip item list.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from ..database.models import LineItem

logger = logging.getLogger(__name__)


class ItemListPort(ABC):
    """Owner of the mutable packing-slip item collection."""

    @abstractmethod
    def get_items(self) -> List[LineItem]:
        """Current items, in slip order."""

    @abstractmethod
    def set_items(self, items: List[LineItem]) -> None:
        """Replace the items."""


class PackingSlipItems(ItemListPort):
    """In-memory item list with the packing-slip form's list policies."""

    def __init__(self, items: Optional[List[LineItem]] = None):
        self._items: List[LineItem] = list(items or [])

    def get_items(self) -> List[LineItem]:
        return list(self._items)

    def set_items(self, items: List[LineItem]) -> None:
        self._items = list(items)

    def __len__(self) -> int:
        return len(self._items)

    def renumber(self) -> None:
        """Recompute serial numbers as 1..n in current order."""
        self._items = [
            item.model_copy(update={"serial_number": index})
            for index, item in enumerate(self._items, start=1)
        ]

    def remove(self, index: int) -> LineItem:
        """Remove the item at ``index`` and close the serial gap."""
        removed = self._items.pop(index)
        self.renumber()
        logger.debug(f"Removed item {removed.design_number}")
        return removed

    def sort_by_merchant(self) -> None:
        """Order alphabetically by merchant (case-insensitive), then renumber."""
        self._items.sort(key=lambda item: item.merchant.lower())
        self.renumber()

    def total_pieces(self) -> int:
        return sum(item.quantity for item in self._items)

    def to_payload(self) -> List[Dict[str, Any]]:
        """Items as packing-slip wire dicts (``srNo``, ``designNo``, ``totalPieces``...)."""
        return [item.model_dump(by_alias=True, exclude_none=True) for item in self._items]
