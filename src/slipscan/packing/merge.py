"""
Merge engine: fold a resolved scan into a packing-slip item list.
"""

import logging
from typing import List, Optional

from ..database.models import LineItem
from .feedback import FeedbackPort
from .resolver import ResolvedRecord

logger = logging.getLogger(__name__)


def find_matching_item(record: ResolvedRecord, items: List[LineItem]) -> Optional[int]:
    """
    Index of the item a record should be counted against, or None.

    The tag identifier wins anywhere in the list. Only when no item carries
    it does design number and merchant, compared case-insensitively, decide.
    """
    if record.external_id:
        for index, item in enumerate(items):
            if item.external_id == record.external_id:
                return index

    design_no = record.design_number.casefold()
    merchant = record.merchant.casefold()

    for index, item in enumerate(items):
        if item.design_number.casefold() == design_no and item.merchant.casefold() == merchant:
            return index
    return None


class MergeEngine:
    """Increment-or-append policy for scanned samples."""

    def __init__(self, feedback: Optional[FeedbackPort] = None):
        self.feedback = feedback

    def merge(self, record: ResolvedRecord, items: List[LineItem]) -> List[LineItem]:
        """
        Return a new item list with the record counted in.

        The input list and its items are left untouched. A matching item gets
        its quantity incremented; otherwise a new item is appended with the
        next serial number. The list is never reordered.

        Args:
            record: Resolved scan to add
            items: Current packing-slip items

        Returns:
            The updated item list
        """
        merged = [item.model_copy() for item in items]
        index = find_matching_item(record, merged)

        if index is not None:
            current = merged[index]
            merged[index] = current.model_copy(update={"quantity": current.quantity + 1})
            message = f"'{record.design_number}' count increased to {current.quantity + 1}"
        else:
            merged.append(LineItem(
                serial_number=len(merged) + 1,
                merchant=record.merchant,
                sample_type=record.sample_type,
                design_number=record.design_number,
                external_id=record.external_id or None,
                quantity=1,
            ))
            message = f"'{record.design_number}' added"

        logger.info(message)
        if self.feedback:
            self.feedback.success(message)

        return merged
