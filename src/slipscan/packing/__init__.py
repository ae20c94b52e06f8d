"""
Packing-slip item capture: resolution, merging and the ports the scan session writes to.
"""

from .directory import SampleDirectory, ApiSampleDirectory, LocalSampleDirectory
from .feedback import FeedbackPort, ConsoleFeedback
from .items import ItemListPort, PackingSlipItems
from .merge import MergeEngine, find_matching_item
from .resolver import RecordResolver, ResolvedRecord, abbreviate_merchant

__all__ = [
    'SampleDirectory',
    'ApiSampleDirectory',
    'LocalSampleDirectory',
    'FeedbackPort',
    'ConsoleFeedback',
    'ItemListPort',
    'PackingSlipItems',
    'MergeEngine',
    'find_matching_item',
    'RecordResolver',
    'ResolvedRecord',
    'abbreviate_merchant',
]
