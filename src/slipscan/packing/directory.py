"""
Sample directory adapters used by the record resolver.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import List

from ..database.models import Sample

logger = logging.getLogger(__name__)


class SampleDirectory(ABC):
    """Read-only directory of canonical sample records."""

    @abstractmethod
    async def find_by_design_number(self, design_no: str) -> List[Sample]:
        """Return records whose design number matches, in directory order."""


class ApiSampleDirectory(SampleDirectory):
    """Directory backed by the sample API, one full snapshot per lookup."""

    def __init__(self, api_client):
        self.client = api_client

    async def find_by_design_number(self, design_no: str) -> List[Sample]:
        samples = await asyncio.to_thread(self.client.list_samples)
        wanted = design_no.lower()
        matches = [s for s in samples if s.design_no.lower() == wanted]
        logger.debug(f"API directory: {len(matches)} of {len(samples)} samples match {design_no}")
        return matches


class LocalSampleDirectory(SampleDirectory):
    """Directory backed by the local sqlite sample cache."""

    def __init__(self, db_manager):
        self.db = db_manager

    async def find_by_design_number(self, design_no: str) -> List[Sample]:
        return self.db.samples.get_by_design_no(design_no)
