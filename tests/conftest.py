"""
Pytest configuration file for sample scanner tests.

Puts the 'src' directory on sys.path so the tests run against a checkout
without installing the package, and provides fakes for the session ports.
"""

import asyncio
import sys
from pathlib import Path
from typing import List

import pytest

# Add src directory to sys.path (for the slipscan package)
src_dir = Path(__file__).parent.parent / 'src'
if str(src_dir) not in sys.path:
    sys.path.insert(0, str(src_dir))

from slipscan.database.models import Sample  # noqa: E402
from slipscan.packing.directory import SampleDirectory  # noqa: E402
from slipscan.packing.feedback import FeedbackPort  # noqa: E402
from slipscan.packing.items import PackingSlipItems  # noqa: E402
from slipscan.packing.resolver import RecordResolver  # noqa: E402
from slipscan.qr.session import ScanSession  # noqa: E402


class FakeDirectory(SampleDirectory):
    """In-memory sample directory that records its lookups."""

    def __init__(self, samples: List[Sample] = None, error: Exception = None):
        self.samples = list(samples or [])
        self.error = error
        self.lookups: List[str] = []

    async def find_by_design_number(self, design_no: str) -> List[Sample]:
        self.lookups.append(design_no)
        if self.error:
            raise self.error
        return [s for s in self.samples if s.design_no.lower() == design_no.lower()]


class GatedDirectory(FakeDirectory):
    """Directory whose lookups block until ``release()`` is called."""

    def __init__(self, samples: List[Sample] = None):
        super().__init__(samples)
        self.gate = asyncio.Event()

    def release(self):
        self.gate.set()

    async def find_by_design_number(self, design_no: str) -> List[Sample]:
        self.lookups.append(design_no)
        await self.gate.wait()
        return [s for s in self.samples if s.design_no.lower() == design_no.lower()]


class RecordingFeedback(FeedbackPort):
    """Feedback port that keeps every notification."""

    def __init__(self):
        self.successes: List[str] = []
        self.errors: List[str] = []
        self.cues = 0

    def success(self, message: str) -> None:
        self.successes.append(message)

    def error(self, message: str) -> None:
        self.errors.append(message)

    def scan_accepted(self) -> None:
        self.cues += 1


def make_sample(merchant="Acme Corp", sample_type="Hanger", design_no="A1001", qr_code_id=None):
    """Helper to build a directory sample."""
    return Sample(
        merchant=merchant,
        productionSampleType=sample_type,
        designNo=design_no,
        qrCodeId=qr_code_id,
    )


@pytest.fixture
def feedback():
    return RecordingFeedback()


@pytest.fixture
def items():
    return PackingSlipItems()


@pytest.fixture
def directory():
    return FakeDirectory([make_sample()])


@pytest.fixture
def session(directory, items, feedback):
    """Scan session wired to fakes."""
    return ScanSession(RecordResolver(directory), items, feedback)
