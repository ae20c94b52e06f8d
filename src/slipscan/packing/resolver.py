"""
Record resolver: best-effort enrichment of scanned candidates.

Delimited tags only carry an abbreviated merchant code and a type code. The
resolver looks the design number up in the sample directory and, when a
record's merchant abbreviates to the scanned code, swaps in the canonical
merchant name and sample type. It never rejects a scan.
"""

import logging
from dataclasses import dataclass

from ..qr.payload import CandidateRecord, SourceFormat
from .directory import SampleDirectory

logger = logging.getLogger(__name__)

MERCHANT_CODE_LENGTH = 6


def abbreviate_merchant(name: str) -> str:
    """Merchant code as printed on delimited tags: no whitespace, 6 chars, uppercase."""
    return "".join(name.split())[:MERCHANT_CODE_LENGTH].upper()


@dataclass(frozen=True)
class ResolvedRecord:
    """A candidate after enrichment."""
    merchant: str
    sample_type: str
    design_number: str
    external_id: str
    source_format: SourceFormat
    enriched: bool = False

    @classmethod
    def from_candidate(cls, candidate: CandidateRecord) -> "ResolvedRecord":
        return cls(
            merchant=candidate.merchant,
            sample_type=candidate.sample_type,
            design_number=candidate.design_number,
            external_id=candidate.external_id,
            source_format=candidate.source_format,
        )


class RecordResolver:
    """Resolve candidates against a ``SampleDirectory``."""

    def __init__(self, directory: SampleDirectory):
        self.directory = directory

    async def resolve(self, candidate: CandidateRecord) -> ResolvedRecord:
        """
        Enrich a candidate from the directory.

        Structured payloads that already name their merchant are trusted as-is.
        Directory failures degrade to the unchanged candidate.

        Args:
            candidate: Parsed scan

        Returns:
            ResolvedRecord, enriched when a directory match was found
        """
        unchanged = ResolvedRecord.from_candidate(candidate)

        if candidate.source_format == SourceFormat.JSON and candidate.merchant:
            return unchanged

        try:
            records = await self.directory.find_by_design_number(candidate.design_number)
        except Exception as e:
            logger.warning(f"Sample directory unavailable, using scanned data for {candidate.design_number}: {e}")
            return unchanged

        design_no = candidate.design_number.lower()
        code = candidate.merchant.upper() if candidate.has_merchant_code else None

        for record in records:
            if record.design_no.lower() != design_no:
                continue
            if code is not None and abbreviate_merchant(record.merchant) != code:
                continue

            logger.info(f"Resolved {candidate.design_number}: merchant '{record.merchant}', type '{record.sample_type}'")
            return ResolvedRecord(
                merchant=record.merchant,
                sample_type=record.sample_type,
                design_number=candidate.design_number,
                external_id=candidate.external_id,
                source_format=candidate.source_format,
                enriched=True,
            )

        logger.debug(f"No directory match for {candidate.design_number} ({len(records)} candidates)")
        return unchanged
