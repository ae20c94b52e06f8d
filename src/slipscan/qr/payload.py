"""
QR payload codec for sample tags.

Two payload formats are printed on sample tags:

* structured: a flat JSON object ``{"merchant", "productionSampleType",
  "designNo", "qrCodeId"}`` where only ``designNo`` and ``qrCodeId`` are
  required;
* delimited: ``TYPECODE|DESIGNNO|MERCHANTCODE`` for the compact Micro QR
  labels, e.g. ``HG|A1001|ACMECO``.

Parsing is attempted in that order. Anything else is a ``ParseFailure``.
"""

import json
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Union

logger = logging.getLogger(__name__)

DELIMITER = "|"
UNRECOGNIZED_FORMAT = "unrecognized format"
MISSING_FIELDS = "missing designNo or qrCodeId"

TYPE_CODES: Dict[str, str] = {
    "HG": "Hanger",
    "PB": "Paper Booklet",
    "EB": "Export Booklet",
    "SC": "Swatch Card",
}


class SourceFormat(str, Enum):
    """Wire format a candidate was parsed from."""
    JSON = "json"
    DELIMITED = "delimited"


@dataclass(frozen=True)
class CandidateRecord:
    """Parsed, not yet enriched result of one scan."""
    merchant: str
    sample_type: str
    design_number: str
    external_id: str
    source_format: SourceFormat

    @property
    def has_merchant_code(self) -> bool:
        """True when ``merchant`` holds an abbreviated merchant code."""
        return self.source_format == SourceFormat.DELIMITED and bool(self.merchant)


@dataclass(frozen=True)
class ParseFailure:
    """Scan text that matches neither payload format."""
    raw: str
    reason: str = UNRECOGNIZED_FORMAT


ParseResult = Union[CandidateRecord, ParseFailure]


def type_code_for(sample_type: str) -> str:
    """Map a production sample type to its tag code, passing unknown types through."""
    for code, name in TYPE_CODES.items():
        if name == sample_type:
            return code
    return sample_type


def build_external_id(merchant_code: str, design_no: str, type_code: str) -> str:
    """Deterministic identifier for delimited tags."""
    return f"{merchant_code}_{design_no}_{type_code}"


def encode_delimited(sample_type: str, design_no: str, merchant_code: str) -> str:
    """Build the compact ``TYPECODE|DESIGNNO|MERCHANTCODE`` payload."""
    return DELIMITER.join([type_code_for(sample_type), design_no, merchant_code])


def encode_structured(merchant: str, sample_type: str, design_no: str, qr_code_id: str) -> str:
    """Build the JSON payload printed on full-size tags."""
    return json.dumps({
        "merchant": merchant,
        "productionSampleType": sample_type,
        "designNo": design_no,
        "qrCodeId": qr_code_id,
    })


def _text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, (dict, list)):
        return ""
    return str(value)


class PayloadParser:
    """
    Parser turning decoded QR text into a ``CandidateRecord``.

    ``parse`` never raises: malformed text yields a ``ParseFailure`` which the
    caller reports to the user.
    """

    def parse(self, raw: str) -> ParseResult:
        """
        Parse a decoded QR string.

        Args:
            raw: Text produced by the frame decoder

        Returns:
            CandidateRecord on success, ParseFailure otherwise
        """
        if not isinstance(raw, str):
            return ParseFailure(raw=repr(raw))

        text = raw.strip()
        if not text:
            return ParseFailure(raw=raw)

        candidate = self._parse_structured(raw, text)
        if isinstance(candidate, ParseFailure):
            logger.debug(f"Incomplete structured payload: {text[:80]!r}")
            return candidate
        if candidate is None:
            candidate = self._parse_delimited(text)

        if candidate is None:
            logger.debug(f"Unrecognized QR payload: {text[:80]!r}")
            return ParseFailure(raw=raw)

        logger.debug(f"Parsed {candidate.source_format.value} payload: {candidate.external_id}")
        return candidate

    def _parse_structured(self, raw: str, text: str) -> Optional[ParseResult]:
        # None means "not a JSON object", a ParseFailure means "incomplete one"
        try:
            data = json.loads(text)
        except ValueError:
            return None

        if not isinstance(data, dict):
            return None

        design_no = _text(data.get("designNo"))
        qr_code_id = _text(data.get("qrCodeId"))
        if not design_no or not qr_code_id:
            return ParseFailure(raw=raw, reason=MISSING_FIELDS)

        return CandidateRecord(
            merchant=_text(data.get("merchant")),
            sample_type=_text(data.get("productionSampleType")),
            design_number=design_no,
            external_id=qr_code_id,
            source_format=SourceFormat.JSON,
        )

    def _parse_delimited(self, text: str) -> Optional[CandidateRecord]:
        fields = text.split(DELIMITER)
        if len(fields) != 3:
            return None

        type_code, design_no, merchant_code = (field.strip() for field in fields)
        if not design_no:
            return None

        return CandidateRecord(
            merchant=merchant_code,
            sample_type=TYPE_CODES.get(type_code, type_code),
            design_number=design_no,
            external_id=build_external_id(merchant_code, design_no, type_code),
            source_format=SourceFormat.DELIMITED,
        )
