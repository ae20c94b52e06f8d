"""
QR payload parsing and frame decoder adapters for the sample scanner.
"""

from .payload import PayloadParser, CandidateRecord, ParseFailure, SourceFormat
from .scanner import FrameDecoder, FileFrameDecoder, clean_scan_text

__all__ = [
    'PayloadParser',
    'CandidateRecord',
    'ParseFailure',
    'SourceFormat',
    'FrameDecoder',
    'FileFrameDecoder',
    'clean_scan_text',
]
