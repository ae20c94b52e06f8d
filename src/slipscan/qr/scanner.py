"""
Frame decoder adapters for the sample scanner.

The camera and the QR decoder run outside this package. They hand decoded text
over through a drop file that is written atomically and consumed (read and
deleted) here, which keeps scan data isolated from any terminal session.
"""

import time
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, Optional, Union

logger = logging.getLogger(__name__)


def clean_scan_text(raw: Union[str, bytes]) -> str:
    """
    Normalize decoder output.

    Decodes bytes, drops control characters and strips symbology
    identifiers (``]Q1``..``]Q6``) that some decoders prefix to the text.
    """
    if isinstance(raw, bytes):
        decoded = raw.decode("utf-8", errors="ignore")
    else:
        decoded = raw

    cleaned = "".join(ch for ch in decoded if ord(ch) >= 32 or ch == "\t").strip()

    if len(cleaned) >= 3 and cleaned.startswith("]Q") and cleaned[2].isdigit():
        cleaned = cleaned[3:].lstrip()

    return cleaned


class FrameDecoder(ABC):
    """Source of decoded QR text, zero or one result per frame."""

    @abstractmethod
    def start(self) -> None:
        """Acquire the video source."""

    @abstractmethod
    def stop(self) -> None:
        """Release the video source. Safe to call more than once."""

    @abstractmethod
    def read(self) -> Optional[str]:
        """Return the text decoded from the latest frame, if any."""

    @property
    @abstractmethod
    def is_running(self) -> bool:
        """Check if the decoder is running."""


class FileFrameDecoder(FrameDecoder):
    """
    Frame decoder reading from a drop file.

    The external decoder process calls ``write_scan`` (or writes the file the
    same way) once per decoded frame; ``read`` consumes the file.
    """

    def __init__(self, scan_file: Union[str, Path] = "qr_scan_data.txt", max_length: int = 512):
        self.scan_file = Path(scan_file)
        self.max_length = max_length
        self._running = False
        self._last_read_time: Optional[float] = None

        logger.info(f"File frame decoder initialized on {self.scan_file}")

    def start(self) -> None:
        """Start consuming the drop file, discarding any stale scan."""
        if self._running:
            logger.warning("Frame decoder already running")
            return

        self._discard_file()
        self._running = True
        logger.info(f"Frame decoder started on {self.scan_file}")

    def stop(self) -> None:
        """Stop consuming and remove the drop file."""
        if not self._running:
            return

        self._running = False
        self._discard_file()
        logger.info("Frame decoder stopped")

    def write_scan(self, text: str) -> None:
        """Write decoded text to the drop file atomically."""
        temp_path = self.scan_file.with_suffix('.tmp')
        temp_path.write_text(text, encoding='utf-8')
        temp_path.replace(self.scan_file)
        logger.debug(f"Scan written to file: {text!r}")

    def read(self) -> Optional[str]:
        """Read and clear the drop file. Returns None when no scan is waiting."""
        if not self._running:
            return None

        try:
            raw = self.scan_file.read_bytes()
        except FileNotFoundError:
            return None

        try:
            self.scan_file.unlink()
        except FileNotFoundError:
            # Consumed by another reader in the meantime
            return None

        self._last_read_time = time.time()
        text = clean_scan_text(raw)
        if not text:
            return None

        if len(text) > self.max_length:
            logger.warning(f"Scan too long, ignoring: {text[:20]}...")
            return None

        return text

    def _discard_file(self) -> None:
        try:
            self.scan_file.unlink()
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.warning(f"Failed to clean up scan file: {e}")

    def get_status(self) -> Dict[str, Any]:
        """Get decoder status."""
        return {
            "running": self._running,
            "scan_file": str(self.scan_file),
            "scan_file_exists": self.scan_file.exists(),
            "last_read_time": self._last_read_time,
            "max_length": self.max_length,
        }

    @property
    def is_running(self) -> bool:
        """Check if decoder is running."""
        return self._running
