"""
Feedback port: user-visible notifications and the scan-accepted cue.
"""

import logging
import sys
from abc import ABC, abstractmethod
from typing import Optional, TextIO

logger = logging.getLogger(__name__)


class FeedbackPort(ABC):
    """Sink for toast-style notifications and audio cues."""

    @abstractmethod
    def success(self, message: str) -> None:
        """Show a success notification."""

    @abstractmethod
    def error(self, message: str) -> None:
        """Show an error notification."""

    @abstractmethod
    def scan_accepted(self) -> None:
        """Play the distinct 'scan accepted' cue."""


class ConsoleFeedback(FeedbackPort):
    """Terminal feedback: printed notifications, bell character as the cue."""

    def __init__(self, stream: Optional[TextIO] = None, bell: bool = True):
        self.stream = stream or sys.stdout
        self.bell = bell

    def success(self, message: str) -> None:
        logger.info(f"Feedback success: {message}")
        print(f"✅ {message}", file=self.stream)

    def error(self, message: str) -> None:
        logger.warning(f"Feedback error: {message}")
        print(f"❌ {message}", file=self.stream)

    def scan_accepted(self) -> None:
        if self.bell:
            self.stream.write("\a")
            self.stream.flush()
