"""
Scan session state machine.

One session exists per open capture surface. It turns decoded QR text into at
most one pending detection at a time:

    IDLE --scan--> (parse, resolve) --> AWAITING_CONFIRMATION
    AWAITING_CONFIRMATION --confirm--> merge into item list --> IDLE
    AWAITING_CONFIRMATION --skip--> IDLE

While a resolution is in flight every further scan is dropped, and while a
detection awaits confirmation every scan is ignored. The text of the last
consumed scan is remembered so the same tag read over consecutive frames is
only processed once; confirm, skip and rearm forget it.
"""

import asyncio
import logging
from enum import Enum
from typing import Any, Dict, Optional, Set

from ..packing.feedback import FeedbackPort
from ..packing.items import ItemListPort
from ..packing.merge import MergeEngine
from ..packing.resolver import RecordResolver, ResolvedRecord
from .payload import ParseFailure, PayloadParser
from .scanner import FrameDecoder

logger = logging.getLogger(__name__)


class SessionState(str, Enum):
    """Scan session states."""
    IDLE = "idle"
    AWAITING_CONFIRMATION = "awaiting_confirmation"


class ScanOutcome(str, Enum):
    """What happened to one scan event."""
    DETECTED = "detected"
    PARSE_FAILED = "parse_failed"
    DROPPED_DUPLICATE = "dropped_duplicate"
    DROPPED_BUSY = "dropped_busy"
    IGNORED_AWAITING = "ignored_awaiting"
    DISCARDED = "discarded"
    CLOSED = "closed"


class ScanSession:
    """
    Single-flight detection and confirmation for one capture surface.

    Args:
        resolver: Record resolver used to enrich parsed scans
        items: Item list the confirmed scans are merged into
        feedback: Notification and cue sink
        parser: Payload parser (default ``PayloadParser()``)
        merge_engine: Merge engine (default reports to ``feedback``)
        decoder: Frame decoder released when the session closes
        audit_logger: Optional ``ScanAuditLogger`` for the scan trail
    """

    def __init__(self, resolver: RecordResolver, items: ItemListPort, feedback: FeedbackPort,
                 parser: Optional[PayloadParser] = None,
                 merge_engine: Optional[MergeEngine] = None,
                 decoder: Optional[FrameDecoder] = None,
                 audit_logger=None):
        self.resolver = resolver
        self.items = items
        self.feedback = feedback
        self.parser = parser or PayloadParser()
        self.merge_engine = merge_engine or MergeEngine(feedback)
        self.decoder = decoder
        self.audit_logger = audit_logger

        self._state = SessionState.IDLE
        self._pending: Optional[ResolvedRecord] = None
        self._busy = False
        self._last_scan_text: Optional[str] = None
        self._closed = False
        self._generation = 0
        self._inflight: Optional[asyncio.Future] = None
        self._tasks: Set[asyncio.Task] = set()

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def pending_record(self) -> Optional[ResolvedRecord]:
        return self._pending

    @property
    def last_scan_text(self) -> Optional[str]:
        return self._last_scan_text

    @property
    def is_loading(self) -> bool:
        """True while a resolution holds the scan lock."""
        return self._busy

    @property
    def is_closed(self) -> bool:
        return self._closed

    def open(self) -> None:
        """Start the frame decoder, if the session owns one."""
        if self._closed:
            raise RuntimeError("Scan session already closed")
        if self.decoder:
            self.decoder.start()
        logger.info("Scan session opened")

    async def handle_scan(self, text: str) -> ScanOutcome:
        """
        Process one decoded frame.

        Args:
            text: Decoded QR text

        Returns:
            The outcome of the scan
        """
        if self._closed:
            return ScanOutcome.CLOSED

        if self._state == SessionState.AWAITING_CONFIRMATION:
            return ScanOutcome.IGNORED_AWAITING

        if self._busy:
            logger.debug(f"Scan dropped, resolution in flight: {text!r}")
            return ScanOutcome.DROPPED_BUSY

        if text == self._last_scan_text:
            logger.debug(f"Duplicate scan suppressed: {text!r}")
            return ScanOutcome.DROPPED_DUPLICATE

        self._last_scan_text = text
        result = self.parser.parse(text)

        if isinstance(result, ParseFailure):
            logger.warning(f"Invalid QR code ({result.reason}): {text!r}")
            self.feedback.error(f"Invalid QR code: {result.reason}")
            if self.audit_logger:
                self.audit_logger.log_scan_invalid(text, result.reason)
            return ScanOutcome.PARSE_FAILED

        # Lock is taken before the first suspension point
        self._busy = True
        generation = self._generation
        self._inflight = asyncio.ensure_future(self.resolver.resolve(result))

        try:
            resolved = await self._inflight
        except asyncio.CancelledError:
            if generation != self._generation:
                return ScanOutcome.DISCARDED
            self._release_lock()
            raise
        except Exception:
            if generation == self._generation:
                self._release_lock()
            raise

        if generation != self._generation:
            logger.info(f"Resolution of {result.design_number} finished after close, discarded")
            return ScanOutcome.DISCARDED

        self._pending = resolved
        self._state = SessionState.AWAITING_CONFIRMATION
        self._release_lock()

        logger.info(f"Item detected: {resolved.design_number} ({resolved.external_id})")
        self.feedback.scan_accepted()
        if self.audit_logger:
            self.audit_logger.log_scan_detected(resolved)
        return ScanOutcome.DETECTED

    def submit(self, text: str) -> Optional[asyncio.Task]:
        """
        Schedule ``handle_scan`` from a synchronous frame callback.

        Must be called from the running event loop. Returns the task, or None
        when the scan would be dropped anyway.
        """
        if self._closed or self._state == SessionState.AWAITING_CONFIRMATION or self._busy:
            return None

        task = asyncio.get_running_loop().create_task(self.handle_scan(text))
        self._tasks.add(task)
        task.add_done_callback(self._task_done)
        return task

    def _task_done(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logger.error(f"Scan handling failed: {error!r}")

    def confirm(self) -> bool:
        """
        Add the pending detection to the item list.

        Returns:
            True if an item was merged, False for a stale confirmation
        """
        if self._closed or self._state != SessionState.AWAITING_CONFIRMATION or self._pending is None:
            logger.debug("Stale confirmation ignored")
            return False

        record = self._pending
        self.items.set_items(self.merge_engine.merge(record, self.items.get_items()))
        self._reset_to_idle()

        if self.audit_logger:
            self.audit_logger.log_item_added(record)
        return True

    def skip(self) -> bool:
        """
        Discard the pending detection.

        Returns:
            True if a detection was discarded, False for a stale skip
        """
        if self._closed or self._state != SessionState.AWAITING_CONFIRMATION or self._pending is None:
            logger.debug("Stale skip ignored")
            return False

        record = self._pending
        self._reset_to_idle()
        logger.info(f"Detection skipped: {record.design_number}")

        if self.audit_logger:
            self.audit_logger.log_item_skipped(record)
        return True

    def rearm(self) -> None:
        """Forget the last scan so the same tag can be read again."""
        self._last_scan_text = None

    def close(self) -> None:
        """
        Close the capture surface.

        Releases the frame decoder, cancels any in-flight resolution and resets
        to an idle session with nothing pending. Later scans, confirmations and
        resolution results are ignored.
        """
        if self._closed:
            return

        self._closed = True
        self._generation += 1

        if self._inflight and not self._inflight.done():
            self._inflight.cancel()
        for task in list(self._tasks):
            task.cancel()
        self._release_lock()
        self._reset_to_idle()

        if self.decoder:
            try:
                self.decoder.stop()
            except Exception as e:
                logger.error(f"Failed to stop frame decoder: {e}")

        logger.info("Scan session closed")

    def _release_lock(self) -> None:
        self._busy = False
        self._inflight = None

    def _reset_to_idle(self) -> None:
        self._pending = None
        self._state = SessionState.IDLE
        self._last_scan_text = None

    def status(self) -> Dict[str, Any]:
        """Get session status."""
        return {
            "state": self._state.value,
            "closed": self._closed,
            "loading": self._busy,
            "pending_design_no": self._pending.design_number if self._pending else None,
            "last_scan_text": self._last_scan_text,
            "item_count": len(self.items.get_items()),
        }
