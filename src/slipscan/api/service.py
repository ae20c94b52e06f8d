"""
Periodic sync of the sample directory into the local cache
"""

import logging
import time
from datetime import datetime, timezone
from typing import Optional

from .client import SampleAPIClient
from ..database.models import SampleCreate

logger = logging.getLogger(__name__)


class DirectorySyncService:
    """Keeps the local sample cache in step with the sample API."""

    def __init__(self, config_manager, db_manager, client: Optional[SampleAPIClient] = None,
                 audit_logger=None):
        self.config = config_manager
        self.db = db_manager
        self.client = client or SampleAPIClient(config_manager)
        self.audit_logger = audit_logger

        self.sync_interval = int(self.config.sync_interval)

        self._last_sync = 0.0
        self.last_sync_at: Optional[datetime] = None
        self.sync_failures = 0

        logger.info(f"Directory sync service initialized - interval: {self.sync_interval}s")

    def check_and_run(self) -> bool:
        """Sync if the interval has elapsed. Returns True when a sync ran successfully."""
        current_time = time.time()
        if current_time - self._last_sync < self.sync_interval:
            return False

        self._last_sync = current_time
        return self._do_sync()

    def force_sync(self) -> bool:
        """Force an immediate sync."""
        logger.info("Forcing immediate directory sync")
        self._last_sync = time.time()
        return self._do_sync()

    def _do_sync(self) -> bool:
        """Replace the local cache with the server's sample list."""
        logger.debug("Performing directory sync")

        try:
            samples = self.client.list_samples()
            count = self.db.samples.replace_all([
                SampleCreate(
                    merchant=sample.merchant,
                    sample_type=sample.sample_type,
                    design_no=sample.design_no,
                    qr_code_id=sample.qr_code_id,
                    pieces=sample.pieces
                )
                for sample in samples
            ])

        except Exception as e:
            self.sync_failures += 1
            logger.error(f"Directory sync failed, keeping cached samples: {e}")
            if self.audit_logger:
                self.audit_logger.log_directory_sync_failure(str(e))
            return False

        self.last_sync_at = datetime.now(timezone.utc)
        self.sync_failures = 0
        logger.info(f"Directory sync complete - {count} samples cached")
        if self.audit_logger:
            self.audit_logger.log_directory_sync(count)
        return True
