"""
Scan audit trail for the sample scanner
"""

import logging
from typing import Optional

from ..database.connection import DatabaseConnection, get_database
from ..database.models import ScanLogType, ScanLogCreate
from ..database.crud import ScanLogCRUD
from ..config.config_manager import get_config


class ScanAuditLogger:
    """Audit logger with database backend"""

    def __init__(self, db: Optional[DatabaseConnection] = None):
        self.logger = logging.getLogger("audit")

        if db is None:
            settings = get_config()
            db = get_database(settings.database_url)

        self.db = db
        self.scan_log_crud = ScanLogCRUD(db)

    def _log_to_database(self, log_type: ScanLogType, description: str,
                         design_no: Optional[str] = None,
                         qr_code_id: Optional[str] = None) -> None:
        """Log audit entry to database"""
        level = logging.ERROR if log_type == ScanLogType.ERROR else logging.INFO
        line = f"[{log_type.value}] {description} (Design: {design_no or 'N/A'}, QR: {qr_code_id or 'N/A'})"

        try:
            self.scan_log_crud.create_log(ScanLogCreate(
                type=log_type,
                description=description,
                design_no=design_no,
                qr_code_id=qr_code_id
            ))
            self.logger.log(level, line)

        except Exception as e:
            # Scanning must go on without the audit table
            self.logger.error(f"Failed to log audit entry to database: {e}")
            self.logger.log(level, line)

    def log_info(self, description: str) -> None:
        """Log informational audit entry"""
        self._log_to_database(ScanLogType.INFO, description)

    def log_error(self, description: str) -> None:
        """Log error audit entry"""
        self._log_to_database(ScanLogType.ERROR, description)

    def log_scan_detected(self, record) -> None:
        """Log a scan that reached confirmation"""
        source = "directory" if record.enriched else "tag"
        self._log_to_database(
            ScanLogType.SCAN_DETECTED,
            f"Sample detected - merchant: {record.merchant or 'N/A'} ({source})",
            record.design_number,
            record.external_id
        )

    def log_scan_invalid(self, raw_text: str, reason: str) -> None:
        """Log a scan that could not be parsed"""
        self._log_to_database(
            ScanLogType.SCAN_INVALID,
            f"Invalid QR code ({reason}): {raw_text[:100]}"
        )

    def log_item_added(self, record) -> None:
        """Log a confirmed detection"""
        self._log_to_database(
            ScanLogType.ITEM_ADDED,
            "Sample added to packing slip",
            record.design_number,
            record.external_id
        )

    def log_item_skipped(self, record) -> None:
        """Log a skipped detection"""
        self._log_to_database(
            ScanLogType.ITEM_SKIPPED,
            "Sample detection skipped",
            record.design_number,
            record.external_id
        )

    def log_system_startup(self, version: str) -> None:
        """Log system startup"""
        self.log_info(f"Sample scanner started - Version: {version}")

    def log_system_shutdown(self, reason: str = "Normal shutdown") -> None:
        """Log system shutdown"""
        self.log_info(f"Sample scanner shutdown - Reason: {reason}")

    def log_directory_sync(self, sample_count: int) -> None:
        """Log successful sample directory sync"""
        self.log_info(f"Sample directory synchronized - {sample_count} samples")

    def log_directory_sync_failure(self, error: str) -> None:
        """Log sample directory sync failure"""
        self.log_error(f"Sample directory synchronization failed: {error}")

    def log_cleanup_completed(self, deleted_count: int) -> None:
        """Log scan log cleanup"""
        self.log_info(f"Scan log cleanup completed - {deleted_count} entries deleted")

