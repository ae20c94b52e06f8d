"""
CRUD operations for the sample scanner database
"""

import logging
from datetime import datetime
from typing import Optional, List
from uuid import uuid4

from .connection import DatabaseConnection, DatabaseError
from .models import Sample, ScanLog, ScanLogType, SampleCreate, ScanLogCreate

logger = logging.getLogger(__name__)


class SampleCRUD:
    """CRUD operations for the cached Sample table"""

    def __init__(self, db: DatabaseConnection):
        self.db = db

    def _row_to_sample(self, row) -> Sample:
        return Sample(
            id=row["id"],
            merchant=row["merchant"],
            productionSampleType=row["productionSampleType"],
            designNo=row["designNo"],
            qrCodeId=row["qrCodeId"],
            pieces=row["pieces"] or 0,
            updatedAt=datetime.fromisoformat(row["updatedAt"])
        )

    def replace_all(self, samples: List[SampleCreate]) -> int:
        """Replace the whole cache with a fresh snapshot, keeping its order"""
        try:
            now = datetime.utcnow().isoformat()
            with self.db.get_transaction() as conn:
                conn.execute("DELETE FROM Sample")
                for position, sample in enumerate(samples):
                    conn.execute("""
                        INSERT OR REPLACE INTO Sample
                            (id, qrCodeId, merchant, productionSampleType, designNo, pieces, position, updatedAt)
                        VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                    """, (
                        str(uuid4()),
                        sample.qr_code_id,
                        sample.merchant,
                        sample.sample_type,
                        sample.design_no,
                        sample.pieces,
                        position,
                        now
                    ))

            logger.info(f"Sample cache replaced with {len(samples)} records")
            return len(samples)

        except Exception as e:
            logger.error(f"Failed to replace samples: {e}")
            raise DatabaseError(f"Sample replacement failed: {e}")

    def get_by_design_no(self, design_no: str) -> List[Sample]:
        """Get samples by design number (case-insensitive), in directory order"""
        try:
            rows = self.db.fetchall(
                "SELECT * FROM Sample WHERE designNo = ? COLLATE NOCASE ORDER BY position",
                (design_no,)
            )
            return [self._row_to_sample(row) for row in rows]

        except Exception as e:
            logger.error(f"Failed to get samples by design number {design_no}: {e}")
            raise DatabaseError(f"Sample retrieval failed: {e}")

    def count(self) -> int:
        """Number of cached samples"""
        row = self.db.fetchone("SELECT COUNT(*) AS total FROM Sample")
        return row["total"] if row else 0


class ScanLogCRUD:
    """CRUD operations for ScanLog table"""

    def __init__(self, db: DatabaseConnection):
        self.db = db

    def _row_to_log(self, row) -> ScanLog:
        return ScanLog(
            id=row["id"],
            type=ScanLogType(row["type"]),
            description=row["description"],
            designNo=row["designNo"],
            qrCodeId=row["qrCodeId"],
            createdAt=datetime.fromisoformat(row["createdAt"])
        )

    def create_log(self, log_data: ScanLogCreate) -> ScanLog:
        """Create a new scan log entry"""
        try:
            log_id = str(uuid4())
            now = datetime.utcnow().isoformat()

            with self.db.get_transaction() as conn:
                conn.execute("""
                    INSERT INTO ScanLog (id, type, description, designNo, qrCodeId, createdAt)
                    VALUES (?, ?, ?, ?, ?, ?)
                """, (
                    log_id,
                    log_data.type.value,
                    log_data.description,
                    log_data.design_no,
                    log_data.qr_code_id,
                    now
                ))

            logger.debug(f"Scan log created: {log_id}")
            return ScanLog(
                id=log_id,
                type=log_data.type,
                description=log_data.description,
                designNo=log_data.design_no,
                qrCodeId=log_data.qr_code_id,
                createdAt=datetime.fromisoformat(now)
            )

        except Exception as e:
            logger.error(f"Failed to create scan log: {e}")
            raise DatabaseError(f"Scan log creation failed: {e}")

    def get_logs_by_type(self, log_type: ScanLogType, limit: Optional[int] = None) -> List[ScanLog]:
        """Get scan logs by type, newest first"""
        try:
            if limit:
                rows = self.db.fetchall(
                    "SELECT * FROM ScanLog WHERE type = ? ORDER BY createdAt DESC LIMIT ?",
                    (log_type.value, limit)
                )
            else:
                rows = self.db.fetchall(
                    "SELECT * FROM ScanLog WHERE type = ? ORDER BY createdAt DESC",
                    (log_type.value,)
                )
            return [self._row_to_log(row) for row in rows]

        except Exception as e:
            logger.error(f"Failed to get scan logs by type {log_type}: {e}")
            raise DatabaseError(f"Scan log retrieval failed: {e}")

    def delete_logs_before(self, before: datetime) -> int:
        """Delete scan logs before given datetime"""
        try:
            with self.db.get_transaction() as conn:
                cursor = conn.execute(
                    "DELETE FROM ScanLog WHERE createdAt < ?",
                    (before.isoformat(),)
                )
                deleted_count = cursor.rowcount
            logger.info(f"Deleted {deleted_count} scan logs before {before}")
            return deleted_count

        except Exception as e:
            logger.error(f"Failed to delete scan logs before {before}: {e}")
            raise DatabaseError(f"Scan log deletion failed: {e}")


class DatabaseManager:
    """Main database manager combining all CRUD operations"""

    def __init__(self, db: DatabaseConnection):
        self.db = db
        self.samples = SampleCRUD(db)
        self.scan_logs = ScanLogCRUD(db)

    def initialize(self):
        """Initialize database and all tables"""
        self.db.initialize_database()

    def close(self):
        """Close database connection"""
        self.db.close()
