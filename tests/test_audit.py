"""
Tests for the scan audit trail.
"""

import logging
from unittest.mock import MagicMock

import pytest

from slipscan.audit.logger import ScanAuditLogger
from slipscan.database.connection import DatabaseConnection, DatabaseError
from slipscan.database.crud import ScanLogCRUD
from slipscan.database.models import ScanLogType
from slipscan.packing.resolver import ResolvedRecord
from slipscan.qr.payload import PayloadParser


@pytest.fixture
def db(tmp_path):
    connection = DatabaseConnection(f"sqlite:///{tmp_path / 'audit.db'}")
    connection.initialize_database()
    yield connection
    connection.close()


def test_scan_events_are_persisted(db):
    audit = ScanAuditLogger(db)
    record = ResolvedRecord.from_candidate(PayloadParser().parse("HG|A1001|ACMECO"))

    audit.log_scan_detected(record)
    audit.log_item_added(record)
    audit.log_scan_invalid("garbage", "unrecognized format")

    crud = ScanLogCRUD(db)
    detected = crud.get_logs_by_type(ScanLogType.SCAN_DETECTED)
    assert len(detected) == 1
    assert detected[0].design_no == "A1001"
    assert detected[0].qr_code_id == "ACMECO_A1001_HG"
    assert "(tag)" in detected[0].description

    assert len(crud.get_logs_by_type(ScanLogType.ITEM_ADDED)) == 1
    invalid = crud.get_logs_by_type(ScanLogType.SCAN_INVALID)
    assert "garbage" in invalid[0].description


def test_directory_sync_entries(db):
    audit = ScanAuditLogger(db)
    audit.log_directory_sync(12)
    audit.log_directory_sync_failure("timeout")

    crud = ScanLogCRUD(db)
    assert "12 samples" in crud.get_logs_by_type(ScanLogType.INFO)[0].description
    assert "timeout" in crud.get_logs_by_type(ScanLogType.ERROR)[0].description


def test_database_failure_falls_back_to_log(db, caplog):
    audit = ScanAuditLogger(db)
    audit.scan_log_crud = MagicMock()
    audit.scan_log_crud.create_log.side_effect = DatabaseError("disk full")

    with caplog.at_level(logging.INFO, logger="audit"):
        audit.log_info("still running")

    assert "Failed to log audit entry" in caplog.text
    assert "still running" in caplog.text
