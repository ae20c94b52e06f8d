"""
Tests for the sqlite sample cache and scan log.
"""

from datetime import datetime, timedelta

import pytest

from slipscan.database.connection import DatabaseConnection
from slipscan.database.crud import DatabaseManager
from slipscan.database.models import SampleCreate, ScanLogCreate, ScanLogType
from slipscan.packing.directory import LocalSampleDirectory


@pytest.fixture
def db_manager(tmp_path):
    manager = DatabaseManager(DatabaseConnection(f"sqlite:///{tmp_path / 'scanner.db'}"))
    manager.initialize()
    yield manager
    manager.close()


def sample(merchant, design_no, qr_code_id=None, sample_type="Hanger"):
    return SampleCreate(merchant=merchant, sample_type=sample_type, design_no=design_no, qr_code_id=qr_code_id)


def test_replace_all_keeps_directory_order(db_manager):
    db_manager.samples.replace_all([
        sample("Zeta Mills", "A1001", "q1"),
        sample("Acme Corp", "a1001", "q2"),
        sample("Style Co", "B2", "q3"),
    ])

    matches = db_manager.samples.get_by_design_no("A1001")
    assert [m.merchant for m in matches] == ["Zeta Mills", "Acme Corp"]
    assert db_manager.samples.count() == 3


def test_replace_all_drops_previous_snapshot(db_manager):
    db_manager.samples.replace_all([sample("Acme Corp", "A1")])
    db_manager.samples.replace_all([sample("Style Co", "S1")])

    assert db_manager.samples.count() == 1
    assert db_manager.samples.get_by_design_no("A1") == []
    assert [s.merchant for s in db_manager.samples.get_by_design_no("s1")] == ["Style Co"]


@pytest.mark.asyncio
async def test_local_directory_lookup(db_manager):
    db_manager.samples.replace_all([sample("Acme Corp", "A1001"), sample("Style Co", "B2")])

    matches = await LocalSampleDirectory(db_manager).find_by_design_number("a1001")
    assert [m.merchant for m in matches] == ["Acme Corp"]


def test_scan_log_roundtrip(db_manager):
    created = db_manager.scan_logs.create_log(ScanLogCreate(
        type=ScanLogType.ITEM_ADDED,
        description="Sample added to packing slip",
        design_no="A1001",
        qr_code_id="X1",
    ))

    logs = db_manager.scan_logs.get_logs_by_type(ScanLogType.ITEM_ADDED)
    assert [log.id for log in logs] == [created.id]
    assert logs[0].design_no == "A1001"
    assert db_manager.scan_logs.get_logs_by_type(ScanLogType.SCAN_INVALID) == []


def test_delete_logs_before(db_manager):
    db_manager.scan_logs.create_log(ScanLogCreate(type=ScanLogType.INFO, description="started"))

    assert db_manager.scan_logs.delete_logs_before(datetime.utcnow() - timedelta(days=1)) == 0
    assert db_manager.scan_logs.delete_logs_before(datetime.utcnow() + timedelta(days=1)) == 1
    assert db_manager.scan_logs.get_logs_by_type(ScanLogType.INFO) == []
