"""
Tests for the application wiring and packing-slip output.
"""

import json
from datetime import datetime, timedelta

import pytest

from slipscan.config import reset_config
from slipscan.database import connection
from slipscan.database.connection import close_database
from slipscan.database.models import LineItem, ScanLogType
from slipscan.main import SampleScannerApp
from slipscan.packing.directory import LocalSampleDirectory
from slipscan.qr.session import SessionState


@pytest.fixture
def app(monkeypatch, tmp_path):
    monkeypatch.delenv('SAMPLE_API_URL', raising=False)
    monkeypatch.delenv('DIRECTORY_SOURCE', raising=False)
    monkeypatch.delenv('SCAN_LOG_RETENTION_DAYS', raising=False)
    monkeypatch.setenv('DATABASE_URL', f"sqlite:///{tmp_path / 'scanner.db'}")
    monkeypatch.setenv('QR_SCAN_FILE', str(tmp_path / 'qr_scan_data.txt'))
    monkeypatch.setenv('LOG_FILE', str(tmp_path / 'logs' / 'scanner.log'))
    close_database()
    reset_config()
    app = SampleScannerApp()
    yield app
    close_database()
    reset_config()


def insert_log(db, log_type, description, created_at):
    with db.get_transaction() as conn:
        conn.execute(
            "INSERT INTO ScanLog (id, type, description, createdAt) VALUES (?, ?, ?, ?)",
            (description, log_type.value, description, created_at.isoformat())
        )


def test_components_use_local_cache_without_api(app):
    app.load_configuration()
    app.initialize_database()
    app.initialize_components()

    assert app.api_client is None
    assert app.sync_service is None
    assert isinstance(app.session.resolver.directory, LocalSampleDirectory)
    assert app.session.state == SessionState.IDLE


def test_prune_scan_logs_keeps_recent_entries(app):
    app.load_configuration()
    app.initialize_database()
    db = app.db_manager.db
    insert_log(db, ScanLogType.ITEM_ADDED, "old", datetime.utcnow() - timedelta(days=45))
    insert_log(db, ScanLogType.ITEM_ADDED, "recent", datetime.utcnow() - timedelta(days=2))

    assert app.prune_scan_logs() == 1

    remaining = app.db_manager.scan_logs.get_logs_by_type(ScanLogType.ITEM_ADDED)
    assert [log.description for log in remaining] == ["recent"]
    cleanup = app.db_manager.scan_logs.get_logs_by_type(ScanLogType.INFO)
    assert any("1 entries deleted" in log.description for log in cleanup)


def test_zero_retention_keeps_everything(app, monkeypatch):
    monkeypatch.setenv('SCAN_LOG_RETENTION_DAYS', '0')
    app.load_configuration()
    app.initialize_database()
    insert_log(app.db_manager.db, ScanLogType.ITEM_ADDED, "ancient", datetime.utcnow() - timedelta(days=400))

    assert app.prune_scan_logs() == 0
    assert len(app.db_manager.scan_logs.get_logs_by_type(ScanLogType.ITEM_ADDED)) == 1


def test_shutdown_closes_shared_database(app, tmp_path):
    app.load_configuration()
    app.initialize_database()
    app.initialize_components()

    app.shutdown(str(tmp_path / "slip.json"))

    assert connection._db_instance is None
    assert app.db_manager is None
    assert app.session.is_closed
    assert json.loads((tmp_path / "slip.json").read_text(encoding='utf-8')) == []


def test_write_items_sorts_by_merchant(app, tmp_path):
    app.items.set_items([
        LineItem(serial_number=1, merchant="Zeta", design_number="Z1", quantity=2),
        LineItem(serial_number=2, merchant="acme", design_number="A1"),
    ])
    output = tmp_path / "out" / "slip.json"

    app.write_items(str(output))

    payload = json.loads(output.read_text(encoding='utf-8'))
    assert [row["merchant"] for row in payload] == ["acme", "Zeta"]
    assert [row["srNo"] for row in payload] == [1, 2]
    assert payload[1]["totalPieces"] == 2
