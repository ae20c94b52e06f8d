"""
Main Application Module

Entry point for the packing-slip sample scanner.
Reads decoded QR text, asks for confirmation and builds the packing-slip item list.
"""

import argparse
import asyncio
import json
import logging
import os
import signal
import sys
from datetime import datetime, timedelta
from pathlib import Path
from typing import Optional

from .config.config_manager import get_config, ConfigManager
from .config.logging_config import setup_logging
from .config.validator import validate_config
from .database.connection import get_database, close_database, DatabaseError
from .database.crud import DatabaseManager
from .audit.logger import ScanAuditLogger
from .api.client import SampleAPIClient
from .api.service import DirectorySyncService
from .packing.directory import ApiSampleDirectory, LocalSampleDirectory, SampleDirectory
from .packing.feedback import ConsoleFeedback
from .packing.items import PackingSlipItems
from .packing.resolver import RecordResolver
from .qr.scanner import FileFrameDecoder
from .qr.session import ScanSession, ScanOutcome


class SampleScannerApp:
    """Main application class for the sample scanner"""

    def __init__(self) -> None:
        self.config: Optional[ConfigManager] = None
        self.logger: Optional[logging.Logger] = None
        self.audit_logger: Optional[ScanAuditLogger] = None
        self.db_manager: Optional[DatabaseManager] = None
        self.api_client: Optional[SampleAPIClient] = None
        self.sync_service: Optional[DirectorySyncService] = None
        self.decoder: Optional[FileFrameDecoder] = None
        self.session: Optional[ScanSession] = None
        self.items = PackingSlipItems()
        self.auto_confirm: bool = False
        self.shutdown_requested: bool = False

    def setup_signal_handlers(self) -> None:
        """Setup signal handlers for graceful shutdown"""
        def signal_handler(signum, frame):
            _ = signum, frame  # Unused parameters
            print("Shutdown signal received...")
            self.shutdown_requested = True

        signal.signal(signal.SIGINT, signal_handler)
        signal.signal(signal.SIGTERM, signal_handler)

    def load_configuration(self, debug: bool = False) -> None:
        """Load application configuration"""
        if debug:
            os.environ['DEBUG'] = 'true'
            os.environ['LOG_LEVEL'] = 'DEBUG'

        if not validate_config():
            raise RuntimeError("Configuration validation failed")

        self.config = get_config()

    def setup_logging(self) -> None:
        """Setup logging system"""
        if not self.config:
            raise RuntimeError("Configuration not loaded")

        setup_logging({
            "log_level": self.config.log_level,
            "log_file": self.config.log_file,
            "debug": self.config.debug
        })
        self.logger = logging.getLogger(__name__)
        self.logger.info("Logging system initialized")

    def initialize_database(self) -> None:
        """Initialize database"""
        if not self.config:
            raise RuntimeError("Configuration not loaded")

        db = get_database(self.config.database_url)
        self.db_manager = DatabaseManager(db)
        self.db_manager.initialize()
        self.audit_logger = ScanAuditLogger(db)

        if self.logger:
            self.logger.info(f"Database initialized - {self.db_manager.samples.count()} cached samples")

        self.prune_scan_logs()

    def prune_scan_logs(self) -> int:
        """Delete scan log entries older than the retention window (0 keeps everything)"""
        if not self.config or not self.db_manager:
            raise RuntimeError("Configuration and database must be initialized first")

        days = self.config.scan_log_retention_days
        if days <= 0:
            return 0

        deleted = self.db_manager.scan_logs.delete_logs_before(datetime.utcnow() - timedelta(days=days))
        if deleted and self.audit_logger:
            self.audit_logger.log_cleanup_completed(deleted)
        return deleted

    def initialize_components(self) -> None:
        """Initialize API client, directory, decoder and scan session"""
        if not self.config or not self.db_manager:
            raise RuntimeError("Configuration and database must be initialized first")

        if self.config.sample_api_url:
            self.api_client = SampleAPIClient(self.config)
            self.sync_service = DirectorySyncService(
                self.config, self.db_manager, client=self.api_client, audit_logger=self.audit_logger
            )

        directory: SampleDirectory
        if self.config.directory_source == 'api' and self.api_client:
            directory = ApiSampleDirectory(self.api_client)
        else:
            directory = LocalSampleDirectory(self.db_manager)

        self.decoder = FileFrameDecoder(self.config.qr_scan_file)
        self.session = ScanSession(
            resolver=RecordResolver(directory),
            items=self.items,
            feedback=ConsoleFeedback(),
            decoder=self.decoder,
            audit_logger=self.audit_logger
        )

        if self.logger:
            self.logger.info(f"All components initialized - directory: {type(directory).__name__}")

    async def run_scan_loop(self) -> None:
        """Poll the frame decoder and drive the scan session"""
        if not self.session or not self.decoder or not self.config:
            raise RuntimeError("Components not initialized")

        self.session.open()
        print(f"Scanning - waiting for tags in {self.decoder.scan_file} (Ctrl+C to finish)")

        while not self.shutdown_requested:
            if self.sync_service and self.config.directory_source == 'local':
                await asyncio.to_thread(self.sync_service.check_and_run)

            text = self.decoder.read()
            if text:
                outcome = await self.session.handle_scan(text)
                if outcome == ScanOutcome.DETECTED:
                    await self._ask_confirmation()

            await asyncio.sleep(self.config.scan_poll_interval)

        if self.logger:
            self.logger.info("Scan loop ended")

    async def _ask_confirmation(self) -> None:
        """Show the detected sample and confirm or skip it"""
        record = self.session.pending_record
        print("Item Detected")
        print(f"  Design No: {record.design_number}")
        print(f"  Type:      {record.sample_type or '-'}")
        print(f"  Merchant:  {record.merchant or '-'}")

        if self.auto_confirm:
            self.session.confirm()
            return

        answer = await asyncio.to_thread(input, "Add to list? [y/N] ")
        if answer.strip().lower() in ('y', 'yes'):
            self.session.confirm()
        else:
            self.session.skip()

    def write_items(self, output: str) -> None:
        """Write the item list, sorted by merchant, as packing-slip JSON"""
        self.items.sort_by_merchant()
        path = Path(output)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(self.items.to_payload(), indent=2), encoding='utf-8')
        print(f"Wrote {len(self.items)} items ({self.items.total_pieces()} pieces) to {path}")

    def shutdown(self, output: Optional[str] = None) -> None:
        """Clean shutdown"""
        print("Shutting down...")

        if self.session:
            self.session.close()

        if output:
            self.write_items(output)

        if self.audit_logger:
            self.audit_logger.log_system_shutdown("Normal shutdown")

        if self.db_manager:
            close_database()
            self.db_manager = None

        print("Shutdown complete")

    def print_config(self) -> None:
        """Print current environment variables and configuration"""
        print("=== Sample Scanner Configuration ===")
        print()
        print("Environment Variables:")
        print("-" * 40)
        env_vars = [
            'SAMPLE_API_URL',
            'API_KEY',
            'API_TIMEOUT',
            'SYNC_INTERVAL',
            'DIRECTORY_SOURCE',
            'DATABASE_URL',
            'SCAN_LOG_RETENTION_DAYS',
            'QR_SCAN_FILE',
            'SCAN_POLL_INTERVAL',
            'LOG_LEVEL',
            'LOG_FILE',
            'DEBUG',
            'APP_VERSION'
        ]

        for var in env_vars:
            value = os.getenv(var, 'NOT SET')
            # Mask sensitive values
            if 'API_KEY' in var and value != 'NOT SET':
                value = '*' * min(len(value), 8) + '...' if len(value) > 8 else '*' * len(value)
            print(f"{var:<20} = {value}")

        print()
        print("=" * 50)

    def run(self, debug: bool = False, auto_confirm: bool = False,
            output: Optional[str] = None, sync: bool = False) -> int:
        """Run the complete application"""
        self.auto_confirm = auto_confirm
        try:
            self.setup_signal_handlers()
            self.load_configuration(debug=debug)
            self.setup_logging()

            self.initialize_database()
            self.initialize_components()

            if self.audit_logger and self.config:
                self.audit_logger.log_system_startup(self.config.app_version)

            if sync:
                if self.sync_service:
                    self.sync_service.force_sync()
                else:
                    print("SAMPLE_API_URL not set - skipping directory sync")

            asyncio.run(self.run_scan_loop())
            return 0

        except (RuntimeError, DatabaseError, ValueError) as e:
            print(f"Application error: {e}")
            return 1
        finally:
            self.shutdown(output)


def main() -> int:
    """Main entry point"""
    parser = argparse.ArgumentParser(description="Packing-slip sample scanner")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    parser.add_argument("--check-config", action="store_true", help="Print current environment variables and configuration")
    parser.add_argument("--auto-confirm", action="store_true", help="Add every detected sample without asking")
    parser.add_argument("--output", help="Write the packing-slip items as JSON to this file on exit")
    parser.add_argument("--sync", action="store_true", help="Synchronize the sample directory before scanning")

    args = parser.parse_args()

    app = SampleScannerApp()

    if args.check_config:
        app.print_config()
        return 0

    return app.run(debug=args.debug, auto_confirm=args.auto_confirm, output=args.output, sync=args.sync)


if __name__ == "__main__":
    sys.exit(main())
