"""
Simple configuration manager that loads settings from environment variables.
"""

import os
from typing import Any, Dict, Optional
from pathlib import Path
from dotenv import load_dotenv

# Load environment variables from .env file
env_path = Path('.env')
if env_path.exists():
    load_dotenv(env_path)


class ConfigManager:
    """Simple configuration manager for environment variables."""

    def __init__(self) -> None:
        self._config: Dict[str, Any] = self._load_config()

    def _load_config(self) -> Dict[str, Any]:
        """Load configuration from environment variables."""
        return {
            # Sample directory
            'sample_api_url': os.getenv('SAMPLE_API_URL', ''),
            'api_key': os.getenv('API_KEY', ''),
            'api_timeout': int(os.getenv('API_TIMEOUT', '30')),
            'sync_interval': int(os.getenv('SYNC_INTERVAL', '600')),
            'directory_source': os.getenv('DIRECTORY_SOURCE', 'local').lower(),

            # Database
            'database_url': os.getenv('DATABASE_URL', 'sqlite:///sample_scanner.db'),
            'scan_log_retention_days': int(os.getenv('SCAN_LOG_RETENTION_DAYS', '30')),

            # Scanning
            'qr_scan_file': os.getenv('QR_SCAN_FILE', 'qr_scan_data.txt'),
            'scan_poll_interval': float(os.getenv('SCAN_POLL_INTERVAL', '0.1')),

            # Logging
            'log_level': os.getenv('LOG_LEVEL', 'INFO').upper(),
            'log_file': os.getenv('LOG_FILE', 'logs/scanner.log'),
            'debug': os.getenv('DEBUG', 'false').lower() == 'true',

            # Application
            'app_version': os.getenv('APP_VERSION', '1.0.0'),
        }

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value."""
        return self._config.get(key, default)

    def get_all(self) -> Dict[str, Any]:
        """Get all configuration values."""
        return self._config.copy()

    @property
    def sample_api_url(self) -> str:
        return self.get('sample_api_url')

    @property
    def api_key(self) -> str:
        return self.get('api_key')

    @property
    def api_timeout(self) -> int:
        return self.get('api_timeout')

    @property
    def sync_interval(self) -> int:
        return self.get('sync_interval')

    @property
    def directory_source(self) -> str:
        return self.get('directory_source')

    @property
    def database_url(self) -> str:
        return self.get('database_url')

    @property
    def scan_log_retention_days(self) -> int:
        return self.get('scan_log_retention_days')

    @property
    def qr_scan_file(self) -> str:
        return self.get('qr_scan_file')

    @property
    def scan_poll_interval(self) -> float:
        return self.get('scan_poll_interval')

    @property
    def log_level(self) -> str:
        return self.get('log_level')

    @property
    def log_file(self) -> str:
        return self.get('log_file')

    @property
    def debug(self) -> bool:
        return self.get('debug')

    @property
    def app_version(self) -> str:
        return self.get('app_version')


# Global config instance
_config: Optional[ConfigManager] = None


def get_config() -> ConfigManager:
    """Get global configuration manager."""
    global _config
    if _config is None:
        _config = ConfigManager()
    return _config


def reset_config() -> None:
    """Drop the global configuration so the next get_config() reloads it."""
    global _config
    _config = None
