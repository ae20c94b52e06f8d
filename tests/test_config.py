"""
Tests for configuration loading, validation and logging setup.
"""

import logging
import logging.handlers

import pytest

from slipscan.config import ConfigManager, get_config, reset_config, setup_logging
from slipscan.config.validator import ConfigValidator


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    for var in ('SAMPLE_API_URL', 'API_KEY', 'API_TIMEOUT', 'SYNC_INTERVAL', 'DIRECTORY_SOURCE',
                'DATABASE_URL', 'SCAN_LOG_RETENTION_DAYS', 'QR_SCAN_FILE', 'SCAN_POLL_INTERVAL',
                'LOG_LEVEL', 'DEBUG'):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setenv('LOG_FILE', str(tmp_path / 'logs' / 'scanner.log'))
    monkeypatch.setenv('DATABASE_URL', f"sqlite:///{tmp_path / 'scanner.db'}")
    reset_config()
    yield monkeypatch
    reset_config()


def test_defaults(clean_env):
    config = ConfigManager()

    assert config.directory_source == 'local'
    assert config.api_timeout == 30
    assert config.sync_interval == 600
    assert config.scan_log_retention_days == 30
    assert config.qr_scan_file == 'qr_scan_data.txt'
    assert config.scan_poll_interval == pytest.approx(0.1)
    assert config.debug is False


def test_environment_overrides(clean_env):
    clean_env.setenv('DIRECTORY_SOURCE', 'API')
    clean_env.setenv('SAMPLE_API_URL', 'https://samples.example.com')
    clean_env.setenv('DEBUG', 'true')

    config = get_config()
    assert config.directory_source == 'api'
    assert config.sample_api_url == 'https://samples.example.com'
    assert config.debug is True
    assert get_config() is config


def test_validator_accepts_local_defaults(clean_env):
    result = ConfigValidator.validate()

    assert result['valid'] is True
    assert any('SAMPLE_API_URL' in warning for warning in result['warnings'])


def test_validator_requires_url_for_api_directory(clean_env):
    clean_env.setenv('DIRECTORY_SOURCE', 'api')
    result = ConfigValidator.validate()

    assert result['valid'] is False
    assert any('SAMPLE_API_URL' in error for error in result['errors'])


@pytest.mark.parametrize("var,value", [
    ('DIRECTORY_SOURCE', 'mongo'),
    ('LOG_LEVEL', 'LOUD'),
    ('API_TIMEOUT', 'soon'),
    ('SYNC_INTERVAL', '0'),
    ('SCAN_POLL_INTERVAL', '-1'),
    ('SCAN_LOG_RETENTION_DAYS', '-5'),
])
def test_validator_rejects_bad_values(clean_env, var, value):
    clean_env.setenv(var, value)
    assert ConfigValidator.validate()['valid'] is False


def test_setup_logging_installs_handlers(tmp_path):
    root = logging.getLogger()
    saved = list(root.handlers)
    try:
        setup_logging({"log_level": "warning", "log_file": str(tmp_path / "logs" / "scanner.log")})

        assert root.level == logging.WARNING
        assert any(isinstance(h, logging.handlers.RotatingFileHandler) for h in root.handlers)
        assert (tmp_path / "logs").is_dir()
    finally:
        for handler in root.handlers:
            handler.close()
        root.handlers[:] = saved
