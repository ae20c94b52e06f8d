"""
Simple configuration validator for environment variables.
"""

import os
from pathlib import Path
from typing import Dict, Any

VALID_DIRECTORY_SOURCES = ('api', 'local')


class ConfigValidator:
    """Validates configuration values."""

    @staticmethod
    def validate() -> Dict[str, Any]:
        """
        Validate configuration and return errors/warnings.

        Returns:
            Dict with 'errors' and 'warnings' lists, and 'valid' boolean
        """
        errors = []
        warnings = []

        # Validate directory source
        source = os.getenv('DIRECTORY_SOURCE', 'local').lower()
        if source not in VALID_DIRECTORY_SOURCES:
            errors.append(f"Invalid DIRECTORY_SOURCE '{source}'. Must be one of: {', '.join(VALID_DIRECTORY_SOURCES)}")

        api_url = os.getenv('SAMPLE_API_URL', '')
        if source == 'api' and not api_url:
            errors.append("SAMPLE_API_URL not set - required when DIRECTORY_SOURCE is 'api'")
        elif not api_url:
            warnings.append("SAMPLE_API_URL not set - local sample cache will not be synchronized")
        elif not api_url.startswith(('http://', 'https://')):
            errors.append(f"Invalid SAMPLE_API_URL '{api_url}'. Must start with http:// or https://")

        # Validate numeric settings
        for var, default in (('API_TIMEOUT', '30'), ('SYNC_INTERVAL', '600')):
            try:
                if int(os.getenv(var, default)) <= 0:
                    errors.append(f"{var} must be a positive integer")
            except ValueError:
                errors.append(f"{var} must be a valid integer")

        try:
            if int(os.getenv('SCAN_LOG_RETENTION_DAYS', '30')) < 0:
                errors.append("SCAN_LOG_RETENTION_DAYS must be zero or a positive integer")
        except ValueError:
            errors.append("SCAN_LOG_RETENTION_DAYS must be a valid integer")

        try:
            if int(os.getenv('SCAN_LOG_RETENTION_DAYS', '30')) < 0:
                errors.append("SCAN_LOG_RETENTION_DAYS must be zero or a positive integer")
        except ValueError:
            errors.append("SCAN_LOG_RETENTION_DAYS must be a valid integer")

        try:
            if float(os.getenv('SCAN_POLL_INTERVAL', '0.1')) <= 0:
                errors.append("SCAN_POLL_INTERVAL must be positive")
        except ValueError:
            errors.append("SCAN_POLL_INTERVAL must be a number")

        # Validate log level
        log_level = os.getenv('LOG_LEVEL', 'INFO').upper()
        valid_levels = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
        if log_level not in valid_levels:
            errors.append(f"Invalid LOG_LEVEL '{log_level}'. Must be one of: {', '.join(valid_levels)}")

        # Check if log directory can be created
        log_file = os.getenv('LOG_FILE', 'logs/scanner.log')
        log_path = Path(log_file)
        try:
            log_path.parent.mkdir(parents=True, exist_ok=True)
        except Exception as e:
            errors.append(f"Cannot create log directory: {e}")

        # Check database directory
        database_url = os.getenv('DATABASE_URL', 'sqlite:///sample_scanner.db')
        if database_url.startswith('sqlite:///'):
            db_path = Path(database_url[10:])  # Remove 'sqlite:///'
            try:
                db_path.parent.mkdir(parents=True, exist_ok=True)
            except Exception as e:
                errors.append(f"Cannot create database directory: {e}")

        return {
            'errors': errors,
            'warnings': warnings,
            'valid': len(errors) == 0
        }


def validate_config() -> bool:
    """Validate configuration and print results."""
    result = ConfigValidator.validate()

    if result['errors']:
        print("Configuration errors:")
        for error in result['errors']:
            print(f"  ERROR: {error}")

    if result['warnings']:
        print("Configuration warnings:")
        for warning in result['warnings']:
            print(f"  WARNING: {warning}")

    return result['valid']
