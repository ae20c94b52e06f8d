"""
Simplified configuration management package.
"""

from .config_manager import ConfigManager, get_config, reset_config
from .validator import validate_config
from .logging_config import setup_logging

__all__ = [
    'ConfigManager',
    'get_config',
    'reset_config',
    'validate_config',
    'setup_logging',
]
