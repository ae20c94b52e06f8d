"""
Sample API module for directory lookups and sync
"""

from .client import SampleAPIClient
from .service import DirectorySyncService

__all__ = ['SampleAPIClient', 'DirectorySyncService']
