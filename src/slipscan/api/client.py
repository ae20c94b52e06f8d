"""
Sample API client for directory lookups and sync
"""

import logging
import requests
from typing import Any, List

from ..database.models import Sample

logger = logging.getLogger(__name__)


class SampleAPIClient:
    """Simple API client for the sample tracking server."""

    def __init__(self, config_manager):
        self.config = config_manager

        self.base_url = (self.config.sample_api_url or "").rstrip("/")
        if not self.base_url:
            raise ValueError("SAMPLE_API_URL configuration is required")

        self.headers = {'Accept': 'application/json'}
        if self.config.api_key:
            self.headers['Authorization'] = f"Bearer {self.config.api_key}"

        self.timeout = self.config.api_timeout

        logger.info(f"Sample API client initialized for {self.base_url}")

    def _make_request(self, endpoint: str) -> Any:
        """Make GET request and return the decoded JSON body."""
        url = f"{self.base_url}{endpoint}"

        try:
            response = requests.get(url, headers=self.headers, timeout=self.timeout)
            response.raise_for_status()
            return response.json()

        except requests.exceptions.Timeout:
            logger.error(f"API request timeout: {endpoint}")
            raise
        except requests.exceptions.RequestException as e:
            logger.error(f"API request failed: {endpoint} - {e}")
            raise

    def list_samples(self) -> List[Sample]:
        """Fetch the full sample list, in server order."""
        data = self._make_request('/api/samples')
        if not isinstance(data, list):
            raise ValueError(f"Unexpected sample list response: {type(data).__name__}")

        samples = []
        for entry in data:
            try:
                samples.append(Sample.model_validate(entry))
            except ValueError as e:
                logger.warning(f"Skipping malformed sample record: {e}")
        logger.debug(f"Fetched {len(samples)} samples")
        return samples
