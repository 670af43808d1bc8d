"""HTTP client for the schedule page."""
import logging
from typing import Optional

import httpx

from bbnotify.config import Config
from bbnotify.errors import FetchError

logger = logging.getLogger(__name__)


class FetchClient:
    """Fetches the schedule page. One GET, no retries."""

    def __init__(self, config: Config, client: Optional[httpx.Client] = None):
        self.client = client or httpx.Client(
            timeout=config.timeout,
            follow_redirects=True,
        )

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.client.close()

    def fetch_page(self, url: str) -> bytes:
        """Return the raw page bytes (the page is EUC-JP, not decoded here)."""
        try:
            response = self.client.get(url)
        except httpx.HTTPError as e:
            logger.warning(f"Network error for {url}: {e}")
            raise FetchError(f"Failed to fetch {url}: {e}") from e

        if response.is_error:
            raise FetchError(f"Failed to fetch {url}: HTTP {response.status_code}")

        logger.info(f"Fetched {url} ({len(response.content)} bytes)")
        return response.content
