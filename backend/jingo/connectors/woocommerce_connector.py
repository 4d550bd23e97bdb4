"""
WooCommerce REST API Connector
Read-only access to the legacy store used by the one-off import
"""
import logging
from typing import Any, Dict, List, Optional

import httpx

from jingo.core.config import settings
from jingo.core.exceptions import ExternalServiceError

logger = logging.getLogger(__name__)


class WooCommerceConnector:
    """
    Connector for the WooCommerce v3 REST API

    Authenticates with the consumer key/secret over HTTP basic auth.
    """

    def __init__(self, base_url: str = None, consumer_key: str = None, consumer_secret: str = None,
                 timeout: float = 30.0):
        self.base_url = (base_url or settings.WC_URL or "").rstrip("/")
        self.consumer_key = consumer_key or settings.WC_CONSUMER_KEY
        self.consumer_secret = consumer_secret or settings.WC_CONSUMER_SECRET

        if not all([self.base_url, self.consumer_key, self.consumer_secret]):
            raise ValueError("WooCommerce credentials not configured. Set WC_URL, WC_CONSUMER_KEY and WC_CONSUMER_SECRET")

        self.timeout = timeout
        self.api_calls = 0

    @property
    def api_url(self) -> str:
        return f"{self.base_url}/wp-json/wc/v3"

    def _auth(self) -> httpx.BasicAuth:
        return httpx.BasicAuth(self.consumer_key, self.consumer_secret)

    async def _get(self, endpoint: str, params: Optional[Dict[str, Any]] = None) -> Any:
        url = f"{self.api_url}/{endpoint}"

        async with httpx.AsyncClient(auth=self._auth(), timeout=self.timeout) as client:
            try:
                response = await client.get(url, params=params)
                self.api_calls += 1
                response.raise_for_status()
                return response.json()

            except httpx.HTTPStatusError as e:
                logger.error(f"WC API error: {e.response.status_code} {e.response.reason_phrase} ({endpoint})")
                raise ExternalServiceError(f"WC API error: {e.response.status_code} {e.response.reason_phrase}")
            except httpx.HTTPError as e:
                logger.error(f"WC API request error ({endpoint}): {e}")
                raise ExternalServiceError(f"WC API request error: {e}")

    async def get_categories(self, per_page: int = 100) -> List[Dict[str, Any]]:
        return await self._get("products/categories", {"per_page": per_page})

    async def get_products(self, page: int = 1, per_page: int = 100, status: str = "publish") -> List[Dict[str, Any]]:
        return await self._get("products", {"per_page": per_page, "page": page, "status": status})

    async def get_total_pages(self, endpoint: str = "products", per_page: int = 100) -> int:
        """Page count from the x-wp-totalpages header of a HEAD request"""
        async with httpx.AsyncClient(auth=self._auth(), timeout=self.timeout) as client:
            response = await client.head(f"{self.api_url}/{endpoint}", params={"per_page": per_page})
            self.api_calls += 1

        return int(response.headers.get("x-wp-totalpages") or 1)

    async def download(self, url: str) -> Optional[bytes]:
        """Fetch a file (product image); None when the download fails"""
        async with httpx.AsyncClient(timeout=self.timeout, follow_redirects=True) as client:
            try:
                response = await client.get(url)
                response.raise_for_status()
                return response.content

            except httpx.HTTPError as e:
                logger.error(f"Failed to download {url}: {e}")
                return None
