# app/services/product_client.py
import asyncio
import logging
from typing import Any, Dict, Optional
from urllib.parse import quote

import httpx

from app.config import Settings, settings as default_settings
from app.core.errors import ProductLookupError

logger = logging.getLogger(__name__)


class ProductClient:
    """
    HTTP client for the product service: GET {base_url}/api/products/{product_id}.

    Every failure mode (connection error, timeout, non-2xx, body that is not a
    JSON object) is raised as ProductLookupError so callers handle one type.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        settings: Settings = default_settings,
    ):
        self.base_url = (base_url or settings.product_base_url).rstrip("/")
        self.timeout = settings.PRODUCT_LOOKUP_TIMEOUT if timeout is None else timeout
        self.transport = transport
        self.placeholder_image = settings.PLACEHOLDER_IMAGE

    def session(self) -> httpx.AsyncClient:
        """One pooled client per batch of lookups; use as an async context manager."""
        return httpx.AsyncClient(
            base_url=self.base_url,
            timeout=httpx.Timeout(self.timeout),
            transport=self.transport,
        )

    @staticmethod
    def product_path(product_id: str) -> str:
        # one path segment: "/", "?", "#" and dot-segments in an id must not change the target
        segment = quote(str(product_id), safe="")
        if segment in (".", ".."):
            segment = segment.replace(".", "%2E")
        return f"/api/products/{segment}"

    async def fetch_product(self, client: httpx.AsyncClient, product_id: str) -> Dict[str, Any]:
        try:
            # httpx timeouts are per phase; wait_for bounds the whole lookup
            response = await asyncio.wait_for(client.get(self.product_path(product_id)), timeout=self.timeout)
            response.raise_for_status()
            payload = response.json()
        except (httpx.TimeoutException, asyncio.TimeoutError):
            raise ProductLookupError(product_id, f"timed out after {self.timeout}s")
        except httpx.HTTPStatusError as e:
            raise ProductLookupError(product_id, f"HTTP {e.response.status_code}")
        except httpx.HTTPError as e:
            raise ProductLookupError(product_id, f"{type(e).__name__}: {e}")
        except ValueError:
            raise ProductLookupError(product_id, "response is not valid JSON")

        if not isinstance(payload, dict):
            raise ProductLookupError(product_id, "response is not a JSON object")
        return payload
