"""
HTTP client for the taxonomy and content endpoints.

Used by SelectionController to load the nested category list and to run the
filtered content queries. Transient transport errors and 429/5xx responses
are retried with exponential backoff before the failure is reported.
"""

import logging
from dataclasses import dataclass
from typing import Any, Optional

import httpx
from tenacity import (
    AsyncRetrying,
    stop_after_attempt,
    wait_exponential,
    retry_if_exception,
    before_sleep_log,
)

from inkwell.core.config import settings
from inkwell.services.taxonomies import Taxonomy

logger = logging.getLogger(__name__)

RETRYABLE_STATUS_CODES = (429, 500, 502, 503, 504)


def is_retryable(exc: BaseException) -> bool:
    """Timeouts, dropped connections and overloaded servers are worth another try."""
    if isinstance(exc, (httpx.TimeoutException, httpx.NetworkError)):
        return True
    if isinstance(exc, httpx.HTTPStatusError):
        return exc.response.status_code in RETRYABLE_STATUS_CODES
    return False


@dataclass(frozen=True)
class ContentFilter:
    """The filter a selection state imposes on the content listing."""

    category_id: Optional[str] = None
    subcategory_id: Optional[str] = None

    def to_params(self) -> dict[str, str]:
        params = {}
        if self.category_id is not None:
            params["categoryId"] = str(self.category_id)
        if self.subcategory_id is not None:
            params["subCategoryId"] = str(self.subcategory_id)
        return params


class TaxonomyClient:
    def __init__(
        self,
        taxonomy: Taxonomy,
        base_url: Optional[str] = None,
        token: Optional[str] = None,
        client: Optional[httpx.AsyncClient] = None,
        retry_attempts: Optional[int] = None,
        min_wait: float = 1,
        max_wait: float = 10,
        timeout: Optional[float] = None,
    ):
        self.taxonomy = taxonomy
        self.retry_attempts = retry_attempts or settings.CLIENT_RETRY_ATTEMPTS
        self.min_wait = min_wait
        self.max_wait = max_wait

        token = token or settings.API_TOKEN
        headers = {"Authorization": f"Bearer {token}"} if token else {}
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            base_url=base_url or settings.API_BASE_URL,
            headers=headers,
            timeout=timeout or settings.CLIENT_TIMEOUT_SECONDS,
        )

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.aclose()

    async def aclose(self):
        if self._owns_client:
            await self._client.aclose()

    async def fetch_categories(self, featured_only: bool = False) -> list[dict[str, Any]]:
        """Active categories with their active subcategories embedded."""
        params = {"active": "true"}
        if featured_only:
            params["featured"] = "true"
        return await self._get_items(f"/{self.taxonomy.category_path}/with-children", params)

    async def fetch_content(
        self,
        content_filter: ContentFilter,
        limit: int = 20,
        offset: int = 0,
    ) -> list[dict[str, Any]]:
        params = {**content_filter.to_params(), "limit": limit, "offset": offset}
        return await self._get_items(f"/{self.taxonomy.content_path}", params)

    async def _get_items(self, path: str, params: Optional[dict] = None) -> list[dict[str, Any]]:
        data = await self._get_json(path, params)
        items = data.get("items") if isinstance(data, dict) else None
        if not isinstance(items, list):
            raise ValueError(f"Malformed response from {path}: missing items list")
        return items

    async def _get_json(self, path: str, params: Optional[dict] = None) -> Any:
        retrying = AsyncRetrying(
            stop=stop_after_attempt(self.retry_attempts),
            wait=wait_exponential(multiplier=1, min=self.min_wait, max=self.max_wait),
            retry=retry_if_exception(is_retryable),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            reraise=True,
        )
        async for attempt in retrying:
            with attempt:
                response = await self._client.get(path, params=params)
                response.raise_for_status()
        return response.json()
