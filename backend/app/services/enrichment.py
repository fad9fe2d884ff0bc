from __future__ import annotations
import logging
import httpx
from typing import Optional
from pydantic import ValidationError
from app.config import get_settings
from app.schemas.token import AllTimeHigh, TokenMetadata

logger = logging.getLogger(__name__)
settings = get_settings()


class EnrichmentFetcher:
    """Fetches per-token enrichment through the /proxy gateway.

    Every failure is absorbed and reported as None: a missing image or ATH
    must never abort the page load or hover that asked for it. Results are
    not cached; repeated calls for the same mint hit the gateway again.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = (base_url or settings.gateway_base_url).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.upstream_timeout_seconds
        self._transport = transport

    async def _get_json(self, path: str, mint: str) -> Optional[dict]:
        if not mint:
            return None
        try:
            async with httpx.AsyncClient(
                base_url=self.base_url, timeout=self.timeout, transport=self._transport
            ) as client:
                resp = await client.get(path, params={"id": mint})
                resp.raise_for_status()
                if not resp.content.strip():
                    return None
                data = resp.json()
        except httpx.HTTPStatusError as e:
            logger.warning(f"Enrichment {path} failed for {mint}: HTTP {e.response.status_code}")
            return None
        except (httpx.HTTPError, ValueError) as e:
            logger.warning(f"Enrichment {path} failed for {mint}: {e}")
            return None

        if not isinstance(data, dict):
            logger.warning(f"Enrichment {path} returned non-object payload for {mint}")
            return None
        return data

    async def fetch_metadata(self, mint: str) -> Optional[TokenMetadata]:
        """Image, current market cap and description for one token."""
        data = await self._get_json("/proxy/metadata", mint)
        if data is None:
            return None
        try:
            return TokenMetadata.model_validate(data)
        except ValidationError as e:
            logger.warning(f"Malformed metadata for {mint}: {e}")
            return None

    async def fetch_all_time_high(self, mint: str) -> Optional[AllTimeHigh]:
        data = await self._get_json("/proxy/all-time-high", mint)
        if data is None:
            return None
        try:
            return AllTimeHigh.model_validate(data)
        except ValidationError as e:
            logger.warning(f"Malformed ATH payload for {mint}: {e}")
            return None
