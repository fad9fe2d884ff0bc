from __future__ import annotations
import httpx
from typing import Optional
from app.config import get_settings
from app.errors import UpstreamError

settings = get_settings()


class SolanaTrackerClient:
    """Client for the Solana Tracker data API. Requires an API key held server-side."""

    name = "solanatracker"

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key if api_key is not None else settings.solana_tracker_api_key
        self.base_url = (base_url or settings.solana_tracker_api_url).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.upstream_timeout_seconds
        self._transport = transport

    async def get_ath(self, mint: str) -> dict | list:
        """GET /tokens/{mint}/ath, all-time-high market cap data.

        The payload is returned as decoded JSON without reshaping.
        """
        if not self.api_key:
            raise UpstreamError(self.name, "API key not configured")

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                resp = await client.get(
                    f"{self.base_url}/tokens/{mint}/ath",
                    headers={"x-api-key": self.api_key},
                )
                resp.raise_for_status()
                return resp.json()
        except httpx.HTTPStatusError as e:
            raise UpstreamError(self.name, f"HTTP {e.response.status_code}", e.response.status_code) from e
        except (httpx.HTTPError, ValueError) as e:
            raise UpstreamError(self.name, str(e) or type(e).__name__) from e


solana_tracker_client = SolanaTrackerClient()
