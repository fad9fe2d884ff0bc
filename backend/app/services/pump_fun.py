from __future__ import annotations
import httpx
from typing import Optional
from app.config import get_settings
from app.errors import UpstreamError

settings = get_settings()

# pump.fun rejects requests without a browser-like User-Agent
BROWSER_USER_AGENT = "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36"


class PumpFunClient:
    """Client for the pump.fun frontend API (public, no auth required)."""

    name = "pump.fun"

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = (base_url or settings.pump_fun_api_url).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.upstream_timeout_seconds
        self._transport = transport

    async def get_coin(self, mint: str) -> dict:
        """GET /coins/{mint}, the full coin payload.

        Raises UpstreamError on transport failure, non-2xx status or a body
        that is not a JSON object.
        """
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                resp = await client.get(
                    f"{self.base_url}/coins/{mint}",
                    headers={"User-Agent": BROWSER_USER_AGENT},
                )
                resp.raise_for_status()
                data = resp.json()
        except httpx.HTTPStatusError as e:
            raise UpstreamError(self.name, f"HTTP {e.response.status_code}", e.response.status_code) from e
        except (httpx.HTTPError, ValueError) as e:
            raise UpstreamError(self.name, str(e) or type(e).__name__) from e

        if not isinstance(data, dict):
            raise UpstreamError(self.name, "unexpected payload shape")
        return data


pump_fun_client = PumpFunClient()
