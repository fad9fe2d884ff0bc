"""EnrichmentFetcher absorbs every gateway failure into None."""
import httpx
import pytest

from app.main import app
from app.api.proxy import get_pump_fun_client
from app.services.enrichment import EnrichmentFetcher
from app.services.pump_fun import PumpFunClient

MINT = "So11111111111111111111111111111111111111112"


def fetcher_for(handler) -> EnrichmentFetcher:
    return EnrichmentFetcher(base_url="https://gateway.test", transport=httpx.MockTransport(handler))


@pytest.mark.asyncio
async def test_fetch_metadata_parses_gateway_payload():
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(200, json={"image": "https://img/x.png", "marketCap": 5000})

    metadata = await fetcher_for(handler).fetch_metadata(MINT)

    assert metadata.image == "https://img/x.png"
    assert metadata.market_cap == 5000
    assert metadata.description is None
    assert seen[0].url.path == "/proxy/metadata"
    assert seen[0].url.params["id"] == MINT


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(502, json={"detail": "Failed to fetch token metadata"}),
        httpx.Response(200, content=b""),
        httpx.Response(200, text="not json"),
        httpx.Response(200, json=["a", "list"]),
        httpx.Response(200, json={"image": {"nested": True}}),
    ],
)
async def test_fetch_metadata_failures_are_absent(response):
    assert await fetcher_for(lambda request: response).fetch_metadata(MINT) is None


@pytest.mark.asyncio
async def test_transport_error_is_absent():
    def handler(request):
        raise httpx.ReadTimeout("timed out", request=request)

    fetcher = fetcher_for(handler)
    assert await fetcher.fetch_metadata(MINT) is None
    assert await fetcher.fetch_all_time_high(MINT) is None


@pytest.mark.asyncio
async def test_blank_mint_never_reaches_gateway():
    calls = []
    fetcher = fetcher_for(lambda request: calls.append(request) or httpx.Response(200, json={}))
    assert await fetcher.fetch_metadata("") is None
    assert await fetcher.fetch_all_time_high("") is None
    assert calls == []


@pytest.mark.asyncio
async def test_fetch_all_time_high_keeps_extra_fields():
    payload = {"highest_market_cap": 250000.0, "timestamp": 1735689600000}
    ath = await fetcher_for(lambda request: httpx.Response(200, json=payload)).fetch_all_time_high(MINT)
    assert ath.highest_market_cap == 250000.0
    assert ath.model_extra == {"timestamp": 1735689600000}


@pytest.mark.asyncio
async def test_repeated_calls_are_not_cached():
    calls = []

    def handler(request):
        calls.append(request)
        return httpx.Response(200, json={"highest_market_cap": 1.0})

    fetcher = fetcher_for(handler)
    await fetcher.fetch_all_time_high(MINT)
    await fetcher.fetch_all_time_high(MINT)
    assert len(calls) == 2


@pytest.mark.asyncio
async def test_upstream_500_through_gateway_yields_absent_metadata():
    app.dependency_overrides[get_pump_fun_client] = lambda: PumpFunClient(
        base_url="https://pump.test",
        transport=httpx.MockTransport(lambda request: httpx.Response(500)),
    )
    try:
        fetcher = EnrichmentFetcher(base_url="http://token-explorer", transport=httpx.ASGITransport(app=app))
        assert await fetcher.fetch_metadata(MINT) is None
    finally:
        app.dependency_overrides.clear()
