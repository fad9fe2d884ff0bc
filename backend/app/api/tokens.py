from __future__ import annotations
from datetime import date
import httpx
from fastapi import APIRouter, Depends, HTTPException, Query, Request
from pydantic import ValidationError
from typing import Optional
from app.database import async_session
from app.errors import StoreQueryError
from app.schemas.token import SortOrder, TokenFilters, TokenListItem, TokenPageResponse
from app.services.enrichment import EnrichmentFetcher
from app.services.paging import fetch_token_page
from app.services.token_store import TokenStore

router = APIRouter(prefix="/api/tokens", tags=["tokens"])


def get_token_store() -> TokenStore:
    return TokenStore(async_session)


def get_enrichment_fetcher(request: Request) -> EnrichmentFetcher:
    # Reach /proxy in-process instead of looping back over the network
    return EnrichmentFetcher(
        base_url="http://token-explorer",
        transport=httpx.ASGITransport(app=request.app),
    )


@router.get("", response_model=TokenPageResponse)
async def list_tokens(
    start_date: Optional[date] = Query(None),
    end_date: Optional[date] = Query(None),
    min_ath_market_cap: Optional[float] = Query(None, ge=0),
    sort: SortOrder = Query(SortOrder.newest),
    offset: int = Query(0, ge=0),
    store: TokenStore = Depends(get_token_store),
    fetcher: EnrichmentFetcher = Depends(get_enrichment_fetcher),
):
    try:
        filters = TokenFilters(
            start_date=start_date,
            end_date=end_date,
            min_ath_market_cap=min_ath_market_cap,
            sort_order=sort,
        )
    except ValidationError:
        raise HTTPException(status_code=400, detail="end_date must not be before start_date")

    try:
        page = await fetch_token_page(store, fetcher, filters, offset=offset, initial=offset == 0)
    except StoreQueryError:
        raise HTTPException(status_code=503, detail="Token query failed")

    return TokenPageResponse(
        tokens=[TokenListItem.from_row(row) for row in page.rows],
        next_offset=page.next_offset,
        has_more=page.has_more,
        total=page.total,
        total_is_estimate=page.total_is_estimate,
    )
