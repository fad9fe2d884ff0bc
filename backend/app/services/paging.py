from __future__ import annotations
import asyncio
import logging
import math
from dataclasses import dataclass
from typing import Optional
from app.config import get_settings
from app.schemas.token import TokenFilters, TokenRow
from app.services.enrichment import EnrichmentFetcher
from app.services.token_store import TokenStore

logger = logging.getLogger(__name__)
settings = get_settings()


@dataclass
class PageResult:
    rows: list[TokenRow]
    raw_count: int
    window: int
    next_offset: int
    has_more: bool
    # Only set on initial loads; incremental loads keep the first total
    total: Optional[int] = None
    total_is_estimate: bool = False


def estimate_total(unfiltered_total: int, kept: int, raw: int) -> int:
    """Scale the unfiltered total by the first page's ATH pass ratio.

    This is an approximation: a first page that is unrepresentative of the
    rest of the range skews it, and zero kept rows always estimates zero.
    """
    if raw <= 0 or kept <= 0:
        return 0
    # Halves round up
    return max(0, math.floor(unfiltered_total * kept / raw + 0.5))


async def filter_by_ath(
    rows: list[TokenRow],
    floor: float,
    fetcher: EnrichmentFetcher,
    delay: float,
) -> list[TokenRow]:
    """Keep rows whose all-time-high market cap is at least ``floor``.

    Lookups run one at a time with ``delay`` seconds between them to stay
    under the Solana Tracker rate limit. Rows without ATH data are dropped.
    """
    kept = []
    for row in rows:
        ath = await fetcher.fetch_all_time_high(row.mint)
        value = ath.highest_market_cap if ath else None
        if value is not None and value >= floor:
            kept.append(row.model_copy(update={"ath_market_cap": value}))
        await asyncio.sleep(delay)
    return kept


async def fetch_token_page(
    store: TokenStore,
    fetcher: EnrichmentFetcher,
    filters: TokenFilters,
    offset: int = 0,
    initial: bool = True,
    page_size: Optional[int] = None,
    ath_multiplier: Optional[int] = None,
    ath_delay: Optional[float] = None,
) -> PageResult:
    """Fetch one page of tokens for ``filters`` starting at raw ``offset``.

    The cursor advances by the number of raw rows the store returned, not by
    the number that survived ATH filtering. Raises StoreQueryError before
    producing any result if a store query fails.
    """
    page_size = page_size or settings.page_size
    ath_multiplier = ath_multiplier or settings.ath_fetch_multiplier
    ath_delay = settings.ath_request_delay_seconds if ath_delay is None else ath_delay
    floor = filters.ath_floor
    needs_ath = filters.needs_ath_filtering

    total: Optional[int] = None
    if initial and not needs_ath:
        total = await store.count(filters)

    window = page_size * ath_multiplier if needs_ath else page_size
    tokens = await store.fetch_page(filters, offset, window)
    raw_rows = [TokenRow.model_validate(t) for t in tokens]

    rows = raw_rows
    total_is_estimate = False
    if needs_ath and raw_rows:
        rows = await filter_by_ath(raw_rows, floor, fetcher, ath_delay)
        if initial:
            unfiltered_total = await store.count(filters) if rows else 0
            total = estimate_total(unfiltered_total, len(rows), len(raw_rows))
            total_is_estimate = True
    elif needs_ath and initial:
        total = 0
        total_is_estimate = True

    logger.info(
        f"Token page offset={offset} window={window} raw={len(raw_rows)} kept={len(rows)}"
        + (f" total={total}{'~' if total_is_estimate else ''}" if total is not None else "")
    )

    return PageResult(
        rows=rows,
        raw_count=len(raw_rows),
        window=window,
        next_offset=offset + len(raw_rows),
        has_more=len(raw_rows) == window,
        total=total,
        total_is_estimate=total_is_estimate,
    )
