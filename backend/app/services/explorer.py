from __future__ import annotations
import enum
import logging
from collections import OrderedDict
from typing import Optional
from app.config import get_settings
from app.errors import LoadInProgressError, StoreQueryError
from app.schemas.token import PageCursor, SortOrder, TokenFilters, TokenRow
from app.services.enrichment import EnrichmentFetcher
from app.services.paging import fetch_token_page
from app.services.token_store import TokenStore

logger = logging.getLogger(__name__)
settings = get_settings()


class ExplorerState(str, enum.Enum):
    IDLE = "idle"
    LOADING_INITIAL = "loading_initial"
    LOADING_MORE = "loading_more"
    EXHAUSTED = "exhausted"


class TokenExplorer:
    """One browsing session over the token store.

    Holds the active filters, the page cursor and the rows loaded so far,
    keyed by mint in display order. Changing filters or sort order restarts
    from offset zero; ``load_more`` continues from the cursor. Only one load
    runs at a time per explorer. Hover enrichment runs independently and only
    touches the hovered row.
    """

    def __init__(
        self,
        store: TokenStore,
        fetcher: EnrichmentFetcher,
        page_size: Optional[int] = None,
        ath_multiplier: Optional[int] = None,
        ath_delay: Optional[float] = None,
    ):
        self.store = store
        self.fetcher = fetcher
        self.page_size = page_size or settings.page_size
        self.ath_multiplier = ath_multiplier or settings.ath_fetch_multiplier
        self.ath_delay = settings.ath_request_delay_seconds if ath_delay is None else ath_delay

        self.filters = TokenFilters()
        self.cursor = PageCursor()
        self.state = ExplorerState.IDLE
        self._previous_state = self.state
        self._rows: OrderedDict[str, TokenRow] = OrderedDict()

    @property
    def rows(self) -> list[TokenRow]:
        return list(self._rows.values())

    @property
    def is_loading(self) -> bool:
        return self.state in (ExplorerState.LOADING_INITIAL, ExplorerState.LOADING_MORE)

    def get_row(self, mint: str) -> Optional[TokenRow]:
        return self._rows.get(mint)

    # ── Filter-triggered loads ──

    async def apply_filters(self, filters: TokenFilters) -> bool:
        return await self._load_initial(filters)

    async def reset(self) -> bool:
        return await self._load_initial(TokenFilters())

    async def set_sort_order(self, sort_order: SortOrder) -> bool:
        return await self._load_initial(self.filters.model_copy(update={"sort_order": sort_order}))

    async def _load_initial(self, filters: TokenFilters) -> bool:
        self._begin(ExplorerState.LOADING_INITIAL)
        previous = self._previous_state
        try:
            page = await fetch_token_page(
                self.store,
                self.fetcher,
                filters,
                offset=0,
                initial=True,
                page_size=self.page_size,
                ath_multiplier=self.ath_multiplier,
                ath_delay=self.ath_delay,
            )
        except StoreQueryError as e:
            logger.error(f"Initial token load failed, keeping previous results: {e}")
            self.state = previous
            return False

        self.filters = filters
        self._rows = OrderedDict((row.mint, row) for row in page.rows)
        self.cursor = PageCursor(
            offset=page.next_offset,
            has_more=page.has_more,
            total=page.total or 0,
            total_is_estimate=page.total_is_estimate,
        )
        self.state = ExplorerState.IDLE if page.has_more else ExplorerState.EXHAUSTED
        return True

    # ── Incremental loads ──

    async def load_more(self) -> bool:
        """Append the next page. Returns False when nothing was loaded.

        A view that has not had an initial load has nothing to continue from.
        """
        if self.is_loading:
            raise LoadInProgressError(f"explorer is already in state {self.state.value}")
        if self.state is ExplorerState.EXHAUSTED or not self.cursor.has_more:
            return False
        self._begin(ExplorerState.LOADING_MORE)
        try:
            page = await fetch_token_page(
                self.store,
                self.fetcher,
                self.filters,
                offset=self.cursor.offset,
                initial=False,
                page_size=self.page_size,
                ath_multiplier=self.ath_multiplier,
                ath_delay=self.ath_delay,
            )
        except StoreQueryError as e:
            logger.error(f"Loading more tokens failed at offset {self.cursor.offset}: {e}")
            self.state = ExplorerState.IDLE
            return False

        for row in page.rows:
            self._rows.setdefault(row.mint, row)
        self.cursor = self.cursor.model_copy(
            update={"offset": page.next_offset, "has_more": page.has_more}
        )
        self.state = ExplorerState.IDLE if page.has_more else ExplorerState.EXHAUSTED
        return True

    def _begin(self, loading_state: ExplorerState):
        if self.is_loading:
            raise LoadInProgressError(f"explorer is already in state {self.state.value}")
        self._previous_state = self.state
        self.state = loading_state

    # ── Hover enrichment ──

    async def enrich(self, mint: str) -> Optional[TokenRow]:
        """Attach image, market cap and description to one row on hover.

        Rows that are unknown, already enriched or mid-enrichment are skipped.
        A failed lookup still marks the row enriched, with blank fields.
        """
        row = self._rows.get(mint)
        if row is None or row.is_enriched or row.is_loading_enrichment:
            return row

        self._merge(mint, is_loading_enrichment=True)
        metadata = await self.fetcher.fetch_metadata(mint)
        return self._merge(
            mint,
            image=metadata.image if metadata else None,
            market_cap=metadata.market_cap if metadata else None,
            description=metadata.description if metadata else None,
            is_enriched=True,
            is_loading_enrichment=False,
        )

    def _merge(self, mint: str, **fields) -> Optional[TokenRow]:
        row = self._rows.get(mint)
        if row is None:
            # View was reset while the lookup was in flight
            return None
        updated = row.model_copy(update=fields)
        self._rows[mint] = updated
        return updated
