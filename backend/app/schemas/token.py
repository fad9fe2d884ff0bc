from __future__ import annotations
from datetime import date, datetime, timezone
from enum import Enum
from typing import List, Optional
from pydantic import BaseModel, Field, model_validator
from app.services.formatting import format_market_cap, short_mint, truncate_description


class SortOrder(str, Enum):
    newest = "newest"
    oldest = "oldest"

    @property
    def ascending(self) -> bool:
        return self is SortOrder.oldest


class TokenFilters(BaseModel):
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    min_ath_market_cap: Optional[float] = Field(None, ge=0)
    sort_order: SortOrder = SortOrder.newest

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def check_date_range(self) -> "TokenFilters":
        if self.start_date and self.end_date and self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        return self

    @property
    def ath_floor(self) -> float:
        return self.min_ath_market_cap or 0.0

    @property
    def needs_ath_filtering(self) -> bool:
        return self.ath_floor > 0


class TokenMetadata(BaseModel):
    """Subset of the pump.fun coin payload exposed by /proxy/metadata."""

    image: Optional[str] = None
    market_cap: Optional[float] = Field(None, alias="marketCap")
    description: Optional[str] = None

    model_config = {"populate_by_name": True}


class AllTimeHigh(BaseModel):
    highest_market_cap: Optional[float] = None

    model_config = {"extra": "allow"}


class TokenRow(BaseModel):
    mint: str
    name: str
    symbol: str
    created_at: int
    image: Optional[str] = None
    market_cap: Optional[float] = None
    description: Optional[str] = None
    ath_market_cap: Optional[float] = None
    is_enriched: bool = False
    is_loading_enrichment: bool = False

    model_config = {"from_attributes": True}

    @property
    def created_at_iso(self) -> str:
        return datetime.fromtimestamp(self.created_at, tz=timezone.utc).isoformat()

    @property
    def short_mint(self) -> str:
        return short_mint(self.mint)

    @property
    def description_preview(self) -> Optional[str]:
        return truncate_description(self.description) if self.description else None

    @property
    def solscan_url(self) -> str:
        return f"https://solscan.io/token/{self.mint}"

    @property
    def pump_fun_url(self) -> str:
        return f"https://pump.fun/coins/{self.mint}"

    @property
    def axiom_url(self) -> str:
        return f"https://axiom.trade/t/{self.mint}"


class PageCursor(BaseModel):
    offset: int = 0
    has_more: bool = False
    total: int = 0
    total_is_estimate: bool = False


class TokenListItem(BaseModel):
    mint: str
    name: str
    symbol: str
    created_at: int
    created_at_iso: str
    ath_market_cap: Optional[float] = None
    ath_market_cap_display: str
    short_mint: str
    solscan_url: str
    pump_fun_url: str
    axiom_url: str

    @classmethod
    def from_row(cls, row: TokenRow) -> "TokenListItem":
        return cls(
            mint=row.mint,
            name=row.name,
            symbol=row.symbol,
            created_at=row.created_at,
            created_at_iso=row.created_at_iso,
            ath_market_cap=row.ath_market_cap,
            ath_market_cap_display=format_market_cap(row.ath_market_cap),
            short_mint=row.short_mint,
            solscan_url=row.solscan_url,
            pump_fun_url=row.pump_fun_url,
            axiom_url=row.axiom_url,
        )


class TokenPageResponse(BaseModel):
    tokens: List[TokenListItem]
    next_offset: int
    has_more: bool
    total: Optional[int] = None
    total_is_estimate: bool = False
