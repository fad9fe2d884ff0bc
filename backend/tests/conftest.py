"""Shared fixtures: a throwaway SQLite token store and a scripted enrichment fetcher."""
import sys
import os
from datetime import date
from typing import Optional

import pytest_asyncio

# Add backend to path so the app package imports without installation
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from app.database import init_db, make_engine, make_session_factory
from app.models.token import Token
from app.schemas.token import AllTimeHigh, TokenMetadata
from app.services.token_store import TokenStore, day_start_timestamp

DAY = 86400
JAN_1 = day_start_timestamp(date(2025, 1, 1))


class FakeFetcher:
    """Scripted stand-in for EnrichmentFetcher that records every call."""

    def __init__(
        self,
        ath: Optional[dict[str, float]] = None,
        metadata: Optional[dict[str, TokenMetadata]] = None,
    ):
        self.ath = ath or {}
        self.metadata = metadata or {}
        self.ath_calls: list[str] = []
        self.metadata_calls: list[str] = []

    async def fetch_all_time_high(self, mint: str) -> Optional[AllTimeHigh]:
        self.ath_calls.append(mint)
        if mint not in self.ath:
            return None
        return AllTimeHigh(highest_market_cap=self.ath[mint])

    async def fetch_metadata(self, mint: str) -> Optional[TokenMetadata]:
        self.metadata_calls.append(mint)
        return self.metadata.get(mint)


class FailingStore:
    """Token store whose every query fails."""

    def __init__(self, exc: Exception):
        self.exc = exc

    async def count(self, filters):
        raise self.exc

    async def fetch_page(self, filters, offset, limit):
        raise self.exc


def make_tokens(count: int, start: int = JAN_1, step: int = 3600) -> list[Token]:
    return [
        Token(mint=f"mint{i:04d}", name=f"Token {i}", symbol=f"T{i}", created_at=start + i * step)
        for i in range(count)
    ]


@pytest_asyncio.fixture
async def session_factory(tmp_path):
    engine = make_engine(f"sqlite+aiosqlite:///{tmp_path / 'tokens.db'}")
    await init_db(engine)
    yield make_session_factory(engine)
    await engine.dispose()


@pytest_asyncio.fixture
async def seed(session_factory):
    async def _seed(tokens: list[Token]) -> TokenStore:
        async with session_factory() as db:
            db.add_all(tokens)
            await db.commit()
        return TokenStore(session_factory)

    return _seed
