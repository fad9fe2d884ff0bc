from __future__ import annotations
import logging
from datetime import date, datetime, time, timedelta, timezone
from sqlalchemy import Select, and_, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from typing import Optional
from app.errors import StoreQueryError
from app.models.token import Token
from app.schemas.token import TokenFilters

logger = logging.getLogger(__name__)


def day_start_timestamp(day: date) -> int:
    """Seconds since epoch at 00:00:00 UTC of the given day."""
    return int(datetime.combine(day, time.min, tzinfo=timezone.utc).timestamp())


def created_at_bounds(filters: TokenFilters) -> tuple[Optional[int], Optional[int]]:
    """Inclusive lower and exclusive upper bound on Token.created_at.

    The end date covers its whole day, so the upper bound is the start of
    the following day.
    """
    lower = day_start_timestamp(filters.start_date) if filters.start_date else None
    upper = day_start_timestamp(filters.end_date + timedelta(days=1)) if filters.end_date else None
    return lower, upper


def _date_conditions(filters: TokenFilters) -> list:
    lower, upper = created_at_bounds(filters)
    conditions = []
    if lower is not None:
        conditions.append(Token.created_at >= lower)
    if upper is not None:
        conditions.append(Token.created_at < upper)
    return conditions


def build_count_query(filters: TokenFilters) -> Select:
    query = select(func.count()).select_from(Token)
    conditions = _date_conditions(filters)
    if conditions:
        query = query.where(and_(*conditions))
    return query


def build_page_query(filters: TokenFilters, offset: int, limit: int) -> Select:
    query = select(Token)
    conditions = _date_conditions(filters)
    if conditions:
        query = query.where(and_(*conditions))

    # mint breaks ties between tokens minted in the same second
    if filters.sort_order.ascending:
        query = query.order_by(Token.created_at.asc(), Token.mint.asc())
    else:
        query = query.order_by(Token.created_at.desc(), Token.mint.desc())
    return query.offset(offset).limit(limit)


class TokenStore:
    """Read-only access to the tokens table."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    async def count(self, filters: TokenFilters) -> int:
        try:
            async with self._session_factory() as db:
                result = await db.execute(build_count_query(filters))
                return result.scalar() or 0
        except SQLAlchemyError as e:
            logger.error(f"Token count query failed: {e}")
            raise StoreQueryError("token count query failed") from e

    async def fetch_page(self, filters: TokenFilters, offset: int, limit: int) -> list[Token]:
        try:
            async with self._session_factory() as db:
                result = await db.execute(build_page_query(filters, offset, limit))
                return list(result.scalars().all())
        except SQLAlchemyError as e:
            logger.error(f"Token page query failed at offset {offset}: {e}")
            raise StoreQueryError("token page query failed") from e
