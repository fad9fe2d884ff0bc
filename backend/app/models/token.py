from __future__ import annotations
from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column
from app.database import Base


class Token(Base):
    """A minted token as written by the upstream indexer. Read-only here."""

    __tablename__ = "tokens"

    mint: Mapped[str] = mapped_column(String(44), primary_key=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    symbol: Mapped[str] = mapped_column(String(20), nullable=False, default="")
    # Seconds since epoch; the indexer writes the camelCase column name
    created_at: Mapped[int] = mapped_column("createdAt", Integer, nullable=False, index=True)
