from __future__ import annotations
from typing import Optional


def format_market_cap(value: Optional[float]) -> str:
    if not value:
        return "N/A"
    if value >= 1_000_000:
        return f"${value / 1_000_000:.2f}M"
    if value >= 1_000:
        return f"${value / 1_000:.2f}k"
    return f"${value:.2f}"


def short_mint(mint: str) -> str:
    return f"{mint[:4]}...{mint[-4:]}"


def truncate_description(description: str, limit: int = 8) -> str:
    if len(description) <= limit:
        return description
    return description[:limit] + "..."
