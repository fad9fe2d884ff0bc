from __future__ import annotations
from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    database_url: str = "sqlite+aiosqlite:///./token_explorer.db"

    solana_tracker_api_key: str = ""

    pump_fun_api_url: str = "https://frontend-api-v3.pump.fun"
    solana_tracker_api_url: str = "https://data.solanatracker.io"
    upstream_timeout_seconds: float = 15.0

    # Where the enrichment fetcher reaches /proxy when not running in-process
    gateway_base_url: str = "http://localhost:8000"

    frontend_url: str = "http://localhost:3000"
    extra_cors_origins: str = ""  # comma-separated additional origins for production

    # Pagination settings
    page_size: int = 30
    ath_fetch_multiplier: int = 3  # raw window = page_size * multiplier when ATH floor is set
    ath_request_delay_seconds: float = 0.1  # spacing between sequential ATH lookups

    model_config = {"env_file": ".env", "extra": "ignore"}

    def missing_secrets(self) -> list[str]:
        missing = []
        if not self.solana_tracker_api_key:
            missing.append("SOLANA_TRACKER_API_KEY")
        if not self.database_url:
            missing.append("DATABASE_URL")
        return missing


@lru_cache()
def get_settings() -> Settings:
    return Settings()
