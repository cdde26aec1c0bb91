from pydantic_settings import BaseSettings
from pydantic import ConfigDict
from functools import lru_cache
from typing import Literal, Optional


class Settings(BaseSettings):
    model_config = ConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )
    # App
    environment: str = "development"
    log_level: str = "INFO"
    extra_allowed_origins: str = ""  # comma-separated preview/staging origins
    # Fetcher
    fetch_mode: Literal["direct", "relay"] = "direct"
    relay_url: str = "https://api.allorigins.win/get"
    user_agent: str = "Mozilla/5.0 (compatible; SEO-Analyzer/1.0)"
    request_timeout_seconds: int = 15
    probe_timeout_seconds: int = 8
    probe_well_known: bool = True
    # History
    history_limit: int = 10
    # MongoDB (optional; in-memory history when unset)
    mongo_uri: Optional[str] = None
    mongo_db_name: str = "sitescore"
    mongo_tls: bool = False
    # Rate limiting
    rate_limit_per_minute: int = 10
    # SSRF guard
    block_private_hosts: bool = True


@lru_cache()
def get_settings() -> Settings:
    return Settings()
