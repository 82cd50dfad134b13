import os
from dataclasses import dataclass
from functools import lru_cache

import redis.asyncio as redis
from dotenv import load_dotenv
from supabase import AsyncClient, acreate_client

load_dotenv()

FUZZY_STRATEGIES = ("best", "first")


@dataclass(frozen=True)
class Settings:
    """Application settings loaded from environment variables."""

    # Datastore
    supabase_url: str = os.getenv("SUPABASE_URL", "http://localhost:54321")
    supabase_key: str = os.getenv("SUPABASE_KEY", "")

    # Redis (shared catalog snapshot)
    redis_url: str = os.getenv("REDIS_URL", "redis://localhost:6379")
    redis_password: str | None = os.getenv("REDIS_PASSWORD")

    # Entity catalog
    catalog_ttl: int = int(os.getenv("CATALOG_TTL", "3600"))  # 1 hour default
    catalog_failure_ttl: int = int(os.getenv("CATALOG_FAILURE_TTL", "60"))
    catalog_redis_prefix: str = os.getenv("CATALOG_REDIS_PREFIX", "listing_catalog")
    # Redis snapshot TTL; 0 means half of CATALOG_TTL
    catalog_redis_ttl: int = int(os.getenv("CATALOG_REDIS_TTL", "0"))

    # Query parsing
    fuzzy_threshold: float = float(os.getenv("FUZZY_THRESHOLD", "0.80"))
    fuzzy_strategy: str = os.getenv("FUZZY_STRATEGY", "best")

    # Slugs
    slug_max_length: int = int(os.getenv("SLUG_MAX_LENGTH", "60"))

    # Legacy URL resolution
    resolver_lenient_fallback: bool = os.getenv("RESOLVER_LENIENT_FALLBACK", "true").lower() == "true"
    resolver_verify_redirects: bool = os.getenv("RESOLVER_VERIFY_REDIRECTS", "true").lower() == "true"
    fuzzy_candidate_limit: int = int(os.getenv("FUZZY_CANDIDATE_LIMIT", "10"))

    # Per-call timeout for backing store queries, in seconds
    store_timeout: float = float(os.getenv("STORE_TIMEOUT", "5.0"))

    # API
    api_host: str = os.getenv("API_HOST", "0.0.0.0")
    api_port: int = int(os.getenv("API_PORT", "8000"))
    api_reload: bool = os.getenv("API_RELOAD", "true").lower() == "true"

    def __post_init__(self) -> None:
        """Validate settings after initialization."""
        if self.catalog_ttl <= 0:
            raise ValueError("CATALOG_TTL must be a positive number of seconds")

        if not 0 <= self.catalog_failure_ttl <= self.catalog_ttl:
            raise ValueError("CATALOG_FAILURE_TTL must be between 0 and CATALOG_TTL")

        if not 0 <= self.catalog_redis_ttl <= self.catalog_ttl:
            raise ValueError("CATALOG_REDIS_TTL must be between 0 and CATALOG_TTL")

        if not 0 < self.fuzzy_threshold <= 1:
            raise ValueError("FUZZY_THRESHOLD must be in (0, 1]")

        if self.fuzzy_strategy not in FUZZY_STRATEGIES:
            raise ValueError(
                f"FUZZY_STRATEGY must be one of {list(FUZZY_STRATEGIES)}, "
                f"got {self.fuzzy_strategy!r}"
            )

        if self.slug_max_length < 1:
            raise ValueError("SLUG_MAX_LENGTH must be at least 1")

        if self.store_timeout <= 0:
            raise ValueError("STORE_TIMEOUT must be positive")

    @property
    def catalog_snapshot_ttl(self) -> int:
        """Redis snapshot TTL.

        A name list can be served up to CATALOG_TTL + this many seconds
        after it was read from the datastore: the snapshot ages in Redis,
        then the in-process cache keeps it for its own TTL.
        """
        return self.catalog_redis_ttl or max(1, self.catalog_ttl // 2)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Global settings instance
settings = get_settings()


def get_redis_client() -> redis.Redis:
    """Create an asyncio Redis client instance."""
    return redis.from_url(
        settings.redis_url,
        password=settings.redis_password,
        decode_responses=True,
    )


async def get_supabase_client() -> AsyncClient:
    """Create an async Supabase client for the listings datastore."""
    return await acreate_client(settings.supabase_url, settings.supabase_key)
