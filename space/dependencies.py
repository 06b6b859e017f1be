from functools import lru_cache

from .config import Settings


@lru_cache
def get_settings() -> Settings:
    """Settings singleton, read once from the environment."""
    return Settings()
