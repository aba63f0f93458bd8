"""
Centralized environment detection.

Only ENV is consulted. Cached, so tests that flip ENV must call
``cache_clear()`` on the helper they exercise.
"""
import os
from functools import lru_cache


@lru_cache(maxsize=1)
def get_env_name() -> str:
    """Current environment name, lowercase. Defaults to 'dev'."""
    return os.getenv("ENV", "dev").lower()


@lru_cache(maxsize=1)
def is_local_env() -> bool:
    """True only for 'local'; shared dev deployments are not local."""
    return get_env_name() == "local"


@lru_cache(maxsize=1)
def is_production_env() -> bool:
    """True for 'prod' and 'production'."""
    return get_env_name() in {"prod", "production"}


def clear_env_cache():
    """Reset cached environment lookups (useful for testing)"""
    get_env_name.cache_clear()
    is_local_env.cache_clear()
    is_production_env.cache_clear()
