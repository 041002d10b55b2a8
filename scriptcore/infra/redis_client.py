from __future__ import annotations

import os
from collections.abc import Mapping

import redis

DEFAULT_REDIS_URL = "redis://localhost:6379/0"


def redis_url(environ: Mapping[str, str] | None = None) -> str:
    """SCRIPTCORE_REDIS_URL, or the local default when unset or blank."""

    env = os.environ if environ is None else environ
    return (env.get("SCRIPTCORE_REDIS_URL") or "").strip() or DEFAULT_REDIS_URL


def create_redis(url: str | None = None) -> redis.Redis:
    # Debug stream fields are read back as str.
    return redis.Redis.from_url(url or redis_url(), decode_responses=True)
