from __future__ import annotations

from collections.abc import Generator

import redis

from scriptcore.commands.registry import CommandRegistry
from scriptcore.commands.singleton import get_registry
from scriptcore.infra.redis_client import create_redis


def get_redis() -> Generator[redis.Redis, None, None]:
    """Request-scoped client for the debug streams; closed after the response."""

    client = create_redis()
    try:
        yield client
    finally:
        client.close()


def get_command_registry() -> CommandRegistry:
    return get_registry()
