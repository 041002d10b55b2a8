from __future__ import annotations

import threading
from collections.abc import Callable
from uuid import uuid4

from scriptcore.queues.scheduler import ScriptQueue


_QUEUES: dict[str, ScriptQueue] = {}
_LOCK = threading.Lock()


def new_queue_id(prefix: str = "q") -> str:
    return f"{prefix}_{uuid4().hex[:12]}"


def get_or_create_queue(queue_id: str, factory: Callable[[str], ScriptQueue]) -> ScriptQueue:
    """Return the live queue for `queue_id`, creating it with `factory` if missing."""

    with _LOCK:
        q = _QUEUES.get(queue_id)
        if q is None:
            q = factory(queue_id)
            _QUEUES[queue_id] = q
        return q


def get_queue(queue_id: str) -> ScriptQueue | None:
    with _LOCK:
        return _QUEUES.get(queue_id)


def list_queues() -> list[ScriptQueue]:
    with _LOCK:
        return list(_QUEUES.values())


def remove_queue(queue_id: str) -> ScriptQueue | None:
    with _LOCK:
        return _QUEUES.pop(queue_id, None)


def reset_queues_for_tests() -> None:
    """Drop every registered queue. Intended for tests."""

    with _LOCK:
        _QUEUES.clear()
