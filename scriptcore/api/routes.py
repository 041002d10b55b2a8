from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status
import redis

from scriptcore.api.deps import get_command_registry, get_redis
from scriptcore.api.models import ExecuteRequest, QueueListResponse, QueueView, StopResponse
from scriptcore.commands.registry import CommandRegistry
from scriptcore.config import load_queue_config
from scriptcore.core.entry import ScriptEntry
from scriptcore.debug import CompositeReporter, LoggingReporter
from scriptcore.errors import EntryCreationError
from scriptcore.queues.directory import get_or_create_queue, get_queue, list_queues, new_queue_id, remove_queue
from scriptcore.queues.scheduler import ScriptQueue
from scriptcore.streams import DebugStream, RedisStreamReporter

router = APIRouter()


def _bind_reporter(*, queue: ScriptQueue, r: redis.Redis) -> None:
    # Rebound per request: the redis client is request-scoped.
    queue.reporter = CompositeReporter(
        [
            LoggingReporter(enabled=queue.config.debug),
            RedisStreamReporter(r=r, queue_id=queue.queue_id),
        ]
    )


def _release_if_drained(queue: ScriptQueue) -> None:
    # Only queues still waiting on a completion signal stay addressable.
    if queue.is_drained:
        remove_queue(queue.queue_id)


def _require_queue(queue_id: str) -> ScriptQueue:
    queue = get_queue(queue_id)
    if queue is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Queue not found")
    return queue


@router.get("/healthcheck")
async def healthcheck() -> dict[str, str]:
    return {"status": "ok"}


@router.post("/ex", response_model=QueueView, status_code=status.HTTP_201_CREATED)
async def execute_route(
    payload: ExecuteRequest,
    r: redis.Redis = Depends(get_redis),
    registry: CommandRegistry = Depends(get_command_registry),
) -> QueueView:
    """Run a single ad hoc command (no script attached) in a fresh queue."""

    try:
        entry = ScriptEntry(payload.command, payload.arguments, None)
    except EntryCreationError as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e)) from e

    if entry.command_name not in registry:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"Unknown command: {entry.command_name}",
        )

    config = load_queue_config()
    queue = get_or_create_queue(
        new_queue_id("ex"),
        lambda qid: ScriptQueue(queue_id=qid, registry=registry, config=config),
    )
    _bind_reporter(queue=queue, r=r)
    queue.add_entries(entry)
    queue.run_until_blocked()
    _release_if_drained(queue)
    return QueueView.from_queue(queue)


@router.get("/queues", response_model=QueueListResponse)
async def list_queues_route() -> QueueListResponse:
    return QueueListResponse(queues=[QueueView.from_queue(q) for q in list_queues()])


@router.get("/queues/{queue_id}", response_model=QueueView)
async def get_queue_route(queue_id: str) -> QueueView:
    return QueueView.from_queue(_require_queue(queue_id))


@router.post("/queues/{queue_id}/finish", response_model=QueueView)
async def finish_held_route(queue_id: str, r: redis.Redis = Depends(get_redis)) -> QueueView:
    """Deliver the completion signal for the entry the queue is waiting on, then continue."""

    queue = _require_queue(queue_id)
    if queue.finish_held() is None:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="Queue is not awaiting completion",
        )

    _bind_reporter(queue=queue, r=r)
    queue.run_until_blocked()
    _release_if_drained(queue)
    return QueueView.from_queue(queue)


@router.delete("/queues/{queue_id}", response_model=StopResponse)
async def stop_queue_route(queue_id: str) -> StopResponse:
    queue = _require_queue(queue_id)
    dropped = queue.stop()
    remove_queue(queue_id)
    return StopResponse(queue_id=queue_id, dropped=dropped)


@router.get("/queues/{queue_id}/debug")
async def get_queue_debug_route(
    queue_id: str,
    count: int = 20,
    start: str = "-",
    end: str = "+",
    r: redis.Redis = Depends(get_redis),
) -> dict[str, object]:
    """Debug endpoint: read a queue's report stream.

    Intended for local/dev testing when redis-cli isn't available.
    """

    if count < 1 or count > 200:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail="count must be between 1 and 200")

    stream_key = DebugStream(queue_id=queue_id).key
    try:
        entries = r.xrange(stream_key, min=start, max=end, count=count)
    except Exception as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e)) from e

    messages = [{"id": mid, "fields": fields} for mid, fields in entries]
    return {"queue_id": queue_id, "stream": stream_key, "messages": messages}
