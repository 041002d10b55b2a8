from __future__ import annotations

from pydantic import BaseModel, Field

from scriptcore.core.entry import ScriptEntry
from scriptcore.queues.fsm import QueueState
from scriptcore.queues.scheduler import ScriptQueue


class ExecuteRequest(BaseModel):
    # May carry a leading `^` / `~` timing sigil.
    command: str = Field(..., min_length=1, max_length=200)
    arguments: list[str] = Field(default_factory=list, max_length=100)


class EntryView(BaseModel):
    command: str
    arguments: list[str]
    original_arguments: list[str]
    instant: bool
    wait_for: bool

    @staticmethod
    def from_entry(entry: ScriptEntry) -> "EntryView":
        return EntryView(
            command=entry.command_name,
            arguments=list(entry.arguments),
            original_arguments=list(entry.original_arguments),
            instant=entry.instant,
            wait_for=entry.wait_for,
        )


class QueueView(BaseModel):
    queue_id: str
    state: QueueState
    stopped: bool = False
    pending: list[EntryView] = Field(default_factory=list)
    held: EntryView | None = None

    @staticmethod
    def from_queue(queue: ScriptQueue) -> "QueueView":
        held = queue.held_entry
        return QueueView(
            queue_id=queue.queue_id,
            state=queue.state,
            stopped=queue.is_stopped,
            pending=[EntryView.from_entry(e) for e in queue.entries],
            held=EntryView.from_entry(held) if held is not None else None,
        )


class QueueListResponse(BaseModel):
    queues: list[QueueView]


class StopResponse(BaseModel):
    queue_id: str
    dropped: int
