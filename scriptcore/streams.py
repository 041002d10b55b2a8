from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import TYPE_CHECKING, cast

import redis

if TYPE_CHECKING:
    from scriptcore.core.entry import ScriptEntry


def _now_iso() -> str:
    return datetime.now(tz=UTC).isoformat()


@dataclass(frozen=True, slots=True)
class DebugStream:
    queue_id: str

    @property
    def key(self) -> str:
        return f"debug:{self.queue_id}"


def publish_to_stream(*, r: redis.Redis, stream: DebugStream, fields: Mapping[str, str]) -> str:
    """Append an entry to a queue's debug stream."""

    # redis-py stubs expect field/value unions; we only ever write strings.
    stream_id = r.xadd(stream.key, {str(k): str(v) for k, v in fields.items()})
    return cast(str, stream_id)


class RedisStreamReporter:
    """Debug reporter that appends every report to a Redis Stream.

    Lets a UI or another process follow a queue's execution with XREAD.
    """

    def __init__(self, *, r: redis.Redis, queue_id: str) -> None:
        self.r = r
        self.stream = DebugStream(queue_id=queue_id)

    def report(self, entry: ScriptEntry | None, command_name: str, summary: str) -> None:
        fields = {
            "type": "report",
            "command": command_name,
            "summary": summary.strip(),
            "ts": _now_iso(),
        }
        if entry is not None:
            fields["script"] = str(getattr(entry.script, "name", "") or "")
        publish_to_stream(r=self.r, stream=self.stream, fields=fields)

    def report_error(self, message: str) -> None:
        publish_to_stream(
            r=self.r,
            stream=self.stream,
            fields={"type": "error", "message": message, "ts": _now_iso()},
        )
