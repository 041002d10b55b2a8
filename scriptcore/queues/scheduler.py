from __future__ import annotations

import asyncio
import logging
import threading

from scriptcore.commands.registry import CommandRegistry
from scriptcore.config import QueueConfig, load_queue_config
from scriptcore.core.entry import ScriptEntry
from scriptcore.debug import DebugReporter, LoggingReporter
from scriptcore.errors import CommandExecutionError, InvalidArgumentsError, UnknownCommandError
from scriptcore.queues.fsm import QueueFSM, QueueState
from scriptcore.tags import ContextTagResolver, TagResolver, fill_tags

logger = logging.getLogger(__name__)


class ScriptQueue:
    """Ordered script entries executed one at a time.

    Contract:
      - `add_entries` appends in arrival order; instant entries go right after the
        current position (ahead of queued normal entries, in their own arrival order).
      - `tick` runs at most one entry. An entry still `wait_for` after execute holds the
        queue until `mark_finished` is delivered for it.
      - a failing entry is reported and dropped; the queue keeps going.

    All state changes happen under `lock`, which completion signals from other threads share.
    """

    def __init__(
        self,
        *,
        queue_id: str,
        registry: CommandRegistry,
        reporter: DebugReporter | None = None,
        resolver: TagResolver | None = None,
        config: QueueConfig | None = None,
    ) -> None:
        self.queue_id = queue_id
        self.registry = registry
        self.config = config or load_queue_config()
        self.reporter: DebugReporter = reporter or LoggingReporter(enabled=self.config.debug)
        self.resolver: TagResolver = resolver or ContextTagResolver()
        self.lock = threading.RLock()

        self._fsm = QueueFSM()
        self._entries: list[ScriptEntry] = []
        self._instant_cursor = 0
        self._held: ScriptEntry | None = None
        self._stopped = False

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.queue_id!r}, state={self.state.value}, pending={len(self)})"

    def __len__(self) -> int:
        return len(self._entries)

    # ---- inspection ----

    @property
    def state(self) -> QueueState:
        return self._fsm.queue_state

    @property
    def is_drained(self) -> bool:
        return self.state == QueueState.drained

    @property
    def is_stopped(self) -> bool:
        return self._stopped

    @property
    def held_entry(self) -> ScriptEntry | None:
        return self._held

    @property
    def entries(self) -> tuple[ScriptEntry, ...]:
        with self.lock:
            return tuple(self._entries)

    # ---- feeding ----

    def add_entries(self, *entries: ScriptEntry) -> "ScriptQueue":
        with self.lock:
            if self._stopped:
                raise ValueError(f"Queue {self.queue_id} was stopped")

            for entry in entries:
                self._admit(entry)
                if entry.instant:
                    self._entries.insert(self._instant_cursor, entry)
                    self._instant_cursor += 1
                else:
                    self._entries.append(entry)

            if self._entries and self.state == QueueState.drained:
                self._fsm.reopen()
        return self

    def _admit(self, entry: ScriptEntry) -> None:
        owner = entry.owning_queue
        if owner is not None and owner is not self:
            raise ValueError(f"{entry!r} already belongs to queue {owner.queue_id}")
        entry.owning_queue = self

    # ---- advancing ----

    def tick(self) -> ScriptEntry | None:
        """Advance by one entry. Returns the entry that ran, or None if nothing could."""

        with self.lock:
            if self._stopped:
                return None

            if self._held is not None:
                if self._held.wait_for:
                    return None
                logger.debug("Queue %s: %s finished, resuming", self.queue_id, self._held.command_name)
                self._held = None
                self._fsm.resume()

            if not self._entries:
                if self.state != QueueState.drained:
                    self._fsm.drain()
                return None

            entry = self._entries.pop(0)
            self._instant_cursor = 0
            if self.state == QueueState.idle:
                self._fsm.begin()

            self._run_entry(entry)

            if self._stopped:
                # The command stopped its own queue.
                return entry

            if entry.wait_for:
                logger.debug("Queue %s: holding for %s", self.queue_id, entry.command_name)
                self._held = entry
                self._fsm.hold()
            elif not self._entries:
                self._fsm.drain()
            return entry

    def _run_entry(self, entry: ScriptEntry) -> None:
        logger.debug("Queue %s: executing %s %s", self.queue_id, entry.command_name, entry.arguments)
        try:
            fill_tags(entry, self.resolver, self.reporter)
            self.registry.dispatch(entry)
        except UnknownCommandError:
            entry.mark_finished(True)
            self.reporter.report_error(f"Woah! Unknown command '{entry.command_name}'")
        except InvalidArgumentsError as e:
            entry.mark_finished(True)
            self.reporter.report_error(f"Woah! Invalid arguments were specified for '{entry.command_name}': {e}")
        except CommandExecutionError as e:
            entry.mark_finished(True)
            self.reporter.report_error(f"Error executing '{entry.command_name}': {e}")
        except Exception as e:
            entry.mark_finished(True)
            logger.exception("Queue %s: %s raised", self.queue_id, entry.command_name)
            self.reporter.report_error(f"Woah! An exception has been called with '{entry.command_name}': {e}")

    def _blocked(self) -> bool:
        if self._stopped or self.state == QueueState.drained:
            return True
        return self._held is not None and self._held.wait_for

    def run_until_blocked(self) -> list[ScriptEntry]:
        """Run entries back to back until the queue drains or waits on an entry."""

        ran: list[ScriptEntry] = []
        with self.lock:
            while not self._blocked():
                entry = self.tick()
                if entry is not None:
                    ran.append(entry)
        return ran

    # ---- signals ----

    def mark_finished(self, entry: ScriptEntry, finished: bool = True) -> None:
        """Completion signal for a wait-for entry. Repeats and late deliveries are no-ops."""

        with self.lock:
            entry.mark_finished(finished)

    def finish_held(self) -> ScriptEntry | None:
        with self.lock:
            held = self._held
            if held is not None:
                held.mark_finished(True)
            return held

    def stop(self) -> int:
        """Hard stop: drop every pending entry and abandon the held one.

        Returns how many pending entries were dropped.
        """

        with self.lock:
            dropped = len(self._entries)
            self._entries.clear()
            self._instant_cursor = 0
            self._held = None
            self._stopped = True
            if self.state != QueueState.drained:
                self._fsm.drain()
        logger.debug("Queue %s stopped, dropped %d entries", self.queue_id, dropped)
        return dropped


class TimedQueue(ScriptQueue):
    """Queue driven by its own async loop, pausing `tick_delay_s` between normal entries."""

    def _next_is_instant(self) -> bool:
        with self.lock:
            return bool(self._entries) and self._entries[0].instant

    async def run(self) -> None:
        while True:
            with self.lock:
                if self._stopped or self.is_drained:
                    return
                waiting = self._held is not None and self._held.wait_for

            if waiting:
                await asyncio.sleep(self.config.poll_interval_s)
                continue

            self.tick()
            if self._stopped or self.is_drained:
                return
            if self._next_is_instant():
                continue
            await asyncio.sleep(self.config.tick_delay_s)
