from __future__ import annotations

from abc import ABC, abstractmethod

from scriptcore.core.entry import ScriptEntry
from scriptcore.debug import DebugReporter, LoggingReporter


class Command(ABC):
    """A pluggable command: `parse` fills the entry context, `execute` acts on it.

    `execute` must only read the context store; raw arguments are `parse`'s business.
    Reports go to the entry's queue reporter when it has one, else to the command's own.
    """

    name: str = ""

    def __init__(self, *, reporter: DebugReporter | None = None) -> None:
        self.reporter: DebugReporter = reporter or LoggingReporter()

    @abstractmethod
    def parse(self, entry: ScriptEntry) -> None:
        raise NotImplementedError

    @abstractmethod
    def execute(self, entry: ScriptEntry) -> None:
        raise NotImplementedError

    def reporter_for(self, entry: ScriptEntry) -> DebugReporter:
        queue = entry.owning_queue
        return queue.reporter if queue is not None else self.reporter

    def report(self, entry: ScriptEntry, summary: str) -> None:
        self.reporter_for(entry).report(entry, self.name, summary)

    def report_error(self, entry: ScriptEntry, message: str) -> None:
        self.reporter_for(entry).report_error(message)
