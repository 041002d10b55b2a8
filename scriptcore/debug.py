from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import TYPE_CHECKING, Protocol

from scriptcore.core.values import debug_obj

if TYPE_CHECKING:
    from scriptcore.core.entry import ScriptEntry

__all__ = ["CompositeReporter", "DebugReporter", "LoggingReporter", "debug_obj"]


class DebugReporter(Protocol):
    """Sink for command reports. Reporting never affects control flow."""

    def report(self, entry: ScriptEntry | None, command_name: str, summary: str) -> None:  # pragma: no cover
        ...

    def report_error(self, message: str) -> None:  # pragma: no cover
        ...


class LoggingReporter:
    def __init__(self, *, logger: logging.Logger | None = None, enabled: bool = True) -> None:
        self.logger = logger or logging.getLogger("scriptcore.debug")
        self.enabled = enabled

    def report(self, entry: ScriptEntry | None, command_name: str, summary: str) -> None:
        if not self.enabled:
            return
        if entry is not None and not entry.should_debug():
            return
        self.logger.info("+> Executing '%s': %s", command_name, summary.strip())

    def report_error(self, message: str) -> None:
        self.logger.error("ERROR! %s", message)


class CompositeReporter:
    """Fan a report out to several reporters; one failing sink doesn't starve the others."""

    def __init__(self, reporters: Sequence[DebugReporter]) -> None:
        self.reporters = tuple(reporters)

    def report(self, entry: ScriptEntry | None, command_name: str, summary: str) -> None:
        for rep in self.reporters:
            try:
                rep.report(entry, command_name, summary)
            except Exception:
                logging.getLogger(__name__).exception("Debug reporter %r failed", rep)

    def report_error(self, message: str) -> None:
        for rep in self.reporters:
            try:
                rep.report_error(message)
            except Exception:
                logging.getLogger(__name__).exception("Debug reporter %r failed", rep)
