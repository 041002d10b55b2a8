from __future__ import annotations

from collections.abc import Callable
from typing import Any

from scriptcore.commands.narrate import NarrateCommand, NarrateFormat
from scriptcore.commands.registry import CommandRegistry
from scriptcore.debug import DebugReporter


def load_builtin_commands(
    *,
    registry: CommandRegistry | None = None,
    reporter: DebugReporter | None = None,
    actor_lookup: Callable[[str], Any] | None = None,
    format_lookup: Callable[[str], NarrateFormat | None] | None = None,
) -> CommandRegistry:
    """Register the commands that ship with scriptcore.

    Host lookups are passed through to the commands that need them.
    """

    reg = registry or CommandRegistry()
    reg.register(NarrateCommand(reporter=reporter, actor_lookup=actor_lookup, format_lookup=format_lookup))
    return reg
