from __future__ import annotations

import logging

from scriptcore.commands.base import Command
from scriptcore.core.entry import ScriptEntry
from scriptcore.core.keys import norm_key
from scriptcore.errors import UnknownCommandError

logger = logging.getLogger(__name__)


class CommandRegistry:
    """Command name -> Command.

    Filled at startup by whoever loads the command library; the queue only sees this lookup.
    """

    def __init__(self) -> None:
        self._commands: dict[str, Command] = {}

    def register(self, command: Command, *aliases: str) -> Command:
        if not command.name:
            raise ValueError(f"Command {type(command).__name__} has no name")
        for n in (command.name, *aliases):
            self._commands[norm_key(n)] = command
        logger.debug("Registered command %s", norm_key(command.name))
        return command

    def lookup(self, name: str) -> Command | None:
        return self._commands.get(norm_key(name))

    def require(self, name: str) -> Command:
        cmd = self.lookup(name)
        if cmd is None:
            raise UnknownCommandError(f"Unknown command: {norm_key(name)}")
        return cmd

    def names(self) -> list[str]:
        return sorted(self._commands)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and norm_key(name) in self._commands

    def dispatch(self, entry: ScriptEntry) -> None:
        """Run one entry: lookup, parse, then execute.

        Errors propagate; the queue decides what a failure means for the rest of the run.
        """

        cmd = self.require(entry.command_name)
        cmd.parse(entry)
        cmd.execute(entry)
