from __future__ import annotations


class ScriptCoreError(RuntimeError):
    pass


class EntryCreationError(ScriptCoreError):
    """Raised when a script entry cannot be built (no command name)."""


class InvalidArgumentsError(ScriptCoreError):
    """Raised by a command's parse phase when its arguments don't validate."""


class MissingArgumentError(InvalidArgumentsError):
    pass


class UnknownCommandError(InvalidArgumentsError):
    pass


class CommandExecutionError(ScriptCoreError):
    """Raised by a command's execute phase."""
