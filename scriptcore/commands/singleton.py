from __future__ import annotations

from scriptcore.commands.library import load_builtin_commands
from scriptcore.commands.registry import CommandRegistry
from scriptcore.debug import DebugReporter


_REGISTRY: CommandRegistry | None = None


def init_registry(*, reporter: DebugReporter | None = None) -> CommandRegistry:
    """Build the process-wide command registry once and cache it.

    Safe to call multiple times; subsequent calls return the already loaded instance.
    """

    global _REGISTRY
    if _REGISTRY is None:
        _REGISTRY = load_builtin_commands(reporter=reporter)
    return _REGISTRY


def set_registry_for_tests(registry: CommandRegistry | None) -> None:
    global _REGISTRY
    _REGISTRY = registry


def get_registry() -> CommandRegistry:
    if _REGISTRY is None:
        raise RuntimeError("Command registry not initialized. Call init_registry() at startup.")
    return _REGISTRY
