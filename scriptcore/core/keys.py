from __future__ import annotations

INSTANT_SIGIL = "^"
WAIT_FOR_SIGIL = "~"


def norm_key(key: str) -> str:
    """Normalize a command name or context key.

    Every lookup boundary goes through here so `Targets` and `TARGETS` hit the same slot.
    """

    return key.strip().upper()


def split_sigil(command: str) -> tuple[str, bool, bool]:
    """Strip a single leading timing sigil.

    Returns `(name, instant, wait_for)`.
    """

    if command.startswith(INSTANT_SIGIL):
        return command[1:], True, False
    if command.startswith(WAIT_FOR_SIGIL):
        return command[1:], False, True
    return command, False, False
