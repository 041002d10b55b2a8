from __future__ import annotations

from collections.abc import Iterable, Mapping
from enum import Enum
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, TypeVar

from scriptcore.core.keys import norm_key, split_sigil
from scriptcore.core.values import ActorRef, ContextValue, Element, ValueList, copy_value, debug_obj
from scriptcore.errors import EntryCreationError, MissingArgumentError

if TYPE_CHECKING:
    from scriptcore.queues.scheduler import ScriptQueue

T = TypeVar("T")


class ScriptEntry:
    """A single command invocation plus the context it runs with.

    Built by the script compiler (one per line) or ad hoc (no script attached).
    The working `arguments` are rewritten by tag filling; `original_arguments`
    is the untouched snapshot used when an entry is duplicated for loops.

    Ownership on `duplicate()`:
    - shared: `original_arguments`, `script`, `player`, `npc`
    - copied: `arguments` (rebuilt from the originals), context store (values detached), timing flags, tracked keys
    - reset: `owning_queue`
    """

    def __init__(self, command: str | None, arguments: Iterable[str] | None = None, script: Any = None) -> None:
        if not command:
            raise EntryCreationError("Command name cannot be empty")

        name, instant, wait_for = split_sigil(command)
        if not name.strip():
            raise EntryCreationError(f"Command name cannot be empty (got {command!r})")

        self._command_name = norm_key(name)
        self.instant = instant
        self.wait_for = wait_for

        self.original_arguments: tuple[str, ...] = tuple(arguments or ())
        self.arguments: list[str] = list(self.original_arguments)

        # Tag filling is skipped entirely for entries that never had a placeholder.
        self.has_tags = any("<" in a and ">" in a for a in self.original_arguments)

        self.script = script
        self.player: Any = None
        self.npc: Any = None
        self.owning_queue: ScriptQueue | None = None

        self._objects: dict[str, Any] = {}
        self.tracked_keys: list[str] = []

    def __repr__(self) -> str:
        return f"ScriptEntry({self._command_name!r}, {self.arguments!r})"

    # ---- command name / arguments ----

    @property
    def command_name(self) -> str:
        return self._command_name

    @command_name.setter
    def command_name(self, value: str) -> None:
        if not value:
            raise EntryCreationError("Command name cannot be empty")
        self._command_name = norm_key(value)

    def set_arguments(self, arguments: Iterable[str]) -> "ScriptEntry":
        self.arguments = list(arguments)
        return self

    def reset_arguments(self) -> "ScriptEntry":
        self.arguments = list(self.original_arguments)
        return self

    # ---- context store ----

    def set_context_object(self, key: str, value: Any) -> "ScriptEntry":
        if value is None:
            return self
        k = norm_key(key)
        if isinstance(value, ContextValue):
            value.prefix = key
        self._objects[k] = value
        return self

    def ensure_context_object(self, key: str, *candidates: Any) -> "ScriptEntry":
        """Fill `key` with the first non-None candidate if it isn't set yet.

        Raises MissingArgumentError if the key is still empty afterwards.
        """

        if norm_key(key) not in self._objects:
            for c in candidates:
                if c is not None:
                    self.set_context_object(key, c)
                    break

        if not self.has_context_object(key):
            raise MissingArgumentError(f"Missing '{key}' argument!")
        return self

    def remove_context_object(self, key: str) -> None:
        self._objects.pop(norm_key(key), None)

    def has_context_object(self, key: str) -> bool:
        return self._objects.get(norm_key(key)) is not None

    def get_context_object(self, key: str) -> Any:
        try:
            return self._objects.get(norm_key(key))
        except (AttributeError, TypeError):
            return None

    def get_typed(self, key: str, cls: type[T]) -> T | None:
        v = self.get_context_object(key)
        return v if isinstance(v, cls) else None

    def get_element(self, key: str) -> Element | None:
        v = self.get_context_object(key)
        if isinstance(v, Enum):
            return Element(v.name)
        return v if isinstance(v, Element) else None

    def get_list(self, key: str) -> ValueList | None:
        return self.get_typed(key, ValueList)

    def get_actor(self, key: str) -> Any:
        ref = self.get_typed(key, ActorRef)
        return ref.actor if ref is not None else None

    @property
    def context_objects(self) -> Mapping[str, Any]:
        return MappingProxyType(self._objects)

    def track_object(self, key: str) -> "ScriptEntry":
        """Flag a context key so derived entries (loop bodies, branches) inherit it."""

        self.tracked_keys.append(norm_key(key))
        return self

    # ---- linked actors / script ----

    def has_player(self) -> bool:
        return self.player is not None

    def has_npc(self) -> bool:
        return self.npc is not None

    def set_player(self, player: Any) -> "ScriptEntry":
        self.player = player
        return self

    def set_npc(self, npc: Any) -> "ScriptEntry":
        self.npc = npc
        return self

    # ---- timing ----

    def set_instant(self, instant: bool = True) -> "ScriptEntry":
        self.instant = instant
        return self

    def set_wait_for(self, wait_for: bool = True) -> "ScriptEntry":
        self.wait_for = wait_for
        return self

    def mark_finished(self, finished: bool = True) -> None:
        """Completion signal for wait-for entries.

        Safe from any thread and safe to repeat; serialized against the owning queue's tick.
        """

        queue = self.owning_queue
        if queue is None:
            self.wait_for = not finished
            return
        with queue.lock:
            self.wait_for = not finished

    # ---- duplication ----

    def duplicate(self) -> "ScriptEntry":
        dup = ScriptEntry.__new__(ScriptEntry)
        dup._command_name = self._command_name
        dup.instant = self.instant
        dup.wait_for = self.wait_for
        dup.original_arguments = self.original_arguments
        dup.arguments = list(self.original_arguments)
        dup.has_tags = self.has_tags
        dup.script = self.script
        dup.player = self.player
        dup.npc = self.npc
        dup.owning_queue = None
        dup._objects = {k: copy_value(v) for k, v in self._objects.items()}
        dup.tracked_keys = list(self.tracked_keys)
        return dup

    # ---- debugging ----

    def should_debug(self) -> bool:
        if self.script is None:
            return True
        check = getattr(self.script, "should_debug", None)
        if check is None:
            return True
        return bool(check() if callable(check) else check)

    def should_filter(self, criteria: str) -> bool:
        name = getattr(self.script, "name", None)
        if not isinstance(name, str):
            return False
        if criteria[:2].casefold() == "s@":
            criteria = criteria[2:]
        return name.casefold() == criteria.casefold()

    def report_object(self, key: str) -> str:
        if not self.has_context_object(key):
            return ""
        v = self.get_context_object(key)
        if isinstance(v, ContextValue):
            return v.debug()
        return debug_obj(key, v)
