from __future__ import annotations

import logging
import re
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any, Protocol

from scriptcore.core.entry import ScriptEntry
from scriptcore.core.keys import norm_key
from scriptcore.core.values import ActorRef, ContextValue, Opaque
from scriptcore.debug import DebugReporter

logger = logging.getLogger(__name__)

_TAG_RE = re.compile(r"<([^<>\s]+)>")

_MISSING = object()


@dataclass(frozen=True, slots=True)
class TagEnvironment:
    """What a placeholder may be resolved against.

    `context` is a read-only view of the entry's context store (uppercased keys).
    """

    context: Mapping[str, Any] = field(default_factory=dict)
    player: Any = None
    npc: Any = None
    script: Any = None
    reporter: DebugReporter | None = None

    @staticmethod
    def for_entry(entry: ScriptEntry, *, reporter: DebugReporter | None = None) -> "TagEnvironment":
        return TagEnvironment(
            context=entry.context_objects,
            player=entry.player,
            npc=entry.npc,
            script=entry.script,
            reporter=reporter,
        )


class TagResolver(Protocol):
    def resolve(self, arguments: Sequence[str], env: TagEnvironment) -> list[str]:  # pragma: no cover
        ...


class ContextTagResolver:
    """Minimal resolver for `<key>` and `<key.attribute...>` placeholders.

    The first segment is looked up in the entry context, then `player` / `npc` / `script`.
    Further segments are attribute reads. Anything unresolvable is left as written.
    """

    def resolve(self, arguments: Sequence[str], env: TagEnvironment) -> list[str]:
        return [self.resolve_text(a, env) for a in arguments]

    def resolve_text(self, text: str, env: TagEnvironment) -> str:
        if "<" not in text or ">" not in text:
            return text

        def _sub(m: re.Match[str]) -> str:
            path = m.group(1)
            value = self._lookup(path, env)
            if value is _MISSING:
                if env.reporter is not None:
                    env.reporter.report_error(f"Unable to fill tag <{path}>, leaving as-is")
                return m.group(0)
            return _render(value)

        return _TAG_RE.sub(_sub, text)

    def _lookup(self, path: str, env: TagEnvironment) -> Any:
        head, *attrs = path.split(".")
        value = env.context.get(norm_key(head), _MISSING)
        if value is _MISSING:
            value = {"player": env.player, "npc": env.npc, "script": env.script}.get(head.casefold(), _MISSING)
        if value is _MISSING or value is None:
            return _MISSING

        for attr in attrs:
            value = _unwrap(value)
            try:
                value = getattr(value, attr, _MISSING)
                if callable(value):
                    value = value()
            except Exception as e:
                # One failing attribute only spoils its own placeholder.
                logger.debug("Tag <%s> failed at '%s': %s", path, attr, e)
                return _MISSING
            if value is _MISSING or value is None:
                return _MISSING
        return value


def _unwrap(value: Any) -> Any:
    if isinstance(value, ActorRef):
        return value.actor
    if isinstance(value, Opaque):
        return value.value
    return value


def _render(value: Any) -> str:
    if isinstance(value, ContextValue):
        return value.display()
    name = getattr(value, "name", None)
    if isinstance(name, str):
        return name
    return str(value)


def fill_tags(entry: ScriptEntry, resolver: TagResolver, reporter: DebugReporter | None = None) -> None:
    """Resolve placeholders in an entry's working arguments, in place.

    Entries without placeholders are left alone. A failing resolver is reported
    and the arguments stay unresolved; it never aborts the entry.
    """

    if not entry.has_tags:
        return

    env = TagEnvironment.for_entry(entry, reporter=reporter)
    try:
        resolved = resolver.resolve(list(entry.arguments), env)
    except Exception as e:
        logger.warning("Tag resolution failed for %s: %s", entry.command_name, e)
        if reporter is not None:
            reporter.report_error(f"Tag resolution failed for '{entry.command_name}': {e}")
        return

    entry.set_arguments(resolved)
