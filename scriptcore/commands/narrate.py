from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Protocol

from scriptcore.commands.base import Command
from scriptcore.core.arguments import interpret
from scriptcore.core.entry import ScriptEntry
from scriptcore.core.values import ActorRef, Element, ValueList, debug_obj
from scriptcore.debug import DebugReporter
from scriptcore.errors import CommandExecutionError, InvalidArgumentsError
from scriptcore.tags import ContextTagResolver, TagEnvironment


class Actor(Protocol):
    name: str

    @property
    def is_online(self) -> bool:  # pragma: no cover
        ...

    def send_message(self, text: str) -> None:  # pragma: no cover
        ...


class NarrateFormat(Protocol):
    name: str

    def format_text(self, entry: ScriptEntry, text: str) -> str:  # pragma: no cover
        ...


@dataclass(frozen=True, slots=True)
class FormatScript:
    """A named message template.

    `<text>` is replaced by the narrated text; other placeholders are filled from the entry.
    """

    name: str
    template: str

    def format_text(self, entry: ScriptEntry, text: str) -> str:
        # The narrated text is inserted after the template is filled, so it is never resolved twice.
        env = TagEnvironment.for_entry(entry)
        resolver = ContextTagResolver()
        return text.join(resolver.resolve_text(part, env) for part in self.template.split("<text>"))


class NarrateCommand(Command):
    """Send a line of text to one or more actors.

    Usage: `narrate "<text>" (targets:<name>|...) (format:<format>)`
    Targets default to the entry's player.
    """

    name = "NARRATE"

    FORMAT_ARG = "format, f"
    TARGET_ARG = "target, targets, t"

    def __init__(
        self,
        *,
        reporter: DebugReporter | None = None,
        actor_lookup: Callable[[str], Any] | None = None,
        format_lookup: Callable[[str], NarrateFormat | None] | None = None,
    ) -> None:
        super().__init__(reporter=reporter)
        self.actor_lookup = actor_lookup
        self.format_lookup = format_lookup

    def parse(self, entry: ScriptEntry) -> None:
        if len(entry.arguments) > 4:
            raise InvalidArgumentsError("Too many arguments! Did you forget a 'quote'?")

        for arg in interpret(entry.arguments):
            if not entry.has_context_object("format") and arg.matches_prefix(self.FORMAT_ARG):
                fmt = self.format_lookup(arg.value) if self.format_lookup is not None else None
                if fmt is None:
                    self.report_error(entry, f"Could not find format script matching '{arg.value}'")
                entry.set_context_object("format", fmt)

            elif arg.matches_prefix(self.TARGET_ARG):
                entry.set_context_object("targets", self._resolve_targets(entry, arg.as_list()))

            # raw_value so text like "Note: hello" isn't split at the colon.
            elif not entry.has_context_object("text"):
                entry.set_context_object("text", Element(arg.raw_value))

        if not entry.has_context_object("targets") and entry.has_player():
            entry.set_context_object("targets", ValueList(items=[ActorRef(entry.player)]))

        if not entry.has_context_object("text"):
            raise InvalidArgumentsError("Missing any text!")

    def _resolve_targets(self, entry: ScriptEntry, names: ValueList) -> ValueList:
        out: list[ActorRef] = []
        for item in names:
            name = str(item)
            actor = self.actor_lookup(name) if self.actor_lookup is not None else None
            if actor is None:
                self.report_error(entry, f"Unknown narrate target '{name}'")
                continue
            out.append(ActorRef(actor))
        return ValueList(items=out)

    def execute(self, entry: ScriptEntry) -> None:
        text_el = entry.get_element("text")
        if text_el is None:
            raise CommandExecutionError("NARRATE executed without parsed text")
        text = text_el.text

        targets = entry.get_list("targets")
        fmt = entry.get_context_object("format")

        self.report(
            entry,
            debug_obj("Narrating", text)
            + debug_obj("Targets", targets.display() if targets else "none")
            + (debug_obj("Format", fmt.name) if fmt is not None else ""),
        )

        # Narration is synchronous, so a `~narrate` completes as soon as it's sent.
        entry.mark_finished(True)

        if not targets:
            return

        message = fmt.format_text(entry, text) if fmt is not None else text
        for ref in targets:
            actor = ref.actor if isinstance(ref, ActorRef) else None
            if actor is not None and getattr(actor, "is_online", False):
                actor.send_message(message)
            else:
                self.report_error(entry, "Narrated to non-existent or offline player!")
