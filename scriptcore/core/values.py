from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any


def debug_obj(name: str, value: object) -> str:
    """Render one `name='value'` fragment for a debug report line."""

    return f"{name}='{value}'  "


class ContextValue:
    """Base for the typed values stored in a script entry's context.

    `prefix` is the context key the value was last stored under; reports use it as the label.
    """

    __slots__ = ()

    prefix: str | None

    def display(self) -> str:
        raise NotImplementedError

    def debug(self) -> str:
        return debug_obj(self.prefix or type(self).__name__, self.display())


@dataclass(slots=True)
class Element(ContextValue):
    text: str
    prefix: str | None = field(default=None, compare=False)

    def display(self) -> str:
        return self.text

    def as_int(self) -> int | None:
        try:
            return int(self.text.strip())
        except ValueError:
            return None

    def as_float(self) -> float | None:
        try:
            return float(self.text.strip())
        except ValueError:
            return None

    def as_bool(self) -> bool | None:
        t = self.text.strip().casefold()
        if t in {"true", "yes", "on", "1"}:
            return True
        if t in {"false", "no", "off", "0"}:
            return False
        return None

    def __str__(self) -> str:
        return self.text


@dataclass(slots=True)
class ValueList(ContextValue):
    items: list[Any] = field(default_factory=list)
    prefix: str | None = field(default=None, compare=False)

    @staticmethod
    def from_text(text: str) -> "ValueList":
        # `li@` is the list identifier scripts may carry in front of a list literal.
        if text[:3].casefold() == "li@":
            text = text[3:]
        return ValueList(items=[Element(s) for s in text.split("|") if s])

    def filter(self, cls: type) -> "ValueList":
        return ValueList(items=[i for i in self.items if isinstance(i, cls)])

    def display(self) -> str:
        return ", ".join(_display(i) for i in self.items)

    def __iter__(self):
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)


@dataclass(slots=True)
class ActorRef(ContextValue):
    """Non-owning handle to an actor managed by the host."""

    actor: Any
    prefix: str | None = field(default=None, compare=False)

    def display(self) -> str:
        return _display(self.actor)


@dataclass(slots=True)
class Opaque(ContextValue):
    value: Any
    prefix: str | None = field(default=None, compare=False)

    def display(self) -> str:
        return _display(self.value)


def _display(v: object) -> str:
    if isinstance(v, ContextValue):
        return v.display()
    name = getattr(v, "name", None)
    if isinstance(name, str):
        return name
    return str(v)


def copy_value(v: Any) -> Any:
    """A detached copy of a context value. Actor handles and plain values are not copied."""

    if isinstance(v, ValueList):
        return replace(v, items=[copy_value(i) for i in v.items])
    if isinstance(v, ContextValue):
        return replace(v)
    return v
