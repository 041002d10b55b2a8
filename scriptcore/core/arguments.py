from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from scriptcore.core.values import Element, ValueList


def _strip_quotes(s: str) -> str:
    if len(s) >= 2 and s[0] == s[-1] and s[0] in {'"', "'"}:
        return s[1:-1]
    return s


def prefix_names(synonyms: str) -> tuple[str, ...]:
    """`"target, targets, t"` -> `("target", "targets", "t")`."""

    return tuple(p.strip().casefold() for p in synonyms.split(",") if p.strip())


@dataclass(frozen=True, slots=True)
class Argument:
    """One raw script argument, split into an optional `prefix:` and its value.

    `raw_value` keeps the argument as written, for values that legitimately contain a colon.
    """

    raw_value: str
    prefix: str | None
    value: str

    @staticmethod
    def parse(raw: str) -> "Argument":
        s = _strip_quotes(raw.strip())
        colon = s.find(":")
        space = s.find(" ")
        if colon <= 0 or (-1 < space < colon):
            return Argument(raw_value=s, prefix=None, value=s)
        return Argument(raw_value=s, prefix=s[:colon], value=s[colon + 1 :])

    @property
    def has_prefix(self) -> bool:
        return self.prefix is not None

    def matches_prefix(self, *synonyms: str) -> bool:
        if self.prefix is None:
            return False
        p = self.prefix.casefold()
        return any(p in prefix_names(s) for s in synonyms)

    def matches(self, *values: str) -> bool:
        v = self.value.casefold()
        return any(v in prefix_names(s) for s in values)

    def as_element(self) -> Element:
        return Element(self.value)

    def as_list(self) -> ValueList:
        return ValueList.from_text(self.value)


def interpret(arguments: Iterable[str]) -> list[Argument]:
    return [Argument.parse(a) for a in arguments]
