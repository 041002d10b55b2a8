from __future__ import annotations

from scriptcore.core.arguments import Argument, interpret, prefix_names
from scriptcore.core.values import Element


def test_prefixed_argument_splits_on_first_colon() -> None:
    arg = Argument.parse("targets:alice|bob")

    assert arg.has_prefix
    assert arg.prefix == "targets"
    assert arg.value == "alice|bob"
    assert arg.raw_value == "targets:alice|bob"


def test_value_with_later_colons_keeps_them() -> None:
    arg = Argument.parse("url:http://example.com")
    assert arg.prefix == "url"
    assert arg.value == "http://example.com"


def test_space_before_colon_means_no_prefix() -> None:
    arg = Argument.parse("Note to self: hello")

    assert arg.has_prefix is False
    assert arg.value == "Note to self: hello"
    assert arg.raw_value == "Note to self: hello"


def test_bare_argument_has_no_prefix() -> None:
    arg = Argument.parse("hello")
    assert arg.prefix is None
    assert arg.value == "hello"


def test_surrounding_quotes_are_removed() -> None:
    assert Argument.parse('"format:fancy"').prefix == "format"
    assert Argument.parse("'hi there'").value == "hi there"


def test_matches_prefix_uses_synonyms_case_insensitively() -> None:
    arg = Argument.parse("T:alice")

    assert arg.matches_prefix("target, targets, t")
    assert arg.matches_prefix("format, f", "t")
    assert not arg.matches_prefix("format, f")
    assert not Argument.parse("alice").matches_prefix("target")


def test_matches_compares_value() -> None:
    assert Argument.parse("TRUE").matches("true, yes")
    assert not Argument.parse("maybe").matches("true, yes")


def test_as_list_splits_on_pipe() -> None:
    items = Argument.parse("targets:li@alice|bob").as_list()
    assert items.items == [Element("alice"), Element("bob")]


def test_interpret_keeps_order() -> None:
    args = interpret(["format:fancy", "hello", "t:bob"])
    assert [a.prefix for a in args] == ["format", None, "t"]


def test_prefix_names() -> None:
    assert prefix_names("target, Targets ,t") == ("target", "targets", "t")
