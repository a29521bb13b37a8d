"""Tests for chain state and argument-to-word conversion."""

from pathlib import Path

import pytest

from shell_proxy.chain import Chain, to_word
from shell_proxy.lib.command import ExecutionResult


def test_extend_returns_new_chain():
    base = Chain(("git",))
    child = base.extend("status")
    assert child.segments == ("git", "status")
    assert base.segments == ("git",)


def test_words_appends_args_in_order():
    ch = Chain(("one", "two"))
    assert ch.words(["three", "four"]) == ["one", "two", "three", "four"]


def test_segments_are_frozen():
    ch = Chain(["a", "b"])
    assert ch.segments == ("a", "b")
    with pytest.raises(AttributeError):
        ch.segments = ("c",)


@pytest.mark.parametrize("bad", ["", "a\0b"])
def test_rejects_invalid_segments(bad):
    with pytest.raises(ValueError):
        Chain(()).extend(bad)


def test_rejects_non_str_segment():
    with pytest.raises(TypeError):
        Chain((1,))


def test_of_rejects_bare_string():
    """A string is iterable, but "git" must not become ("g", "i", "t")."""
    with pytest.raises(TypeError):
        Chain.of("git")
    assert Chain.of(["git"]).segments == ("git",)


def test_to_word_keeps_metacharacters():
    for arg in ["a;b", "*.txt", 'has"quote', "two words", "$(rm -rf /)"]:
        assert to_word(arg) == arg


def test_to_word_conversions():
    assert to_word(Path("dir") / "file name") == str(Path("dir") / "file name")
    assert to_word(b"raw") == "raw"
    assert to_word(42) == "42"
    res = ExecutionResult(argv=[], exit_code=0, stdout="file.txt", stderr="")
    assert to_word(res) == "file.txt"


def test_to_word_rejects_nul():
    with pytest.raises(ValueError):
        to_word("a\0b")
