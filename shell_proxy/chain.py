from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Any, Iterable, Iterator, List, Tuple


def _check_segment(name: Any) -> str:
    if not isinstance(name, str):
        raise TypeError(f"Chain segments must be str, got {type(name).__name__}")
    if not name:
        raise ValueError("Chain segments must be non-empty")
    if "\0" in name:
        raise ValueError(f"Chain segment contains a NUL byte: {name!r}")
    return name


def to_word(arg: Any) -> str:
    """Turn one call argument into exactly one argv word."""
    if isinstance(arg, str):
        word = arg
    elif isinstance(arg, (bytes, os.PathLike)):
        word = os.fsdecode(arg)
    else:
        # ExecutionResult stringifies to its stdout.
        word = str(arg)
    if "\0" in word:
        raise ValueError(f"Argument contains a NUL byte: {word!r}")
    return word


@dataclass(frozen=True)
class Chain:
    """The command path accumulated so far, e.g. ("git", "status")."""

    segments: Tuple[str, ...] = ()

    def __post_init__(self) -> None:
        segs = tuple(self.segments)
        for s in segs:
            _check_segment(s)
        object.__setattr__(self, "segments", segs)

    @classmethod
    def of(cls, segments: "Chain | Iterable[str]") -> "Chain":
        if isinstance(segments, Chain):
            return segments
        if isinstance(segments, str):
            raise TypeError("Pass chain segments as a sequence, not a single string")
        return cls(tuple(segments))

    def extend(self, name: str) -> "Chain":
        return Chain(self.segments + (_check_segment(name),))

    def words(self, args: Iterable[Any] = ()) -> List[str]:
        return [*self.segments, *(to_word(a) for a in args)]

    def __len__(self) -> int:
        return len(self.segments)

    def __iter__(self) -> Iterator[str]:
        return iter(self.segments)
