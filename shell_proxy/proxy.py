"""Attribute-driven command chains.

``build(base)`` wraps a base object so that:

    proxy.ls            -> base.ls if the base has it
    proxy.git.status    -> a new proxy for the chain ("git", "status")
    proxy.git.status()  -> engine.execute(["git", "status"])

Names the base already has always win, so builtins and data attributes keep
behaving as plain values. Only unknown names grow the chain. Every step
returns a fresh proxy; chains are never mutated in place.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from types import SimpleNamespace
from typing import Any, Callable, Iterable, Iterator, List, Optional, Tuple

from .chain import Chain
from .guard import ReservedKeyViolation, check_writable, is_exempt
from .lib.command import DEFAULT_ENGINE, ExecutionEngine, ExecutionResult

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _ProxyState:
    base: Any
    chain: Chain
    engine: ExecutionEngine
    # True when base is the command function build() made for a chain node.
    synthesized: bool


# Name-mangled slot of CommandProxy.__state. Proxies have no instance
# __dict__, so this slot is the only place the state lives.
_STATE_SLOT = "_CommandProxy__state"


def _check_internal(name: str, *, action: str) -> None:
    check_writable(name, action=action)
    if name == _STATE_SLOT:
        raise ReservedKeyViolation(f"Cannot {action} reserved attribute {name!r}")


def _state(proxy: "CommandProxy") -> _ProxyState:
    return object.__getattribute__(proxy, _STATE_SLOT)


def _public_names(obj: Any) -> List[str]:
    return sorted(n for n in dir(obj) if not n.startswith("_"))


def _make_command(chain: Chain, engine: ExecutionEngine) -> Callable[..., ExecutionResult]:
    def command(*args: Any) -> ExecutionResult:
        return engine.execute(chain.words(args))

    command.__name__ = command.__qualname__ = chain.segments[-1] if chain.segments else "command"
    return command


def _resolve(proxy: "CommandProxy", name: str, *, exempt: bool) -> Any:
    _check_internal(name, action="read")
    st = _state(proxy)
    if exempt or hasattr(st.base, name):
        return getattr(st.base, name)
    return build(None, st.chain.extend(name), engine=st.engine)


class CommandProxy:
    """A command (or command prefix) that is also a view of its base object.

    Do not instantiate directly; use build() or build_native().
    """

    __slots__ = ("__state",)

    def __getattribute__(self, name: str) -> Any:
        _check_internal(name, action="read")
        return object.__getattribute__(self, name)

    def __getattr__(self, name: str) -> Any:
        return _resolve(self, name, exempt=is_exempt(name))

    def __getitem__(self, name: str) -> Any:
        # For segments that are not identifiers: shell["apt-get"].install(...)
        if not isinstance(name, str):
            raise TypeError(f"Command names must be str, got {type(name).__name__}")
        return _resolve(self, name, exempt=False)

    def __setattr__(self, name: str, value: Any) -> None:
        _check_internal(name, action="modify")
        setattr(_state(self).base, name, value)

    def __delattr__(self, name: str) -> None:
        _check_internal(name, action="delete")
        delattr(_state(self).base, name)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and hasattr(_state(self).base, name)

    def __dir__(self) -> List[str]:
        return keys(self)

    def __iter__(self) -> Iterator[str]:
        return iter(keys(self))

    def __call__(self, *args: Any, **kwargs: Any) -> Any:
        base = _state(self).base
        if not callable(base):
            raise TypeError(f"{type(base).__name__!r} object is not callable")
        return base(*args, **kwargs)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CommandProxy):
            return NotImplemented
        a, b = _state(self), _state(other)
        if a.chain != b.chain or a.engine is not b.engine:
            return False
        return a.base is b.base or (a.synthesized and b.synthesized)

    def __hash__(self) -> int:
        st = _state(self)
        return hash((st.chain, id(st.engine), None if st.synthesized else id(st.base)))

    def __repr__(self) -> str:
        return f"CommandProxy(chain={_state(self).chain.segments!r})"


def build(
    base: Any = None,
    chain: Chain | Iterable[str] = (),
    *,
    engine: Optional[ExecutionEngine] = None,
) -> CommandProxy:
    """Wrap base in a CommandProxy whose command path is chain.

    With base=None a command function is made for the chain: calling the
    proxy then runs chain + call arguments through the engine.
    """

    eng = engine if engine is not None else DEFAULT_ENGINE
    ch = Chain.of(chain)
    synthesized = base is None
    if synthesized:
        base = _make_command(ch, eng)
        logger.debug("Built command proxy for %r", ch.segments)

    proxy = object.__new__(CommandProxy)
    object.__setattr__(proxy, _STATE_SLOT, _ProxyState(base=base, chain=ch, engine=eng, synthesized=synthesized))
    return proxy


def build_native(*, engine: Optional[ExecutionEngine] = None) -> CommandProxy:
    """A root with nothing on its base: every name becomes a spawned command."""
    return build(SimpleNamespace(), Chain(), engine=engine)


def keys(proxy: CommandProxy) -> List[str]:
    """Public attribute names of the proxy's base."""
    return _public_names(_state(proxy).base)


def chain_of(proxy: CommandProxy) -> Tuple[str, ...]:
    return _state(proxy).chain.segments


def base_of(proxy: CommandProxy) -> Any:
    return _state(proxy).base
