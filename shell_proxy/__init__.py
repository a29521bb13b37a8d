"""shell-proxy: shell commands as attribute chains.

    from shell_proxy import shell, native

    shell.git.status()            # spawns: git status
    native.echo.one.two("three")  # spawns: echo one two three
    shell.echo("hi")              # builtin, no process

Core design goals:
- Unknown attribute names extend the command path; known ones stay plain values
- Arguments reach the process as discrete argv words, never a joined command line
- Command failures are data (exit_code/stderr), guard violations are exceptions
"""

from .guard import RESERVED_KEY, ReservedKeyViolation
from .lib.command import ExecutionEngine, ExecutionResult
from .proxy import CommandProxy, base_of, build, build_native, chain_of, keys
from .registry import ShellRegistry, make_shell, native, shell

__all__ = [
    "RESERVED_KEY",
    "ReservedKeyViolation",
    "ExecutionEngine",
    "ExecutionResult",
    "CommandProxy",
    "base_of",
    "build",
    "build_native",
    "chain_of",
    "keys",
    "ShellRegistry",
    "make_shell",
    "native",
    "shell",
]
