from __future__ import annotations

import logging
import os
import shutil
from pathlib import Path
from typing import Any, List, Optional, Sequence, Set, Tuple

from .chain import to_word
from .config import ShellConfig
from .lib.command import DEFAULT_ENGINE, ExecutionEngine, ExecutionResult
from .proxy import CommandProxy, build, build_native

logger = logging.getLogger(__name__)


def _split_flags(args: Sequence[str], allowed: str) -> Tuple[Set[str], List[str], Optional[str]]:
    """Split leading "-xy" style flags from operands.

    Returns (flags, operands, bad_flag). "--" ends flag parsing.
    """
    flags: Set[str] = set()
    operands = list(args)
    while operands and operands[0].startswith("-") and operands[0] != "-":
        head = operands.pop(0)
        if head == "--":
            break
        for ch in head[1:]:
            if ch not in allowed:
                return flags, operands, ch
            flags.add(ch)
    return flags, operands, None


class ShellRegistry:
    """Base object of the default ``shell`` root.

    Public attributes are the builtin commands plus ``env`` and ``config``.
    Builtins report failures the way spawned commands do: exit code 1 and a
    message on stderr, never an exception.
    """

    def __init__(self, engine: Optional[ExecutionEngine] = None) -> None:
        self._engine = engine if engine is not None else DEFAULT_ENGINE
        self.env = os.environ

    @property
    def config(self) -> ShellConfig:
        return self._engine.config

    @config.setter
    def config(self, value: ShellConfig) -> None:
        self._engine.config = value

    def _cwd(self) -> Path:
        return Path(self.config.cwd or os.getcwd())

    def _path(self, p: str) -> Path:
        return self._cwd() / p

    def _result(self, argv: List[str], *, stdout: str = "", errors: Sequence[str] = ()) -> ExecutionResult:
        stderr = "".join(f"{argv[0]}: {e}\n" for e in errors)
        return self._engine.report(
            ExecutionResult(argv=argv, exit_code=1 if errors else 0, stdout=stdout, stderr=stderr)
        )

    def echo(self, *args: Any) -> ExecutionResult:
        words = [to_word(a) for a in args]
        return self._result(["echo", *words], stdout=" ".join(words) + "\n")

    def cat(self, *paths: Any) -> ExecutionResult:
        words = [to_word(p) for p in paths]
        argv = ["cat", *words]
        if not words:
            return self._result(argv, errors=["no paths given"])

        out: List[str] = []
        errors: List[str] = []
        for w in words:
            p = self._path(w)
            if p.is_dir():
                errors.append(f"{w}: is a directory")
            elif not p.exists():
                errors.append(f"no such file or directory: {w}")
            else:
                out.append(p.read_text(encoding="utf-8", errors="replace"))
        return self._result(argv, stdout="".join(out), errors=errors)

    def touch(self, *paths: Any) -> ExecutionResult:
        words = [to_word(p) for p in paths]
        argv = ["touch", *words]
        if not words:
            return self._result(argv, errors=["no paths given"])

        errors: List[str] = []
        for w in words:
            try:
                self._path(w).touch()
            except OSError as e:
                errors.append(f"{w}: {e.strerror or e}")
        return self._result(argv, errors=errors)

    def rm(self, *args: Any) -> ExecutionResult:
        words = [to_word(a) for a in args]
        argv = ["rm", *words]
        flags, operands, bad = _split_flags(words, "frR")
        if bad is not None:
            return self._result(argv, errors=[f"option not recognized: {bad}"])
        if not operands:
            return self._result(argv, errors=["no paths given"])

        force = "f" in flags
        recursive = "r" in flags or "R" in flags
        errors: List[str] = []
        for w in operands:
            p = self._path(w)
            if not p.exists() and not p.is_symlink():
                if not force:
                    errors.append(f"no such file or directory: {w}")
                continue
            try:
                if p.is_dir() and not p.is_symlink():
                    if not recursive:
                        errors.append(f"path is a directory: {w}")
                        continue
                    shutil.rmtree(p)
                else:
                    p.unlink()
            except OSError as e:
                errors.append(f"{w}: {e.strerror or e}")
        return self._result(argv, errors=errors)

    def mkdir(self, *args: Any) -> ExecutionResult:
        words = [to_word(a) for a in args]
        argv = ["mkdir", *words]
        flags, operands, bad = _split_flags(words, "p")
        if bad is not None:
            return self._result(argv, errors=[f"option not recognized: {bad}"])
        if not operands:
            return self._result(argv, errors=["no paths given"])

        parents = "p" in flags
        errors: List[str] = []
        for w in operands:
            try:
                self._path(w).mkdir(parents=parents, exist_ok=parents)
            except FileExistsError:
                errors.append(f"path already exists: {w}")
            except FileNotFoundError:
                errors.append(f"no such file or directory: {w}")
            except OSError as e:
                errors.append(f"{w}: {e.strerror or e}")
        return self._result(argv, errors=errors)

    def pwd(self) -> ExecutionResult:
        return self._result(["pwd"], stdout=f"{self._cwd()}\n")

    def cd(self, path: Any = None) -> ExecutionResult:
        target = to_word(path) if path is not None else str(Path.home())
        argv = ["cd", target]
        p = self._path(target).resolve()
        if not p.is_dir():
            return self._result(argv, errors=[f"no such directory: {target}"])
        self.config.cwd = str(p)
        logger.debug("cwd is now %s", p)
        return self._result(argv)

    def exec(self, command: str) -> ExecutionResult:
        """Run a whole command line through /bin/sh.

        The caller owns the quoting here. Command chains never take this path.
        """
        return self._engine.execute_line(command)

    def which(self, name: Any) -> Optional[str]:
        search = self.config.env.get("PATH") or self.env.get("PATH")
        return shutil.which(to_word(name), path=search)


def make_shell(engine: Optional[ExecutionEngine] = None) -> CommandProxy:
    eng = engine if engine is not None else DEFAULT_ENGINE
    return build(ShellRegistry(eng), engine=eng)


shell = make_shell()
native = build_native()
