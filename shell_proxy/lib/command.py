from __future__ import annotations

import logging
import os
import shlex
import subprocess
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Sequence

from ..config import ShellConfig

logger = logging.getLogger(__name__)

EXIT_TIMEOUT = 124
EXIT_NOT_EXECUTABLE = 126
EXIT_NOT_FOUND = 127


@dataclass(frozen=True)
class ExecutionResult:
    argv: List[str]
    exit_code: int
    stdout: str
    stderr: str

    def __str__(self) -> str:
        return self.stdout

    def to(self, path: str | os.PathLike) -> "ExecutionResult":
        """Write stdout to a file, replacing its contents."""
        Path(path).write_text(self.stdout, encoding="utf-8")
        return self

    def to_end(self, path: str | os.PathLike) -> "ExecutionResult":
        """Append stdout to a file."""
        with Path(path).open("a", encoding="utf-8") as f:
            f.write(self.stdout)
        return self


def _fmt_argv(argv: Sequence[str]) -> str:
    return " ".join(shlex.quote(a) for a in argv)


def _text(data: str | bytes | None) -> str:
    if data is None:
        return ""
    if isinstance(data, bytes):
        return data.decode("utf-8", errors="replace")
    return data


class ExecutionEngine:
    """Spawn external commands from literal word lists.

    - Every word is one argv element; nothing is split, globbed or re-quoted.
    - Command failures come back as data in ExecutionResult.exit_code, the
      engine only raises for malformed input (empty argv, NUL bytes).
    - Unless config.silent, captured output is echoed once the process exits.
    """

    def __init__(self, config: Optional[ShellConfig] = None) -> None:
        self.config = config if config is not None else ShellConfig()

    def _env(self) -> Dict[str, str]:
        return dict(os.environ, **(self.config.env or {}))

    def _log_cmd(self, argv: Sequence[str]) -> None:
        level = logging.INFO if self.config.verbose else logging.DEBUG
        logger.log(level, "CMD %s", _fmt_argv(argv))

    def report(self, result: ExecutionResult) -> ExecutionResult:
        if result.stdout:
            logger.debug("STDOUT %s", result.stdout.strip())
        if result.stderr:
            logger.debug("STDERR %s", result.stderr.strip())
        if result.exit_code != 0:
            logger.debug("Exit %d: %s", result.exit_code, _fmt_argv(result.argv))

        if not self.config.silent:
            sys.stdout.write(result.stdout)
            sys.stderr.write(result.stderr)
        return result

    def execute(self, words: Sequence[str]) -> ExecutionResult:
        argv = list(words)
        if not argv:
            raise ValueError("Cannot execute an empty command")
        for w in argv:
            if not isinstance(w, str):
                raise TypeError(f"Command words must be str, got {type(w).__name__}")
            if "\0" in w:
                raise ValueError(f"Command word contains a NUL byte: {w!r}")

        self._log_cmd(argv)

        try:
            p = subprocess.run(
                argv,
                stdin=subprocess.DEVNULL,
                text=True,
                encoding="utf-8",
                errors="replace",
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                cwd=self.config.cwd,
                env=self._env(),
                timeout=self.config.timeout_s,
            )
        except FileNotFoundError:
            if self.config.cwd and not os.path.isdir(self.config.cwd):
                return self.report(
                    ExecutionResult(argv=argv, exit_code=1, stdout="", stderr=f"no such directory: {self.config.cwd}\n")
                )
            return self.report(
                ExecutionResult(argv=argv, exit_code=EXIT_NOT_FOUND, stdout="", stderr=f"{argv[0]}: command not found\n")
            )
        except PermissionError:
            return self.report(
                ExecutionResult(argv=argv, exit_code=EXIT_NOT_EXECUTABLE, stdout="", stderr=f"{argv[0]}: permission denied\n")
            )
        except subprocess.TimeoutExpired as e:
            stderr = _text(e.stderr) + f"{argv[0]}: timed out after {self.config.timeout_s}s\n"
            return self.report(
                ExecutionResult(argv=argv, exit_code=EXIT_TIMEOUT, stdout=_text(e.stdout), stderr=stderr)
            )
        except OSError as e:
            # ENOEXEC, ENOTDIR, E2BIG and friends: the command could not start.
            return self.report(
                ExecutionResult(argv=argv, exit_code=EXIT_NOT_EXECUTABLE, stdout="", stderr=f"{argv[0]}: {e.strerror or e}\n")
            )

        return self.report(ExecutionResult(argv=argv, exit_code=p.returncode, stdout=p.stdout, stderr=p.stderr))

    def execute_line(self, line: str) -> ExecutionResult:
        """Run a full command line through /bin/sh.

        Only the explicit ``exec`` builtin takes this path. Command chains
        always go through execute() with discrete words.
        """

        argv = ["/bin/sh", "-c", line]
        self._log_cmd(argv)
        try:
            p = subprocess.run(
                line,
                shell=True,
                stdin=subprocess.DEVNULL,
                text=True,
                encoding="utf-8",
                errors="replace",
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                cwd=self.config.cwd,
                env=self._env(),
                timeout=self.config.timeout_s,
            )
        except FileNotFoundError:
            # /bin/sh is always there; a missing cwd is the only way to get here.
            return self.report(
                ExecutionResult(argv=argv, exit_code=1, stdout="", stderr=f"no such directory: {self.config.cwd}\n")
            )
        except subprocess.TimeoutExpired as e:
            stderr = _text(e.stderr) + f"timed out after {self.config.timeout_s}s\n"
            return self.report(
                ExecutionResult(argv=argv, exit_code=EXIT_TIMEOUT, stdout=_text(e.stdout), stderr=stderr)
            )
        except OSError as e:
            # ENOEXEC, ENOTDIR, E2BIG and friends: the command could not start.
            return self.report(
                ExecutionResult(argv=argv, exit_code=EXIT_NOT_EXECUTABLE, stdout="", stderr=f"{argv[0]}: {e.strerror or e}\n")
            )

        return self.report(ExecutionResult(argv=argv, exit_code=p.returncode, stdout=p.stdout, stderr=p.stderr))


DEFAULT_ENGINE = ExecutionEngine()
