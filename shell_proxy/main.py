from __future__ import annotations

import argparse
import logging
import sys
from typing import Any, List, Optional, Tuple

from .config import ShellConfig, load_shell_config
from .lib.command import ExecutionEngine, ExecutionResult
from .logging_utils import configure_logging
from .proxy import CommandProxy, build_native
from .registry import make_shell

logger = logging.getLogger(__name__)


def _split_call_args(raw: List[str]) -> Tuple[List[str], List[str]]:
    if "--" in raw:
        i = raw.index("--")
        return raw[:i], raw[i + 1:]
    return raw, []


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="shell-proxy",
        description="Run a command chain: shell-proxy git remote show -- origin",
    )
    p.add_argument("--config", default=None, help="Path to shell config (json|yaml)")
    p.add_argument("--log", default=None, help="Also write logs to this file")
    p.add_argument("--silent", action="store_true", help="Do not echo command output")
    p.add_argument("--verbose", action="store_true", help="Log every command line")
    p.add_argument(
        "--builtins",
        action="store_true",
        help="Resolve the first segment against builtins (echo, cat, rm, ...) before spawning",
    )
    p.add_argument("segments", nargs="+", help="Command and subcommand names")
    return p


def _load_config(args: argparse.Namespace) -> ShellConfig:
    cfg = load_shell_config(args.config) if args.config else ShellConfig()
    if args.silent:
        cfg.silent = True
    if args.verbose:
        cfg.verbose = True
    return cfg


def run(segments: List[str], call_args: List[str], *, config: ShellConfig, builtins: bool = False) -> Any:
    """Resolve segments on a fresh root and call the result with call_args."""

    engine = ExecutionEngine(config)
    target: Any = make_shell(engine) if builtins else build_native(engine=engine)
    for seg in segments:
        if not isinstance(target, CommandProxy):
            raise ValueError(f"Cannot add {seg!r} after a builtin")
        target = target[seg]

    if not callable(target):
        return target
    return target(*call_args)


def main(argv: Optional[List[str]] = None) -> int:
    raw = list(sys.argv[1:] if argv is None else argv)
    head, call_args = _split_call_args(raw)

    p = build_parser()
    args = p.parse_args(head)

    configure_logging(
        log_path=args.log,
        level=logging.DEBUG if args.verbose else logging.WARNING,
    )

    try:
        cfg = _load_config(args)
        out = run(args.segments, call_args, config=cfg, builtins=args.builtins)
    except KeyboardInterrupt:
        return 130
    except (OSError, ValueError) as e:
        logger.error("%s", e)
        return 2

    if isinstance(out, ExecutionResult):
        return int(out.exit_code)
    if out is None:
        return 1
    print(out)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
