from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)


@dataclass
class ShellConfig:
    """Process-wide knobs for an ExecutionEngine.

    Mutable on purpose: the default registry exposes this object as
    ``shell.config`` so callers can flip ``silent`` at run time.
    """

    silent: bool = False
    verbose: bool = False
    cwd: Optional[str] = None
    env: Dict[str, str] = field(default_factory=dict)
    timeout_s: Optional[float] = None


def _detect_format(path: Path) -> str:
    ext = path.suffix.lower().lstrip(".")
    if ext in {"json", "yaml", "yml"}:
        return ext
    # Default to JSON for unknown extensions.
    return "json"


def _load_raw(p: Path) -> Any:
    fmt = _detect_format(p)
    if fmt in {"yaml", "yml"}:
        try:
            import yaml  # type: ignore
        except Exception as e:  # pragma: no cover
            raise RuntimeError(
                "YAML config requested but PyYAML is not available. "
                "Use a JSON config or install PyYAML."
            ) from e
        try:
            return yaml.safe_load(p.read_text(encoding="utf-8")) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in {p}: {e}") from e
    return json.loads(p.read_text(encoding="utf-8"))


def load_shell_config(path: str) -> ShellConfig:
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(path)

    raw = _load_raw(p)
    if not isinstance(raw, dict):
        raise ValueError(f"Shell config must be an object/dict, got {type(raw)}")

    known = {f.name for f in fields(ShellConfig)}
    unknown = sorted(set(raw) - known)
    if unknown:
        raise ValueError(f"Unknown shell config keys: {', '.join(unknown)}")

    env = raw.get("env") or {}
    if not isinstance(env, dict):
        raise ValueError("'env' must be a mapping of variable names to values")

    timeout = raw.get("timeout_s")
    cfg = ShellConfig(
        silent=bool(raw.get("silent", False)),
        verbose=bool(raw.get("verbose", False)),
        cwd=str(raw["cwd"]) if raw.get("cwd") else None,
        env={str(k): str(v) for k, v in env.items()},
        timeout_s=float(timeout) if timeout is not None else None,
    )
    logger.debug("Loaded shell config from %s: %s", path, cfg)
    return cfg
