from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional

FALLBACK_LOG_NAME = "shell-proxy.log"


def configure_logging(
    log_path: Optional[str] = None,
    level: int = logging.INFO,
    also_console: bool = True,
) -> Optional[str]:
    """Configure root logging for the shell-proxy CLI.

    Notes:
    - Library code only logs through module loggers; nothing is configured
      on import.
    - If log_path cannot be opened we fall back to a file in the working
      directory and report that path instead.

    Returns the log file path in use, or None when logging to console only.
    """

    logger = logging.getLogger()
    logger.setLevel(level)

    # Avoid duplicate handlers if configure_logging() is called multiple times.
    if getattr(logger, "_shell_proxy_configured", False):
        return getattr(logger, "_shell_proxy_log_path", log_path)

    chosen_path: Optional[str] = None
    handlers: list[logging.Handler] = []

    fmt = logging.Formatter(
        fmt="%(asctime)s %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S%z",
    )

    if log_path:
        try:
            Path(os.path.dirname(log_path) or ".").mkdir(parents=True, exist_ok=True)
            file_handler: logging.Handler = logging.FileHandler(log_path)
            chosen_path = log_path
        except OSError:
            fallback = str(Path.cwd() / FALLBACK_LOG_NAME)
            file_handler = logging.FileHandler(fallback)
            chosen_path = fallback
        file_handler.setFormatter(fmt)
        handlers.append(file_handler)

    if also_console:
        console = logging.StreamHandler()
        console.setFormatter(fmt)
        handlers.append(console)

    for h in handlers:
        logger.addHandler(h)

    setattr(logger, "_shell_proxy_configured", True)
    setattr(logger, "_shell_proxy_log_path", chosen_path)

    logging.getLogger(__name__).debug(
        "Logging initialized (requested=%s, actual=%s)", log_path, chosen_path
    )
    return chosen_path
