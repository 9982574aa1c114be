"""Logging for the assistant brain.

One loguru configuration shared by the API and the CLI. Every record carries the
application name in ``extra["app"]``; call sites add their own fields as kwargs
(``logger.info("Action executed", kind=..., action_id=...)``), which end up in
``extra`` and are written to the file sink.
"""

import sys
from pathlib import Path

from loguru import logger

CONSOLE_FORMAT = (
    "<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | <magenta>{extra[app]}</magenta> | "
    "<cyan>{name}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
)
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {name}:{function}:{line} | {message} | {extra}"


def setup_logger(
    level: str = "INFO",
    log_file: str | None = None,
    *,
    app_name: str = "brain",
    rotation: str = "10 MB",
    retention: str = "7 days",
) -> None:
    """Replace all sinks with a console sink and, optionally, a rotating file sink.

    Args:
        level: Minimum level for every sink
        log_file: Path of the file sink; console only when None
        app_name: Value bound to ``extra["app"]`` on every record
        rotation: When the file sink rotates (e.g. "10 MB", "1 day")
        retention: How long rotated files are kept (e.g. "7 days")
    """
    handlers: list[dict] = [
        {"sink": sys.stderr, "format": CONSOLE_FORMAT, "level": level, "colorize": True},
    ]

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append({
            "sink": log_path,
            "format": FILE_FORMAT,
            "level": level,
            "rotation": rotation,
            "retention": retention,
            "compression": "zip",
            "backtrace": True,
            # No local variable values in tracebacks
            "diagnose": False,
        })

    logger.configure(handlers=handlers, extra={"app": app_name})
    logger.debug("Logger configured", level=level, log_file=log_file)
