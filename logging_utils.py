"""
Logging configuration built on loguru.

stdout is reserved for command output (scripts, JSON), so console logs go
to stderr. A rotating file sink is added when a log directory is given.
"""

import sys
from pathlib import Path
from typing import Optional, Union

from loguru import logger

LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{extra[component]}</cyan> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
    "<level>{message}</level>"
)


def configure_logging(
    level: str = "WARNING",
    log_dir: Optional[Union[Path, str]] = None,
) -> None:
    """Configure loguru sinks for stderr and optional file output."""
    logger.remove()
    logger.enable("prefdiff")
    logger.configure(extra={"component": "prefdiff"})

    logger.add(
        sys.stderr,
        format=LOG_FORMAT,
        colorize=True,
        level=level.upper(),
    )

    if log_dir:
        path = Path(log_dir).expanduser()
        path.mkdir(parents=True, exist_ok=True)
        logger.add(
            path / "prefdiff.log",
            rotation="1 day",
            retention="14 days",
            level="DEBUG",
            backtrace=False,
            diagnose=False,
            format=LOG_FORMAT,
        )


def get_logger(name: Optional[str] = None):
    """Return a logger bound to a component name."""
    if name:
        return logger.bind(component=name)
    return logger
