"""Logging configuration for scripts and interactive sessions."""

import logging
from pathlib import Path
from typing import Optional, Union

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def configure_logging(
    level: Union[int, str] = logging.INFO,
    log_file: Optional[Union[str, Path]] = None,
) -> logging.Logger:
    """
    Configure the root logger for the holdem package.

    The library modules only create named loggers; this is called from
    entry points (scripts, notebooks) that want console or file output.

    Args:
        level: Logging level name or number
        log_file: Optional path for a UTF-8 log file

    Returns:
        The package logger
    """
    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if log_file is not None:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(path, encoding="utf-8"))

    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        handlers=handlers,
        force=True,
    )
    return logging.getLogger("holdem")


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
