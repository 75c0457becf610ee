#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Logging setup for the panfilter command-line driver.

The library itself only creates module loggers; handlers are installed here,
by the driver, and always write to stderr because stdout carries the
filtered document.
"""

from __future__ import annotations

import logging
import sys
from typing import Optional

from panfilter.exceptions import ValidationError

TRACE_FORMAT = "[%(asctime)s] [%(levelname)s] [%(name)s] %(message)s"
PLAIN_FORMAT = "%(levelname)s: %(message)s"
TRACE_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def resolve_log_level(log_level: int | str) -> int:
    """Return the numeric level for a level number or name.

    Raises
    ------
    ValidationError
        If ``log_level`` names no standard logging level

    """
    if isinstance(log_level, int):
        return log_level
    resolved = logging.getLevelName(str(log_level).upper())
    if not isinstance(resolved, int):
        raise ValidationError(f"Unknown log level: {log_level!r}", parameter_name="log_level", parameter_value=log_level)
    return resolved


def _console_handler(trace_mode: bool, use_rich: bool) -> logging.Handler:
    if use_rich:
        from rich.console import Console
        from rich.logging import RichHandler

        handler: logging.Handler = RichHandler(
            console=Console(stderr=True), show_time=trace_mode, show_path=trace_mode, markup=False
        )
        handler.setFormatter(logging.Formatter("%(message)s"))
        return handler

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        logging.Formatter(TRACE_FORMAT if trace_mode else PLAIN_FORMAT, datefmt=TRACE_DATE_FORMAT if trace_mode else None)
    )
    return handler


def configure_logging(
    log_level: int | str,
    log_file: Optional[str] = None,
    trace_mode: bool = False,
    use_rich: bool = False,
) -> logging.Logger:
    """Install the driver's root logging handlers.

    Parameters
    ----------
    log_level : int | str
        Numeric logging level or level name (e.g. "INFO")
    log_file : str, optional
        Also append log records to this file. A file that cannot be opened
        is reported as a warning and otherwise ignored.
    trace_mode : bool, default False
        Emit timestamps and logger names
    use_rich : bool, default False
        Render console records with rich

    Returns
    -------
    logging.Logger
        The configured root logger

    """
    level = resolve_log_level(log_level)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)

    console_handler = _console_handler(trace_mode, use_rich)
    console_handler.setLevel(level)
    root_logger.addHandler(console_handler)

    if log_file:
        try:
            file_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
        except OSError as exc:
            root_logger.warning("Could not open log file %s: %s", log_file, exc)
        else:
            file_handler.setLevel(level)
            file_handler.setFormatter(logging.Formatter(TRACE_FORMAT, datefmt=TRACE_DATE_FORMAT))
            root_logger.addHandler(file_handler)
            root_logger.debug("Logging to file: %s", log_file)

    return root_logger
