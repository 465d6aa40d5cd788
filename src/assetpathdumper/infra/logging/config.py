from __future__ import annotations

"""
Logging Configuration Models.

The dump runs quiet by default: only warnings (unresolvable container rows,
unloadable dependencies) reach the console. Chatter from the asset parsing
library is held to its own threshold so that -v shows pipeline progress
rather than parser internals.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Optional, Tuple

# Mapping of string identifiers to native logging constants
_LEVEL_MAP: Dict[str, int] = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "WARN": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}

# Third-party loggers that are only opened up in debug runs
PARSER_LOGGERS: Tuple[str, ...] = ("UnityPy",)


@dataclass(frozen=True)
class LoggingConfig:
    """
    Settings for one logging bootstrap.

    Attributes:
        level: Threshold for the application loggers.
        console: Write records to stderr.
        log_file: Optional path of a rotating log file.
        max_bytes: Segment size before the log file rotates.
        backup_count: Rotated segments kept on disk.
        parser_level: Threshold applied to PARSER_LOGGERS unless level is DEBUG.
        console_fmt: Format of console lines.
        file_fmt: Format of log file lines.
        datefmt: Timestamp format of log file lines.
    """
    level: str = "WARNING"
    console: bool = True
    log_file: Optional[str] = None

    max_bytes: int = 1024 * 1024
    backup_count: int = 2

    parser_level: str = "WARNING"

    console_fmt: str = "%(levelname)s | %(message)s"
    file_fmt: str = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
    datefmt: str = "%Y-%m-%d %H:%M:%S"

    @property
    def debug(self) -> bool:
        return str(self.level).strip().upper() == "DEBUG"
