# src/cryptotrack/shared/logging_conf.py
"""
Logging Configuration - Root Logger Setup

Configures the root logger once at startup. Every other module only calls
logging.getLogger(__name__) and logs with %-style arguments.

Output goes to stdout, to a size-rotated cryptotrack.log, or to both.

Files that USE this module:
- cryptotrack.app (main() configures logging from settings)
- tests.test_logging_conf (unit tests)

Files that this module USES:
- None (pure configuration module)
"""
import logging
import os
import sys
from pathlib import Path
from typing import List, Optional, Tuple, Union
from logging.handlers import RotatingFileHandler


LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s :: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
LOG_FILE_NAME = "cryptotrack.log"
STDOUT_ENV = "CRYPTOTRACK_LOG_STDOUT"

PathLike = Union[str, Path]


def _resolve_log_path(log_file: Optional[PathLike], log_dir: Optional[PathLike]) -> Optional[Path]:
    """log_dir wins over log_file; parent directories are created."""
    if log_dir:
        path = Path(log_dir) / LOG_FILE_NAME
    elif log_file:
        path = Path(log_file)
    else:
        return None
    path.parent.mkdir(parents=True, exist_ok=True)
    return path


def _build_handlers(
    log_path: Optional[Path],
    log_stdout: bool,
    max_bytes: int,
    backup_count: int,
) -> List[logging.Handler]:
    formatter = logging.Formatter(LOG_FORMAT, DATE_FORMAT)
    handlers: List[logging.Handler] = []

    if log_stdout:
        handlers.append(logging.StreamHandler(sys.stdout))
    if log_path is not None:
        handlers.append(
            RotatingFileHandler(log_path, maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8")
        )
    if not handlers:
        # Never run silent
        handlers.append(logging.StreamHandler(sys.stdout))

    for handler in handlers:
        handler.setFormatter(formatter)
    return handlers


def setup_logging(
    level: Union[int, str] = logging.INFO,
    log_file: Optional[PathLike] = None,
    log_dir: Optional[PathLike] = None,
    max_bytes: int = 10 * 1024 * 1024,
    backup_count: int = 5,
    log_stdout: Optional[bool] = None,
) -> Tuple[List[logging.Handler], Optional[Path]]:
    """
    Configure the root logger, replacing any handlers installed before.

    Args:
        level: Level as int or name ("debug" works too)
        log_file: Explicit log file path
        log_dir: Directory receiving cryptotrack.log (takes precedence over log_file)
        max_bytes: Rotation size of the log file
        backup_count: Rotated files kept
        log_stdout: Whether to log to stdout; read from CRYPTOTRACK_LOG_STDOUT when None

    Returns:
        The installed handlers and the log file path (None without file logging)
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
    if log_stdout is None:
        log_stdout = os.environ.get(STDOUT_ENV, "true").lower() == "true"

    log_path = _resolve_log_path(log_file, log_dir)
    handlers = _build_handlers(log_path, log_stdout, max_bytes, backup_count)
    logging.basicConfig(level=level, handlers=handlers, force=True)

    logging.getLogger(__name__).info(
        "Logging configured: %s, level=%s",
        f"file={log_path}" if log_path else "stdout",
        logging.getLevelName(level),
    )
    return handlers, log_path
