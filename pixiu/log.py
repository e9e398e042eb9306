"""Process-wide loggers writing console-formatted lines to stdout, stderr or a rotating file."""

from __future__ import annotations

import gzip
import logging
import logging.handlers
import os
import shutil
import sys
import threading
import time
from dataclasses import dataclass
from pathlib import Path

_DPANIC = logging.ERROR + 1
_PANIC = logging.ERROR + 2

_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "": logging.INFO,
    "warn": logging.WARNING,
    "error": logging.ERROR,
    "dpanic": _DPANIC,
    "panic": _PANIC,
    "fatal": logging.CRITICAL,
}

_LEVEL_NAMES = {
    logging.DEBUG: "debug",
    logging.INFO: "info",
    logging.WARNING: "warn",
    logging.ERROR: "error",
    _DPANIC: "dpanic",
    _PANIC: "panic",
    logging.CRITICAL: "fatal",
}

_DEFAULT_MAX_SIZE_MB = 100
# Zero backups means "keep them all", which a rotating handler needs as a large count.
_UNLIMITED_BACKUPS = 9999


@dataclass
class Configuration:
    """Where and how a logger writes."""

    log_type: str = ""
    log_file: str = ""
    log_level: str = ""
    rotate_max_size: int = 0
    rotate_max_age: int = 0
    rotate_max_backups: int = 0
    compress: bool = False


class _ConsoleFormatter(logging.Formatter):
    def __init__(self) -> None:
        super().__init__(
            fmt="%(asctime)s\t%(levelname)s\t%(filename)s:%(lineno)d\t%(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

    def format(self, record: logging.LogRecord) -> str:
        record.levelname = _LEVEL_NAMES.get(record.levelno, record.levelname.lower())
        return super().format(record)


class _RotatingHandler(logging.handlers.RotatingFileHandler):
    """Size-based rotation with optional gzip compression and age-based cleanup."""

    def __init__(self, path: str, max_size_mb: int, max_age_days: int, max_backups: int, compress: bool) -> None:
        directory = os.path.dirname(path)
        if directory:
            os.makedirs(directory, mode=0o755, exist_ok=True)
        super().__init__(
            path,
            maxBytes=(max_size_mb or _DEFAULT_MAX_SIZE_MB) * 1024 * 1024,
            backupCount=max_backups or _UNLIMITED_BACKUPS,
            encoding="utf-8",
            delay=True,
        )
        self._max_age_days = max_age_days
        if compress:
            self.namer = lambda name: name + ".gz"
            self.rotator = _gzip_rotate

    def doRollover(self) -> None:
        super().doRollover()
        if self._max_age_days > 0:
            self._remove_old_backups()

    def _remove_old_backups(self) -> None:
        base = Path(self.baseFilename)
        cutoff = time.time() - self._max_age_days * 86400
        for backup in base.parent.glob(base.name + ".*"):
            try:
                if backup.stat().st_mtime < cutoff:
                    backup.unlink()
            except OSError:
                continue


def _gzip_rotate(source: str, dest: str) -> None:
    with open(source, "rb") as src, gzip.open(dest, "wb") as dst:
        shutil.copyfileobj(src, dst)
    os.remove(source)


def _parse_level(text: str) -> int:
    for candidate in (text, text.lower()):
        if candidate in _LEVELS:
            return _LEVELS[candidate]
    raise ValueError(f"unrecognized level: {text!r}")


class Logger:
    """A leveled logger; messages take printf-style arguments."""

    def __init__(self, logger: logging.Logger) -> None:
        self._logger = logger

    @property
    def level(self) -> int:
        return self._logger.level

    def info(self, msg: str, *args: object) -> None:
        self._logger.info(msg, *args, stacklevel=2)

    def warn(self, msg: str, *args: object) -> None:
        self._logger.warning(msg, *args, stacklevel=2)

    def error(self, msg: str, *args: object) -> None:
        self._logger.error(msg, *args, stacklevel=2)

    def close(self) -> None:
        """Flush and release the underlying output."""
        for handler in list(self._logger.handlers):
            handler.close()
            self._logger.removeHandler(handler)


def new_logger(config: Configuration) -> Logger:
    """Build a logger from ``config``; an unknown level raises ValueError."""
    level = _parse_level(config.log_level)
    kind = config.log_type.lower()
    if kind == "stderr":
        handler: logging.Handler = logging.StreamHandler(sys.stderr)
    elif kind == "file":
        handler = _RotatingHandler(
            config.log_file,
            config.rotate_max_size,
            config.rotate_max_age,
            config.rotate_max_backups,
            config.compress,
        )
    else:
        handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(_ConsoleFormatter())

    # Built directly so it is not shared through the global logging registry.
    inner = logging.Logger("pixiu", level)
    inner.propagate = False
    inner.addHandler(handler)
    return Logger(inner)


_lock = threading.Lock()
_logger: Logger | None = None
_access_logger: Logger | None = None


def register(log_type: str, log_dir: str, log_level: str) -> None:
    """Install the application and access loggers; levels other than warn and error mean info."""
    global _logger, _access_logger

    level = log_level.lower()
    if level not in ("error", "warn"):
        level = "info"

    access = new_logger(
        Configuration(
            log_type=log_type,
            log_file=os.path.join(log_dir, "access.log"),
            log_level="info",
            rotate_max_size=500,
            rotate_max_age=7,
            rotate_max_backups=3,
        )
    )
    app = new_logger(
        Configuration(
            log_type=log_type,
            log_file=os.path.join(log_dir, "pixiu.log"),
            log_level=level,
            rotate_max_size=500,
            rotate_max_age=7,
            rotate_max_backups=3,
        )
    )
    with _lock:
        previous = (_logger, _access_logger)
        _logger, _access_logger = app, access
    for old in previous:
        if old is not None:
            old.close()


def get_logger() -> Logger:
    """The application logger; an info-level stdout logger until one is registered."""
    global _logger
    with _lock:
        if _logger is None:
            _logger = new_logger(Configuration())
        return _logger


def get_access_logger() -> Logger:
    """The access logger; an info-level stdout logger until one is registered."""
    global _access_logger
    with _lock:
        if _access_logger is None:
            _access_logger = new_logger(Configuration())
        return _access_logger