"""
Logging for tinypress with RFC 5424 syslog severity names.

A single ``tinypress`` logger is shared by the library and the CLI. Library
callers get console output out of the box; the CLI reconfigures it to also
write a dated log file, optionally rotated.
"""

import logging
import sys
import threading
from datetime import datetime
from logging.handlers import RotatingFileHandler, TimedRotatingFileHandler
from pathlib import Path
from typing import Optional


# ============================================================================
# RFC 5424 Syslog Severity Levels
# ============================================================================

# 0=Emergency, 1=Alert, 2=Critical, 3=Error, 4=Warning, 5=Notice, 6=Info, 7=Debug
EMERGENCY = 70
ALERT = 60
NOTICE = 25

logging.addLevelName(EMERGENCY, "EMERGENCY")
logging.addLevelName(ALERT, "ALERT")
logging.addLevelName(NOTICE, "NOTICE")

LOGGER_NAME = "tinypress"
CONSOLE_FORMAT = "%(message)s"
FILE_FORMAT = "%(asctime)s [%(levelname)s] [%(location)s] %(message)s"
FILE_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


# ============================================================================
# Formatters
# ============================================================================


class DetailedFormatter(logging.Formatter):
    """Formatter adding a ``module:function:line`` location field."""

    def format(self, record: logging.LogRecord) -> str:
        record.location = f"{record.module}:{record.funcName}:{record.lineno}"
        formatted = super().format(record)

        if record.exc_info and not record.exc_text:
            record.exc_text = self.formatException(record.exc_info)

        return formatted


class SimpleFormatter(logging.Formatter):
    """Message-only formatter for the console."""


# ============================================================================
# Singleton Logger
# ============================================================================


class TinypressLogger:
    """
    Thread-safe singleton wrapper around the ``tinypress`` logger.

    Console output shows INFO and above without location details. The file
    handler, when enabled, records every configured level with the calling
    location and full tracebacks.
    """

    _instance = None
    _lock = threading.Lock()

    def __new__(cls):
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    cls._instance = super().__new__(cls)
                    cls._instance._initialized = False
        return cls._instance

    def __init__(self):
        if getattr(self, "_initialized", False):
            return

        self._initialized = True
        self._logger = logging.getLogger(LOGGER_NAME)
        self._logger.propagate = False

        self._console_handler: Optional[logging.Handler] = None
        self._file_handler: Optional[logging.Handler] = None
        self._log_dir: Optional[Path] = None

        self.configure(enable_file=False)

    def configure(
        self,
        log_level: str = "INFO",
        log_dir: str = "logs",
        enable_console: bool = True,
        enable_file: bool = True,
        rotation_enabled: bool = False,
        rotation_type: str = "size",
        max_bytes: int = 10485760,  # 10 MB
        backup_count: int = 5,
        when: str = "midnight",
    ) -> None:
        """
        Replace the current handlers with a new configuration.

        Args:
            log_level: Logging level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)
            log_dir: Directory for log files
            enable_console: Write INFO and above to stdout
            enable_file: Write a dated log file into ``log_dir``
            rotation_enabled: Rotate the log file
            rotation_type: "size" or "time"
            max_bytes: Size threshold for size-based rotation
            backup_count: Number of rotated files to keep
            when: Interval for time-based rotation (e.g. "midnight", "H")
        """
        if rotation_enabled and rotation_type not in ("size", "time"):
            raise ValueError(f"Invalid rotation_type: {rotation_type}. Must be 'size' or 'time'.")

        self._cleanup_handlers()
        self._console_handler = None
        self._file_handler = None
        self._log_dir = None

        level = getattr(logging, log_level.upper(), logging.INFO)
        self._logger.setLevel(level)

        if enable_console:
            self._console_handler = logging.StreamHandler(sys.stdout)
            self._console_handler.setLevel(max(level, logging.INFO))
            self._console_handler.setFormatter(SimpleFormatter(fmt=CONSOLE_FORMAT))
            self._logger.addHandler(self._console_handler)

        if enable_file:
            log_path = Path(log_dir)
            log_path.mkdir(parents=True, exist_ok=True)
            self._log_dir = log_path

            log_file = log_path / f"tinypress_{datetime.now().strftime('%Y%m%d')}.log"
            self._file_handler = self._build_file_handler(
                log_file, rotation_enabled, rotation_type, max_bytes, backup_count, when
            )
            self._file_handler.setLevel(level)
            self._file_handler.setFormatter(DetailedFormatter(fmt=FILE_FORMAT, datefmt=FILE_DATE_FORMAT))
            self._logger.addHandler(self._file_handler)

    @staticmethod
    def _build_file_handler(
        log_file: Path,
        rotation_enabled: bool,
        rotation_type: str,
        max_bytes: int,
        backup_count: int,
        when: str,
    ) -> logging.Handler:
        if not rotation_enabled:
            return logging.FileHandler(log_file, encoding="utf-8", delay=True)
        if rotation_type == "size":
            return RotatingFileHandler(
                log_file, maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8", delay=True
            )
        return TimedRotatingFileHandler(log_file, when=when, backupCount=backup_count, encoding="utf-8", delay=True)

    def get_logger(self) -> logging.Logger:
        """Get the underlying :class:`logging.Logger`."""
        return self._logger

    @property
    def log_dir(self) -> Optional[Path]:
        return self._log_dir

    def _cleanup_handlers(self) -> None:
        for handler in list(self._logger.handlers):
            self._logger.removeHandler(handler)
            try:
                handler.close()
            except OSError:
                pass

    # RFC 5424 convenience methods, attributed to the calling frame

    def _log(self, level: int, msg: str, *args, **kwargs) -> None:
        kwargs.setdefault("stacklevel", 3)
        self._logger.log(level, msg, *args, **kwargs)

    def emergency(self, msg: str, *args, **kwargs) -> None:
        self._log(EMERGENCY, msg, *args, **kwargs)

    def alert(self, msg: str, *args, **kwargs) -> None:
        self._log(ALERT, msg, *args, **kwargs)

    def critical(self, msg: str, *args, **kwargs) -> None:
        self._log(logging.CRITICAL, msg, *args, **kwargs)

    def error(self, msg: str, *args, **kwargs) -> None:
        self._log(logging.ERROR, msg, *args, **kwargs)

    def warning(self, msg: str, *args, **kwargs) -> None:
        self._log(logging.WARNING, msg, *args, **kwargs)

    def notice(self, msg: str, *args, **kwargs) -> None:
        """Log a normal but significant condition, e.g. a finished compression."""
        self._log(NOTICE, msg, *args, **kwargs)

    def info(self, msg: str, *args, **kwargs) -> None:
        self._log(logging.INFO, msg, *args, **kwargs)

    def debug(self, msg: str, *args, **kwargs) -> None:
        self._log(logging.DEBUG, msg, *args, **kwargs)


def get_logger() -> TinypressLogger:
    """Return the shared :class:`TinypressLogger` instance."""
    return TinypressLogger()
