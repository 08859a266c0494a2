# harvest/utils/logger.py
import datetime
from typing import Callable, Optional, Set

class LogLevel:
    DEBUG = 0
    INFO = 1
    WARNING = 2
    ERROR = 3
    CRITICAL = 4 # Only fatal errors
    SILENT = 5

_LEVEL_NAMES = {
    LogLevel.DEBUG: "DEBUG",
    LogLevel.INFO: "INFO",
    LogLevel.WARNING: "WARN",
    LogLevel.ERROR: "ERROR",
    LogLevel.CRITICAL: "CRIT"
}

class Logger:
    """
    Process-wide console logger.

    Every line carries a source tag (e.g. "TaskManager") so individual
    subsystems can be muted without touching the global level.
    """
    _instance = None
    _level = LogLevel.DEBUG  # Default level
    _muted_sources: Set[str] = set()
    _sink: Optional[Callable[[str], None]] = None  # None -> print

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super(Logger, cls).__new__(cls)
        return cls._instance

    @classmethod
    def set_level(cls, level: int):
        """Sets the minimum logging level."""
        cls._level = level

    @classmethod
    def get_level(cls) -> int:
        return cls._level

    @classmethod
    def set_source_enabled(cls, source: str, enabled: bool):
        """Mutes or unmutes every line tagged with `source`."""
        if enabled:
            cls._muted_sources.discard(source)
        else:
            cls._muted_sources.add(source)

    @classmethod
    def is_source_enabled(cls, source: str) -> bool:
        return source not in cls._muted_sources

    @classmethod
    def set_sink(cls, sink: Optional[Callable[[str], None]]):
        """Redirects formatted lines (e.g. to an in-game console). None restores stdout."""
        cls._sink = sink

    @classmethod
    def _log(cls, level: int, source: str, message: str):
        if level < cls._level or source in cls._muted_sources:
            return
        timestamp = datetime.datetime.now().strftime("%H:%M:%S")
        level_name = _LEVEL_NAMES.get(level, "LOG")

        # Format: [TIME] [LEVEL] [Source] Message
        line = f"[{timestamp}] [{level_name:<5}] [{source}] {message}"
        if cls._sink is not None:
            cls._sink(line)
        else:
            print(line)

    @classmethod
    def debug(cls, source: str, message: str):
        cls._log(LogLevel.DEBUG, source, message)

    @classmethod
    def info(cls, source: str, message: str):
        cls._log(LogLevel.INFO, source, message)

    @classmethod
    def warning(cls, source: str, message: str):
        cls._log(LogLevel.WARNING, source, message)

    @classmethod
    def error(cls, source: str, message: str):
        cls._log(LogLevel.ERROR, source, message)

    @classmethod
    def critical(cls, source: str, message: str):
        cls._log(LogLevel.CRITICAL, source, message)

    @classmethod
    def separator(cls, level: int = LogLevel.DEBUG):
        """Prints a separator line if the level is active."""
        if level >= cls._level:
            line = "-" * 60
            if cls._sink is not None:
                cls._sink(line)
            else:
                print(line)
