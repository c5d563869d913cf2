"""
Logging setup shared by the library and the `txbuild` command.

Library modules only ask for loggers with `get_logger`. Handlers are
installed once, by `configure_logging`, when the command line starts.
Signing hashes are logged at the `VERBOSE` level; keys never are.
"""

import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union, cast

VERBOSE_LEVEL = 15
LEVEL_NAMES = ("DEBUG", "VERBOSE", "INFO", "WARNING", "ERROR", "CRITICAL")
DEFAULT_LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

logging.addLevelName(VERBOSE_LEVEL, "VERBOSE")


class TxBuilderLogger(logging.Logger):
    """Logger with an extra `verbose` method, between `debug` and `info`."""

    def verbose(self, msg: object, *args: Any, **kwargs: Any) -> None:
        """Log `msg` with severity `VERBOSE_LEVEL`."""
        if self.isEnabledFor(VERBOSE_LEVEL):
            kwargs.setdefault("stacklevel", 2)
            self.log(VERBOSE_LEVEL, msg, *args, **kwargs)


logging.setLoggerClass(TxBuilderLogger)


def get_logger(name: str) -> TxBuilderLogger:
    """Return the logger called `name`, typed with the `verbose` method."""
    return cast(TxBuilderLogger, logging.getLogger(name))


class UTCFormatter(logging.Formatter):
    """Formats record times in UTC, with milliseconds and an explicit offset."""

    def formatTime(self, record: logging.LogRecord, datefmt: Optional[str] = None) -> str:  # noqa: N802
        """Return e.g. `2024-01-01 12:00:00.000+00:00`."""
        created = datetime.fromtimestamp(record.created, tz=timezone.utc)
        return f"{created:%Y-%m-%d %H:%M:%S}.{created.microsecond // 1000:03d}+00:00"


class ColorFormatter(UTCFormatter):
    """Wraps the level name in an ANSI color for terminals."""

    RESET = "\033[0m"
    COLORS: Mapping[int, str] = {
        logging.DEBUG: "\033[37m",
        VERBOSE_LEVEL: "\033[36m",
        logging.INFO: "\033[36m",
        logging.WARNING: "\033[33m",
        logging.ERROR: "\033[31m",
        logging.CRITICAL: "\033[41m",
    }

    def format(self, record: logging.LogRecord) -> str:
        """Format a colored copy so other handlers keep the plain level name."""
        colored: Dict[str, Any] = dict(record.__dict__)
        color = self.COLORS.get(record.levelno, self.RESET)
        colored["levelname"] = f"{color}{record.levelname}{self.RESET}"
        return super().format(logging.makeLogRecord(colored))


class LogLevel:
    """Parses the `--log-level` command line value."""

    @classmethod
    def from_cli(cls, value: Union[int, str]) -> int:
        """
        Return the numeric level for a level name (any case) or a number.
        """
        if isinstance(value, int):
            return value
        value = value.strip()
        if value.isdigit():
            return int(value)
        level = logging.getLevelName(value.upper())
        if not isinstance(level, int):
            raise ValueError(
                f"Invalid log level '{value}'. Expected a number or one of: "
                + ", ".join(LEVEL_NAMES)
            )
        return level


def configure_logging(
    log_level: Union[int, str] = "INFO",
    log_file: Optional[Union[str, Path]] = None,
    log_to_console: bool = True,
    log_format: str = DEFAULT_LOG_FORMAT,
    use_color: Optional[bool] = None,
) -> Optional[logging.FileHandler]:
    """
    Replace the handlers of the root logger.

    Args:
        log_level: Level name or number applied to the root logger.
        log_file: Optional file that receives a copy of the log, truncated first.
        log_to_console: Whether records are written to stderr.
        log_format: Format string shared by every handler.
        use_color: Color the console level names; defaults to whether stderr is a tty.

    Returns:
        The file handler, when `log_file` was given.

    """
    level = LogLevel.from_cli(log_level)

    root_logger = logging.getLogger()
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
        handler.close()
    root_logger.setLevel(level)

    file_handler: Optional[logging.FileHandler] = None
    if log_file is not None:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(path, mode="w")
        file_handler.setFormatter(UTCFormatter(fmt=log_format))
        root_logger.addHandler(file_handler)

    if log_to_console:
        console_handler = logging.StreamHandler(sys.stderr)
        colored = sys.stderr.isatty() if use_color is None else use_color
        formatter_class = ColorFormatter if colored else UTCFormatter
        console_handler.setFormatter(formatter_class(fmt=log_format))
        root_logger.addHandler(console_handler)

    return file_handler
