"""
Logging shared by the command API and the static server.

Every handler created here masks the provider API key. The key travels as a
``key=`` query parameter, so any logged model URL (including the request lines
httpx emits at INFO) would otherwise print it in clear.
"""
import logging
import os
import re
import sys
from typing import Optional, TextIO

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'
REDACTED = "***"

# Libraries that log full request URLs
URL_LOGGING_LIBRARIES = ("httpx", "httpcore")


class KeyRedactionFilter(logging.Filter):
    """Replace the value of any ``key=`` query parameter in a record's message."""

    KEY_PARAM = re.compile(r'([?&]key=)[^&\s"\'#]+')

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        redacted = self.KEY_PARAM.sub(r'\g<1>' + REDACTED, message)
        if redacted != message:
            record.msg = redacted
            record.args = None
        return True


class LevelColorFormatter(logging.Formatter):
    """Colors the level name when writing to a terminal."""

    LEVEL_COLORS = {
        'DEBUG': '\033[36m',
        'INFO': '\033[32m',
        'WARNING': '\033[33m',
        'ERROR': '\033[31m',
        'CRITICAL': '\033[35m',
    }
    RESET = '\033[0m'

    def __init__(self, use_color: bool = True):
        super().__init__(LOG_FORMAT, datefmt=DATE_FORMAT)
        self.use_color = use_color

    def format(self, record: logging.LogRecord) -> str:
        if not self.use_color:
            return super().format(record)

        # Work on a copy so other handlers still see the plain level name
        colored = logging.makeLogRecord(record.__dict__)
        color = self.LEVEL_COLORS.get(record.levelname, self.RESET)
        colored.levelname = f"{color}{record.levelname}{self.RESET}"
        return super().format(colored)


def get_log_level() -> int:
    """Resolve the log level from LOG_LEVEL, defaulting to INFO."""
    level = logging.getLevelName(os.getenv("LOG_LEVEL", "INFO").upper())
    return level if isinstance(level, int) else logging.INFO


def redact_library_loggers(names=URL_LOGGING_LIBRARIES) -> None:
    """Attach the key filter to third-party loggers, whatever handler ends up printing them."""
    for name in names:
        library_logger = logging.getLogger(name)
        if not any(isinstance(f, KeyRedactionFilter) for f in library_logger.filters):
            library_logger.addFilter(KeyRedactionFilter())


def setup_logger(name: str, level: Optional[int] = None, stream: Optional[TextIO] = None) -> logging.Logger:
    """
    Set up a logger with a redacting, optionally colored stream handler.

    Args:
        name: Logger name
        level: Logging level (defaults to LOG_LEVEL from the environment)
        stream: Output stream (defaults to stdout); colors are used only on a TTY

    Returns:
        Configured logger instance
    """
    if level is None:
        level = get_log_level()
    if stream is None:
        stream = sys.stdout

    logger = logging.getLogger(name)
    logger.setLevel(level)

    if logger.handlers:
        return logger

    handler = logging.StreamHandler(stream)
    handler.setLevel(level)
    handler.addFilter(KeyRedactionFilter())
    handler.setFormatter(LevelColorFormatter(use_color=stream.isatty()))

    logger.addHandler(handler)
    return logger


redact_library_loggers()
app_logger = setup_logger("stratify")
static_logger = setup_logger("stratify_static")
