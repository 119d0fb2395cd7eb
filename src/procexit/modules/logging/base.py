import sys
from abc import ABC, abstractmethod
from typing import Optional
from loguru import logger


class BaseLogger(ABC):
    """Abstract base class for exit diagnostics loggers.

    Anything exposing ``warn(message)`` and ``fatal(message, error)`` can be
    handed to the coordinator; this base class is the loguru-backed family.
    """

    def __init__(self, log_level: str = "INFO"):
        self.logger = logger
        self.log_level = log_level

    @abstractmethod
    def warn(self, message: str):
        """Log a warning message."""
        pass

    @abstractmethod
    def fatal(self, message: str, error: Optional[object] = None):
        """Log a fatal message, with the error that caused it if any."""
        pass

    def info(self, message: str):
        """Log an info message."""
        self.logger.info(message)

    def debug(self, message: str):
        """Log a debug message."""
        self.logger.debug(message)

    def _exception_for(self, error: Optional[object]) -> Optional[BaseException]:
        if isinstance(error, BaseException):
            return error
        return None

    def _describe(self, message: str, error: Optional[object]) -> str:
        # Non-exception payloads (signal names, rejection messages) go inline
        if error is None or isinstance(error, BaseException):
            return message
        return f"{message} ({error!r})"

    @staticmethod
    def _split_handlers(format: str, log_level: str, **options) -> list:
        """Loguru handlers sending ERROR and above to stderr, the rest to stdout."""
        return [
            {
                "sink": sys.stdout,
                "format": format,
                "level": log_level,
                "filter": lambda record: record["level"].no < 40,
                **options,
            },
            {
                "sink": sys.stderr,
                "format": format,
                "level": "ERROR",
                **options,
            },
        ]
