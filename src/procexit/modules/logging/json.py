from typing import Optional
from .base import BaseLogger


class JsonLogger(BaseLogger):
    """Logger that outputs JSON for machine parsing."""

    def __init__(self, log_level: str = "INFO"):
        super().__init__(log_level)
        # Configure loguru for JSON output
        self.logger.configure(
            handlers=self._split_handlers(
                "{time} | {level} | {message}",
                log_level,
                serialize=True,
            )
        )

    def warn(self, message: str):
        self.logger.bind(type="warning").warning(message)

    def fatal(self, message: str, error: Optional[object] = None):
        self.logger.bind(
            type="fatal",
            error=None if error is None else repr(error),
        ).opt(exception=self._exception_for(error)).critical(message)

    def info(self, message: str):
        self.logger.bind(type="info").info(message)

    def debug(self, message: str):
        self.logger.bind(type="debug").debug(message)
