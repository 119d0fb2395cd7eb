from typing import Optional
from .base import BaseLogger


class PlainLogger(BaseLogger):
    """Logger that outputs plain text, suitable for CI/file output."""

    def __init__(self, log_level: str = "INFO"):
        super().__init__(log_level)
        # Configure loguru for plain output
        self.logger.configure(
            handlers=self._split_handlers(
                "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {process} | {message}",
                log_level,
                colorize=False,
            )
        )

    def warn(self, message: str):
        self.logger.warning(message)

    def fatal(self, message: str, error: Optional[object] = None):
        self.logger.opt(exception=self._exception_for(error)).critical(
            self._describe(message, error)
        )
