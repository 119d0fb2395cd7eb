import click
from typing import Optional
from .base import BaseLogger


class ColorfulLogger(BaseLogger):
    """Logger that outputs colorful text for interactive terminals."""

    def __init__(self, log_level: str = "INFO"):
        super().__init__(log_level)
        # Configure loguru for colored output
        self.logger.configure(
            handlers=self._split_handlers(
                "<cyan>{time:YYYY-MM-DD HH:mm:ss.SSS}</cyan> | "
                "<level>{level: <8}</level> | "
                "<white>{message}</white>",
                log_level,
                colorize=True,
            )
        )

    def warn(self, message: str):
        self.logger.warning(click.style(message, fg="yellow", bold=True))

    def fatal(self, message: str, error: Optional[object] = None):
        self.logger.opt(exception=self._exception_for(error)).critical(
            click.style(self._describe(message, error), fg="red", bold=True)
        )

    def info(self, message: str):
        self.logger.info(click.style(message, fg="white"))

    def debug(self, message: str):
        self.logger.debug(click.style(message, fg="blue"))
