from typing import Optional
from .base import BaseLogger


class ConsoleLogger(BaseLogger):
    """Default logger: loguru as configured by the host (stderr out of the box).

    Unlike the other loggers it never calls ``logger.configure``, so importing
    the package does not clobber the host application's sinks.
    """

    def warn(self, message: str):
        self.logger.warning(message)

    def fatal(self, message: str, error: Optional[object] = None):
        self.logger.opt(exception=self._exception_for(error)).critical(
            self._describe(message, error)
        )
