import os
from enum import Enum
from typing import Mapping, Optional

from pydantic import BaseModel, field_validator


class LogOutput(str, Enum):
    CONSOLE = "console"
    PLAIN = "plain"
    COLORFUL = "colorful"
    JSON = "json"

class LogLevel(str, Enum):
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"

class ExitConfig(BaseModel):
    error_exit_code: int = 1
    log_output: Optional[LogOutput] = None  # None keeps the coordinator's current logger
    log_level: LogLevel = LogLevel.INFO

    @field_validator('error_exit_code')
    @classmethod
    def validate_error_exit_code(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("error_exit_code must be greater than 0")
        return value

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> 'ExitConfig':
        """Build a config from PROCEXIT_* environment variables.

        Args:
            environ: Mapping to read instead of os.environ

        Returns:
            ExitConfig: Config with defaults for unset variables
        """
        environ = os.environ if environ is None else environ
        values = {}
        if environ.get("PROCEXIT_ERROR_EXIT_CODE"):
            values["error_exit_code"] = environ["PROCEXIT_ERROR_EXIT_CODE"]
        if environ.get("PROCEXIT_LOG_OUTPUT"):
            values["log_output"] = environ["PROCEXIT_LOG_OUTPUT"].lower()
        if environ.get("PROCEXIT_LOG_LEVEL"):
            values["log_level"] = environ["PROCEXIT_LOG_LEVEL"].upper()
        return cls(**values)
