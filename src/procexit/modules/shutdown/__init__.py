"""Exit coordination: one exit handler for every way the process can terminate."""

from .config import ExitConfig
from .coordinator import ExitCoordinator, HandlerOutcome
from .errors import (
    ConfigurationError,
    HandlerAlreadyRegisteredError,
    InvalidExitCodeError,
    InvalidHandlerError,
    InvalidLoggerError,
    UnknownEventError,
)
from .events import ExitEvent, ExitEventEmitter
from .factory import ExitCoordinatorFactory, get_exit_coordinator
from .runtime import ProcessRuntime, SystemRuntime
from .triggers import Trigger, normalize_error

__all__ = [
    'ExitConfig',
    'ExitCoordinator',
    'HandlerOutcome',
    'ConfigurationError',
    'HandlerAlreadyRegisteredError',
    'InvalidExitCodeError',
    'InvalidHandlerError',
    'InvalidLoggerError',
    'UnknownEventError',
    'ExitEvent',
    'ExitEventEmitter',
    'ExitCoordinatorFactory',
    'get_exit_coordinator',
    'ProcessRuntime',
    'SystemRuntime',
    'Trigger',
    'normalize_error',
]
