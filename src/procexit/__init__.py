"""procexit: run exactly one exit handler however the process is terminated."""

from .modules.shutdown import (
    ExitConfig,
    ExitCoordinator,
    ExitEvent,
    Trigger,
    get_exit_coordinator,
)

__all__ = ['ExitConfig', 'ExitCoordinator', 'ExitEvent', 'Trigger', 'get_exit_coordinator']
