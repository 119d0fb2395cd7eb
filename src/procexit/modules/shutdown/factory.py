"""Factory holding the process-wide ExitCoordinator."""

from typing import Any, Optional

from .coordinator import ExitCoordinator
from .runtime import ProcessRuntime


class ExitCoordinatorFactory:
    """Factory for creating and holding the single ExitCoordinator of the process."""

    _instance = None
    _coordinator: Optional[ExitCoordinator] = None

    @classmethod
    def get_instance(cls) -> 'ExitCoordinatorFactory':
        """Get or create the singleton factory instance."""
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    def create_coordinator(
        self,
        runtime: Optional[ProcessRuntime] = None,
        logger: Optional[Any] = None,
    ) -> ExitCoordinator:
        """
        Create the ExitCoordinator or return the existing one.

        Arguments only take effect on the first call; later calls return the
        coordinator created then.

        Args:
            runtime: Process runtime for the coordinator
            logger: Logger for the coordinator

        Returns:
            The process-wide ExitCoordinator
        """
        cls = type(self)
        if cls._coordinator is None:
            cls._coordinator = ExitCoordinator(runtime=runtime, logger=logger)

        return cls._coordinator

    def get_coordinator(self) -> Optional[ExitCoordinator]:
        """
        Get the existing coordinator.

        Returns:
            The coordinator instance or None if not created yet
        """
        return type(self)._coordinator


def get_exit_coordinator() -> ExitCoordinator:
    """Return the process-wide ExitCoordinator, creating it on first use."""
    return ExitCoordinatorFactory.get_instance().create_coordinator()
