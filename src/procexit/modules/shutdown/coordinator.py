"""Exit coordinator funnelling process termination triggers into a single exit handler."""

import asyncio
import functools
import inspect
import os
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Coroutine, Optional, TypeVar, Union

from ..logging import ConsoleLogger, create_logger
from .config import ExitConfig
from .errors import (
    HandlerAlreadyRegisteredError,
    InvalidExitCodeError,
    InvalidHandlerError,
    InvalidLoggerError,
)
from .events import ExitEvent, ExitEventEmitter, ExitListener
from .runtime import ProcessRuntime, SystemRuntime
from .triggers import Trigger, normalize_error

# Define a bound type variable
T = TypeVar('T')

ExitHandler = Callable[[bool, Optional[object]], Union[Optional[int], Awaitable[Optional[int]]]]


@dataclass
class HandlerOutcome:
    """Result of invoking the exit handler."""
    succeeded: bool
    value: Any = None
    exception: Optional[BaseException] = None

    @property
    def override(self) -> Optional[int]:
        """Positive exit code returned by the handler, if any."""
        if not self.succeeded or isinstance(self.value, bool) or not isinstance(self.value, int):
            return None
        return self.value if self.value > 0 else None


class ExitCoordinator:
    """Funnels every termination trigger through one exit handler, exactly once.

    The coordinator goes ``idle -> exiting -> terminated``. The first trigger
    runs the handler and exits with a code derived from its outcome; any
    trigger received while the handler is still pending forces an immediate
    exit with the error exit code.
    """

    def __init__(
        self,
        runtime: Optional[ProcessRuntime] = None,
        logger: Optional[Any] = None,
        error_exit_code: int = 1,
    ):
        """
        Initialize the exit coordinator.

        Args:
            runtime: Process runtime supplying triggers and termination
            logger: Object exposing ``warn`` and ``fatal``; loguru console output by default
            error_exit_code: Exit code for unexpected shutdowns
        """
        self._runtime = runtime if runtime is not None else SystemRuntime()
        self._logger: Any = ConsoleLogger()
        if logger is not None:
            self.set_logger(logger)
        self._error_exit_code = 1
        self.set_error_exit_code(error_exit_code)
        self._is_exiting = False
        self._handler: Optional[ExitHandler] = None
        self._events = ExitEventEmitter(on_error=self._on_listener_error)

        self._runtime.once_exit(self._on_process_exit)

    def _on_process_exit(self, code: int) -> None:
        if code > 0:
            self._logger.fatal(
                f"Process ({os.getpid()}) was terminated unexpectedly (code={code})..."
            )

    @property
    def logger(self) -> Any:
        return self._logger

    @property
    def runtime(self) -> ProcessRuntime:
        return self._runtime

    @property
    def is_exiting(self) -> bool:
        """Check if shutdown is in progress."""
        return self._is_exiting

    @property
    def error_exit_code(self) -> int:
        return self._error_exit_code

    @property
    def has_handler(self) -> bool:
        return self._handler is not None

    def set_logger(self, custom_logger: Any) -> None:
        """Replace the sink used for exit diagnostics.

        Args:
            custom_logger: Object exposing ``warn(message)`` and ``fatal(message, error)``
        """
        if custom_logger is None:
            raise InvalidLoggerError("Logger is required")
        for method in ("warn", "fatal"):
            if not callable(getattr(custom_logger, method, None)):
                raise InvalidLoggerError(f"Logger must expose a callable `{method}`")
        self._logger = custom_logger

    def set_error_exit_code(self, exit_code: int) -> None:
        """Set the exit code used when shutdown is caused by an unexpected trigger."""
        if isinstance(exit_code, bool) or not isinstance(exit_code, int) or exit_code <= 0:
            raise InvalidExitCodeError(exit_code)
        self._error_exit_code = exit_code

    def configure(self, config: ExitConfig) -> None:
        """Apply an ExitConfig to this coordinator."""
        self.set_error_exit_code(config.error_exit_code)
        if config.log_output is not None:
            self.set_logger(create_logger(config.log_output.value, config.log_level.value))

    def register_exit_handler(self, handler: ExitHandler) -> None:
        self._logger.warn('DEPRECATED: Please use `set_exit_handler` instead.')
        self.set_exit_handler(handler)

    def set_exit_handler(self, handler: ExitHandler) -> None:
        """Register the exit handler and start monitoring termination triggers.

        Args:
            handler: Callable ``(is_expected_exit, error)`` returning an optional
                exit code, either directly or through an awaitable

        Raises:
            InvalidHandlerError: If the handler is not callable
            HandlerAlreadyRegisteredError: If an exit handler is already registered
        """
        if not callable(handler):
            raise InvalidHandlerError(
                'Invalid exit handler, example: `async def handle_exit(is_expected_exit, error): ...`'
            )
        if self._handler is not None:
            raise HandlerAlreadyRegisteredError(
                'Multiple exit handlers are not allowed. '
                "Consider using `on('will-exit', listener)` to observe."
            )

        self._handler = handler

        for trigger in Trigger:
            self._monitor_process_event(trigger)

    def _monitor_process_event(self, trigger: Trigger) -> None:
        self._runtime.listen(trigger, functools.partial(self.trigger, trigger))

    def on(self, event: Union[str, ExitEvent], listener: ExitListener) -> None:
        """Observe an exit event; the listener receives ``is_expected_exit``."""
        self._events.on(event, listener)

    def once(self, event: Union[str, ExitEvent], listener: ExitListener) -> None:
        self._events.once(event, listener)

    def off(self, event: Union[str, ExitEvent], listener: ExitListener) -> None:
        self._events.off(event, listener)

    def listener_count(self, event: Union[str, ExitEvent]) -> int:
        return self._events.listener_count(event)

    def _on_listener_error(self, event: str, error: BaseException) -> None:
        self._logger.fatal(f"'{event}' listener failed: {error}", error)

    def trigger(self, trigger: Union[str, Trigger], *args: Any) -> None:
        """Handle a termination trigger with its raw payload.

        A trigger arriving while shutdown is in progress forces the exit right
        here, so a handler blocking the event loop cannot delay it.
        """
        trigger = Trigger(trigger)
        error = normalize_error(trigger, args)
        if self._is_exiting:
            self._force_exit(trigger, error)
            return
        self._runtime.spawn(self.handle_process_exit(trigger, error))

    def _force_exit(self, trigger: Trigger, error: Optional[object]) -> None:
        self._logger.fatal(
            f"{trigger.value} received twice. Exit handler seems not responding, force exit.",
            error,
        )
        self._runtime.exit(self._error_exit_code)

    async def handle_process_exit(self, trigger: Union[str, Trigger], error: Optional[object] = None) -> int:
        """Run the shutdown sequence for a trigger and terminate the process.

        Args:
            trigger: The trigger that started the shutdown
            error: Normalized error, None for an expected exit

        Returns:
            The exit code handed to the runtime
        """
        trigger = Trigger(trigger)
        if self._is_exiting:
            self._force_exit(trigger, error)
            return self._error_exit_code
        # Set before the first await
        self._is_exiting = True

        is_expected_exit = error is None
        if is_expected_exit:
            self._logger.warn(f"{trigger.value} received, going to shutdown")
        else:
            self._logger.fatal(f"{trigger.value} received (unexpected), going to shutdown", error)

        self._events.emit(ExitEvent.WILL_EXIT, is_expected_exit)
        self._events.emit(ExitEvent.EXIT, is_expected_exit)

        outcome = await self._invoke_handler(is_expected_exit, error)
        exit_code = self.compute_exit_code(is_expected_exit, outcome)
        self._runtime.exit(exit_code)
        return exit_code

    async def _invoke_handler(self, is_expected_exit: bool, error: Optional[object]) -> HandlerOutcome:
        if self._handler is None:
            return HandlerOutcome(succeeded=True)
        try:
            result = self._handler(is_expected_exit, error)
            if inspect.isawaitable(result):
                result = await result
        except BaseException as ex:
            # Includes SystemExit and CancelledError; termination goes through the runtime
            self._logger.fatal(f"Exit handler failed: {ex!r}", ex)
            return HandlerOutcome(succeeded=False, exception=ex)
        return HandlerOutcome(succeeded=True, value=result)

    def compute_exit_code(self, is_expected_exit: bool, outcome: HandlerOutcome) -> int:
        """Derive the final exit code from the exit kind and the handler outcome."""
        override = outcome.override
        if override is not None:
            return override
        return 0 if is_expected_exit else self._error_exit_code

    def run(self, coroutine: Coroutine[Any, Any, T]) -> T:
        """
        Run a main coroutine in a new event loop monitored for unhandled task failures.

        When the coroutine finishes, pending shutdown tasks are awaited and every
        other pending task is cancelled before the loop is closed.

        Args:
            coroutine: The coroutine to execute

        Returns:
            The result of the coroutine
        """
        loop = asyncio.new_event_loop()
        asyncio.set_event_loop(loop)
        self._runtime.install_loop(loop)

        try:
            return loop.run_until_complete(coroutine)
        finally:
            try:
                # Let trigger callbacks queued on the loop create their tasks
                loop.run_until_complete(asyncio.sleep(0))
                shutdown_tasks = self._runtime.pending_tasks()
                others = [task for task in asyncio.all_tasks(loop) if task not in shutdown_tasks]
                for task in others:
                    task.cancel()
                loop.run_until_complete(
                    asyncio.gather(*others, *shutdown_tasks, return_exceptions=True)
                )
                loop.run_until_complete(loop.shutdown_asyncgens())
            finally:
                asyncio.set_event_loop(None)
                loop.close()
