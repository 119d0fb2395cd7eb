"""Process runtime: where termination triggers come from and how the process ends."""

import asyncio
from asyncio import AbstractEventLoop, Task
import os
import signal
import sys
import threading
import types
import weakref
from abc import ABC, abstractmethod
from typing import Any, Callable, Coroutine, Dict, List, NoReturn, Optional, Set, Union

from loguru import logger

from .triggers import Trigger

TriggerListener = Callable[..., Any]
ExitCallback = Callable[[int], Any]

# Type for signal handlers
SignalHandlerType = Union[Callable[[int, Optional[types.FrameType]], Any], int, None]


class ProcessRuntime(ABC):
    """Interface between the exit coordinator and the hosting process."""

    def __init__(self) -> None:
        self._exit_callbacks: List[ExitCallback] = []
        self._exit_notified = False

    @abstractmethod
    def listen(self, trigger: Trigger, listener: TriggerListener) -> None:
        """Register a persistent listener called with the trigger's raw payload."""
        pass

    @abstractmethod
    def spawn(self, coroutine: Coroutine[Any, Any, Any]) -> None:
        """Schedule a coroutine produced in response to a trigger."""
        pass

    @abstractmethod
    def terminate(self, code: int) -> NoReturn:
        """End the process with the given code."""
        pass

    def install_loop(self, loop: AbstractEventLoop) -> None:
        """Route a loop's unhandled task failures to the runtime's listeners."""
        pass

    def pending_tasks(self) -> Set[Task]:
        """Tasks spawned by the runtime that have not finished yet."""
        return set()

    def once_exit(self, callback: ExitCallback) -> None:
        """Register a one-shot callback run with the final code just before termination."""
        self._exit_callbacks.append(callback)

    def exit(self, code: int) -> NoReturn:
        """Notify exit callbacks, then terminate the process."""
        try:
            self._notify_exit(code)
        finally:
            self.terminate(code)

    def _notify_exit(self, code: int) -> None:
        if self._exit_notified:
            return
        self._exit_notified = True
        callbacks, self._exit_callbacks = self._exit_callbacks, []
        for callback in callbacks:
            callback(code)


class SystemRuntime(ProcessRuntime):
    """Runtime backed by the real process.

    Signals are caught with ``signal.signal``, uncaught exceptions through
    ``sys.excepthook`` and ``threading.excepthook``, and unhandled task
    failures through the asyncio loop exception handler. Termination is a
    hard ``os._exit`` after flushing the log sinks and standard streams.
    """

    SIGNALS = {
        Trigger.INTERRUPT: signal.SIGINT,
        Trigger.TERMINATE: signal.SIGTERM,
    }

    def __init__(self) -> None:
        super().__init__()
        self._listeners: Dict[Trigger, List[TriggerListener]] = {trigger: [] for trigger in Trigger}
        self._installed: Set[Trigger] = set()
        self._tasks: Set[Task] = set()
        self._loops: "weakref.WeakSet[AbstractEventLoop]" = weakref.WeakSet()
        # Most recently installed loop; receives shutdowns triggered from other threads
        self._home_loop: Optional[AbstractEventLoop] = None
        self._original_signals: Dict[Trigger, SignalHandlerType] = {}
        self._original_excepthook: Optional[Callable[..., Any]] = None
        self._original_threading_excepthook: Optional[Callable[..., Any]] = None

    def listen(self, trigger: Trigger, listener: TriggerListener) -> None:
        trigger = Trigger(trigger)
        self._listeners[trigger].append(listener)
        if trigger not in self._installed:
            self._install(trigger)
            self._installed.add(trigger)

    def _install(self, trigger: Trigger) -> None:
        if trigger in self.SIGNALS:
            # Must be called from the main thread
            self._original_signals[trigger] = signal.getsignal(self.SIGNALS[trigger])
            signal.signal(self.SIGNALS[trigger], self._handle_signal)
        elif trigger is Trigger.UNCAUGHT_EXCEPTION:
            self._original_excepthook = sys.excepthook
            self._original_threading_excepthook = threading.excepthook
            sys.excepthook = self._handle_uncaught
            threading.excepthook = self._handle_thread_uncaught
        else:
            loop = self._running_loop()
            if loop is not None:
                self.install_loop(loop)

    def restore(self) -> None:
        """Restore the handlers that were active before this runtime installed its own."""
        for trigger, original in self._original_signals.items():
            if original is not None:
                signal.signal(self.SIGNALS[trigger], original)
        if self._original_excepthook is not None:
            sys.excepthook = self._original_excepthook
        if self._original_threading_excepthook is not None:
            threading.excepthook = self._original_threading_excepthook
        for loop in list(self._loops):
            if not loop.is_closed():
                loop.set_exception_handler(None)
        self._original_signals.clear()
        self._original_excepthook = None
        self._original_threading_excepthook = None
        self._loops = weakref.WeakSet()
        self._home_loop = None
        self._installed.clear()
        for listeners in self._listeners.values():
            listeners.clear()

    def install_loop(self, loop: AbstractEventLoop) -> None:
        self._home_loop = loop
        if loop in self._loops:
            return
        self._loops.add(loop)
        loop.set_exception_handler(self._handle_loop_exception)

    def _dispatch(self, trigger: Trigger, *args: Any) -> None:
        for listener in list(self._listeners[trigger]):
            listener(*args)

    def _handle_signal(self, sig_num: int, frame: Optional[types.FrameType]) -> None:
        sig_name = signal.Signals(sig_num).name
        self._dispatch(Trigger(sig_name), sig_name, sig_num)

    def _handle_uncaught(self, exc_type, exc_value, exc_traceback) -> None:
        if issubclass(exc_type, KeyboardInterrupt) and self._listeners[Trigger.INTERRUPT]:
            self._dispatch(Trigger.INTERRUPT, "SIGINT", int(signal.SIGINT))
            return
        self._dispatch(Trigger.UNCAUGHT_EXCEPTION, exc_value, "uncaughtException")

    def _handle_thread_uncaught(self, args: threading.ExceptHookArgs) -> None:
        if args.exc_type is SystemExit or args.exc_value is None:
            if self._original_threading_excepthook is not None:
                self._original_threading_excepthook(args)
            return
        origin = args.thread.name if args.thread is not None else "uncaughtException"
        self._dispatch(Trigger.UNCAUGHT_EXCEPTION, args.exc_value, origin)

    def _handle_loop_exception(self, loop: AbstractEventLoop, context: Dict[str, Any]) -> None:
        exception = context.get("exception")
        if exception is None or not self._listeners[Trigger.UNHANDLED_REJECTION]:
            loop.default_exception_handler(context)
            return
        origin = context.get("task") or context.get("future")
        self._dispatch(Trigger.UNHANDLED_REJECTION, exception, origin)

    @staticmethod
    def _running_loop() -> Optional[AbstractEventLoop]:
        try:
            return asyncio.get_running_loop()
        except RuntimeError:
            return None

    def _create_task(self, coroutine: Coroutine[Any, Any, Any]) -> None:
        task = asyncio.get_running_loop().create_task(coroutine)
        # Keep a strong reference until the task is done
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    def pending_tasks(self) -> Set[Task]:
        return {task for task in self._tasks if not task.done()}

    def _active_home_loop(self) -> Optional[AbstractEventLoop]:
        loop = self._home_loop
        if loop is None or loop.is_closed() or not loop.is_running():
            return None
        return loop

    def spawn(self, coroutine: Coroutine[Any, Any, Any]) -> None:
        # Worker threads hand the shutdown to the installed loop
        loop = self._running_loop() or self._active_home_loop()
        if loop is None:
            asyncio.run(coroutine)
            return
        # Also wakes a loop blocked in its selector when called from a signal handler
        loop.call_soon_threadsafe(self._create_task, coroutine)

    def terminate(self, code: int) -> NoReturn:
        logger.complete()
        for stream in (sys.stdout, sys.stderr):
            if stream is not None:
                stream.flush()
        os._exit(code)
