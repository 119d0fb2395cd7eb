"""Synchronous notification of passive exit observers."""

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, List, Optional, Union

from .errors import UnknownEventError


class ExitEvent(str, Enum):
    WILL_EXIT = "will-exit"
    # Legacy name, emitted right after WILL_EXIT
    EXIT = "exit"


ExitListener = Callable[[bool], object]


@dataclass
class _Subscription:
    listener: ExitListener
    once: bool = False


class ExitEventEmitter:
    """Multi-subscriber emitter for exit events.

    Listeners are called synchronously in registration order. A failing
    listener is reported to ``on_error`` and does not stop the others.
    """

    def __init__(self, on_error: Optional[Callable[[str, BaseException], None]] = None):
        self._subscriptions: Dict[ExitEvent, List[_Subscription]] = {
            event: [] for event in ExitEvent
        }
        self._on_error = on_error

    @staticmethod
    def _resolve(event: Union[str, ExitEvent]) -> ExitEvent:
        try:
            return ExitEvent(event)
        except ValueError:
            raise UnknownEventError(event) from None

    def on(self, event: Union[str, ExitEvent], listener: ExitListener) -> None:
        """Subscribe a listener to every emission of an event."""
        self._subscriptions[self._resolve(event)].append(_Subscription(listener))

    def once(self, event: Union[str, ExitEvent], listener: ExitListener) -> None:
        """Subscribe a listener to the next emission of an event only."""
        self._subscriptions[self._resolve(event)].append(_Subscription(listener, once=True))

    def off(self, event: Union[str, ExitEvent], listener: ExitListener) -> None:
        """Remove the most recent subscription of a listener, if any."""
        subscriptions = self._subscriptions[self._resolve(event)]
        for index in range(len(subscriptions) - 1, -1, -1):
            if subscriptions[index].listener == listener:
                del subscriptions[index]
                return

    def listener_count(self, event: Union[str, ExitEvent]) -> int:
        return len(self._subscriptions[self._resolve(event)])

    def emit(self, event: Union[str, ExitEvent], is_expected_exit: bool) -> int:
        """Notify all listeners of an event.

        Returns:
            The number of listeners notified
        """
        resolved = self._resolve(event)
        subscriptions = list(self._subscriptions[resolved])
        self._subscriptions[resolved] = [s for s in subscriptions if not s.once]

        for subscription in subscriptions:
            try:
                subscription.listener(is_expected_exit)
            except Exception as e:
                if self._on_error is None:
                    raise
                self._on_error(resolved.value, e)
        return len(subscriptions)
