"""Termination triggers and normalization of their payloads."""

from enum import Enum
from typing import Any, Callable, Dict, Optional, Sequence


class Trigger(str, Enum):
    INTERRUPT = "SIGINT"
    TERMINATE = "SIGTERM"
    UNHANDLED_REJECTION = "unhandledRejection"
    UNCAUGHT_EXCEPTION = "uncaughtException"


def _interrupt_error(args: Sequence[Any]) -> Optional[object]:
    # An interrupt is always a user-initiated, expected exit
    return None


def _payload_error(args: Sequence[Any]) -> Optional[object]:
    if len(args) > 1 and isinstance(args[1], BaseException):
        return args[1]
    return args[0] if args else None


NORMALIZERS: Dict[Trigger, Callable[[Sequence[Any]], Optional[object]]] = {
    Trigger.INTERRUPT: _interrupt_error,
    Trigger.TERMINATE: _payload_error,
    Trigger.UNHANDLED_REJECTION: _payload_error,
    Trigger.UNCAUGHT_EXCEPTION: _payload_error,
}


def normalize_error(trigger: Trigger, args: Sequence[Any]) -> Optional[object]:
    """Derive the error associated with a trigger from its raw payload.

    Signals arrive as ``(name, number)``, rejections as ``(reason, task)`` and
    uncaught exceptions as ``(exception, origin)``; all of them collapse into a
    single optional error value.

    Args:
        trigger: The trigger that fired
        args: Positional payload delivered by the runtime

    Returns:
        The error, or None for an expected exit
    """
    return NORMALIZERS[Trigger(trigger)](tuple(args))
