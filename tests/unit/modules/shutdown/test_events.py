import pytest
from unittest.mock import Mock

from procexit.modules.shutdown.errors import UnknownEventError
from procexit.modules.shutdown.events import ExitEvent, ExitEventEmitter


class TestExitEventEmitter:
    """Test cases for ExitEventEmitter class."""

    def test_emit_in_registration_order(self):
        emitter = ExitEventEmitter()
        received = []
        emitter.on("will-exit", lambda is_expected: received.append(("first", is_expected)))
        emitter.on(ExitEvent.WILL_EXIT, lambda is_expected: received.append(("second", is_expected)))

        assert emitter.emit("will-exit", True) == 2
        assert received == [("first", True), ("second", True)]

    def test_events_are_independent(self):
        emitter = ExitEventEmitter()
        listener = Mock()
        emitter.on("exit", listener)

        emitter.emit("will-exit", False)
        listener.assert_not_called()

        emitter.emit("exit", False)
        listener.assert_called_once_with(False)

    def test_once(self):
        emitter = ExitEventEmitter()
        listener = Mock()
        emitter.once("will-exit", listener)

        emitter.emit("will-exit", True)
        emitter.emit("will-exit", True)

        listener.assert_called_once_with(True)
        assert emitter.listener_count("will-exit") == 0

    def test_off(self):
        emitter = ExitEventEmitter()
        listener = Mock()
        emitter.on("will-exit", listener)
        emitter.off("will-exit", listener)
        emitter.off("will-exit", listener)

        assert emitter.emit("will-exit", True) == 0
        listener.assert_not_called()

    def test_listener_errors_are_reported(self):
        on_error = Mock()
        emitter = ExitEventEmitter(on_error=on_error)
        failure = RuntimeError("observer broke")
        after = Mock()

        def broken(is_expected):
            raise failure

        emitter.on("will-exit", broken)
        emitter.on("will-exit", after)
        emitter.emit("will-exit", False)

        on_error.assert_called_once_with("will-exit", failure)
        after.assert_called_once_with(False)

    def test_listener_errors_propagate_without_reporter(self):
        emitter = ExitEventEmitter()

        def broken(is_expected):
            raise RuntimeError("observer broke")

        emitter.on("will-exit", broken)
        with pytest.raises(RuntimeError):
            emitter.emit("will-exit", True)

    @pytest.mark.parametrize("method", ["on", "once", "off"])
    def test_unknown_event(self, method):
        emitter = ExitEventEmitter()
        with pytest.raises(UnknownEventError) as exc_info:
            getattr(emitter, method)("shutdown", Mock())
        assert exc_info.value.event == "shutdown"
