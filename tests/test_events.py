from unittest.mock import Mock, call

import pytest

from error_propagation.events import EventNotifier


@pytest.fixture
def notifier():
    return EventNotifier(["input", "result"])


def test_listeners_run_in_registration_order(notifier):
    manager = Mock()
    notifier.on("result", manager.first)
    notifier.on("result", manager.second)
    notifier.emit("result", 1, 2)
    assert manager.mock_calls == [call.first(1, 2), call.second(1, 2)]


def test_on_returns_the_listener(notifier):
    listener = Mock()
    assert notifier.on("input", listener) is listener
    assert notifier.listeners("input") == [listener]


def test_emit_only_reaches_its_event(notifier):
    listener = Mock()
    notifier.on("input", listener)
    notifier.emit("result")
    listener.assert_not_called()


def test_listener_exceptions_propagate(notifier):
    after = Mock()
    notifier.on("input", Mock(side_effect=KeyError("x")))
    notifier.on("input", after)
    with pytest.raises(KeyError):
        notifier.emit("input")
    after.assert_not_called()


def test_off(notifier):
    listener = Mock()
    notifier.on("input", listener)
    notifier.off("input", listener)
    notifier.off("input", listener)
    notifier.emit("input")
    listener.assert_not_called()


def test_unknown_events(notifier):
    with pytest.raises(ValueError):
        notifier.on("differential", Mock())
    with pytest.raises(ValueError):
        notifier.emit("differential")
