from collections.abc import Callable, Iterable
from typing import Any

Listener = Callable[..., Any]


class EventNotifier:
    """Synchronous listener registry.

    Listeners run in registration order, on the caller's stack, and any
    exception they raise propagates to whoever emitted the event.
    """

    def __init__(self, events: Iterable[str]) -> None:
        self._listeners: dict[str, list[Listener]] = {event: [] for event in events}

    def _registered(self, event: str) -> list[Listener]:
        try:
            return self._listeners[event]
        except KeyError:
            supported = ", ".join(self._listeners)
            raise ValueError(f"unknown event {event!r}, expected one of {supported}") from None

    def on(self, event: str, listener: Listener) -> Listener:
        """Registers `listener` for `event` and returns it."""
        self._registered(event).append(listener)
        return listener

    def off(self, event: str, listener: Listener) -> None:
        listeners = self._registered(event)
        if listener in listeners:
            listeners.remove(listener)

    def listeners(self, event: str) -> list[Listener]:
        return list(self._registered(event))

    def emit(self, event: str, *args: Any) -> None:
        # copy, so a listener that registers another one does not see it run in this round
        for listener in list(self._registered(event)):
            listener(*args)
