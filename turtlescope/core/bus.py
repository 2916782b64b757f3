"""
ChangeBus -- Synchronous publish/subscribe fan-out

Listeners run in registration order on the caller's thread.
Each invocation is isolated: a failing listener is logged and recorded,
and the remaining listeners still run. No coalescing of bursts.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, List

logger = logging.getLogger(__name__)

Listener = Callable[..., None]


@dataclass
class ListenerFailure:
    """A listener that raised during notify()."""
    listener: Listener
    error: Exception

    @property
    def name(self) -> str:
        return getattr(self.listener, "__qualname__", repr(self.listener))


class ChangeBus:
    """
    Ordered listener registry.

    Usage:
        bus = ChangeBus("store")
        unsubscribe = bus.subscribe(on_change)
        failures = bus.notify(snapshot)
        unsubscribe()
    """

    def __init__(self, name: str = "change"):
        self.name = name
        self._listeners: List[Listener] = []

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """
        Register a listener. Registering the same callable twice is a no-op.

        Returns:
            Function that removes this listener again
        """
        if listener not in self._listeners:
            self._listeners.append(listener)
        return lambda: self.unsubscribe(listener)

    def unsubscribe(self, listener: Listener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def notify(self, *payload: Any) -> List[ListenerFailure]:
        """Call every listener with payload; return the ones that raised."""
        failures: List[ListenerFailure] = []
        # Copy: listeners may unsubscribe themselves while being notified
        for listener in list(self._listeners):
            try:
                listener(*payload)
            except Exception as e:
                logger.exception("Listener %r on %s bus failed", listener, self.name)
                failures.append(ListenerFailure(listener, e))
        return failures

    def __len__(self) -> int:
        return len(self._listeners)


class SelectionChannel(ChangeBus):
    """Cross-view signal carrying exactly one subject IRI."""

    def __init__(self):
        super().__init__("selection")

    def select(self, subject: str) -> List[ListenerFailure]:
        if not isinstance(subject, str) or not subject:
            raise ValueError(f"Selection needs one subject IRI, got {subject!r}")
        return self.notify(subject)
