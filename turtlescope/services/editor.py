"""
Editor -- Text buffer collaborator for the triple store

Two directions, one rule each:
- User edits are debounced, then parsed (without prefix capture).
  A rejected edit is logged; the last valid state stays in the store.
- Store updates are serialized back into the buffer with change
  handling suppressed, so the editor doesn't re-parse its own output.
  Suppression is per thread and cleared in `finally`, whatever the
  writer does. A user edit that lands while the store output is being
  written wins over that output.
"""

import logging
import threading
from typing import Callable, List, Optional

from ..core.parser import TurtleParseError
from ..core.store import ParseResult, StoreSnapshot, TripleStore
from ..core.terms import PrefixMap, QuadIndex
from ..core.writer import serialize_turtle

logger = logging.getLogger(__name__)

Writer = Callable[[QuadIndex, PrefixMap], str]


class Debouncer:
    """
    Run only the last of a burst of calls, `delay` seconds after it.

    A zero delay runs calls synchronously. flush() runs a pending call
    now, on the caller's thread.
    """

    def __init__(self, delay: float):
        self.delay = delay
        self._lock = threading.Lock()
        self._timer: Optional[threading.Timer] = None
        self._pending: Optional[Callable[[], None]] = None

    def call(self, fn: Callable[[], None]) -> None:
        if self.delay <= 0:
            self.cancel()
            fn()
            return
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
            self._pending = fn
            self._timer = threading.Timer(self.delay, self._fire)
            self._timer.daemon = True
            self._timer.start()

    def _take(self) -> Optional[Callable[[], None]]:
        with self._lock:
            fn, self._pending = self._pending, None
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None
            return fn

    def _fire(self) -> None:
        fn = self._take()
        if fn is not None:
            fn()

    def flush(self) -> bool:
        """Run the pending call, if any. Returns whether one ran."""
        fn = self._take()
        if fn is None:
            return False
        fn()
        return True

    def cancel(self) -> None:
        self._take()

    @property
    def pending(self) -> bool:
        return self._pending is not None


class TurtleEditor:
    """
    In-memory Turtle buffer bound to a TripleStore.

    Usage:
        editor = TurtleEditor(store, debounce=0.5)
        editor.edit(new_text)      # parsed after 0.5s of quiet
        editor.flush()             # or right now
        if editor.last_error:
            print(editor.last_error)
    """

    def __init__(self, store: TripleStore, *, debounce: float = 0.5,
                 writer: Writer = serialize_turtle):
        self.store = store
        self.writer = writer
        self.last_error: Optional[TurtleParseError] = None
        self.last_result: Optional[ParseResult] = None
        self._text = ""
        self._edit_seq = 0
        self._lock = threading.Lock()
        self._local = threading.local()
        self._change_handlers: List[Callable[[str], None]] = [self._handle_change]
        self._debouncer = Debouncer(debounce)
        self._unsubscribe = store.on_update(self._on_store_update)

        # Show the document the store already holds
        self._on_store_update(store.snapshot)

    @property
    def text(self) -> str:
        return self._text

    @property
    def suppress(self) -> bool:
        """True while this thread is writing store output into the buffer."""
        return getattr(self._local, "suppress", False)

    def on_change(self, handler: Callable[[str], None]) -> None:
        """Register an extra handler for buffer changes (user or programmatic)."""
        self._change_handlers.append(handler)

    def set_value(self, text: str) -> None:
        """Replace the buffer and fire change handlers."""
        with self._lock:
            self._edit_seq += 1
            self._text = text
        self._notify_handlers(text)

    def _notify_handlers(self, text: str) -> None:
        for handler in list(self._change_handlers):
            handler(text)

    def edit(self, text: str) -> None:
        """A user edit."""
        self.set_value(text)

    def flush(self) -> bool:
        """Parse a pending edit now instead of waiting for the debounce."""
        return self._debouncer.flush()

    @property
    def pending(self) -> bool:
        return self._debouncer.pending

    def close(self) -> None:
        self._debouncer.cancel()
        self._unsubscribe()

    def _handle_change(self, text: str) -> None:
        if self.suppress:
            return
        self._debouncer.call(self._commit)

    def _commit(self) -> None:
        with self._lock:
            text = self._text
        result = self.store.parse(text, capture_prefixes=False)
        self.last_result = result
        if result:
            self.last_error = None
        else:
            self.last_error = result.error
            logger.warning("Parse error in Turtle: %s", result.error)

    def _on_store_update(self, snapshot: StoreSnapshot) -> None:
        with self._lock:
            seq = self._edit_seq
        self._local.suppress = True
        try:
            text = self.writer(snapshot.index, snapshot.prefixes)
            with self._lock:
                if self._edit_seq != seq:
                    logger.debug("Buffer edited during revision %d, keeping the edit", snapshot.revision)
                    return
                self._text = text
            self._notify_handlers(text)
        finally:
            self._local.suppress = False
