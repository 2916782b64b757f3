"""
Views -- Terminal collaborators that redraw on store changes

Each view subscribes to the store and re-queries the projections on
every committed parse. Views hold display state only (the selected
node, the last drawn events); the store stays the single owner of data.

The selection signal flows one way:
  TimelineView.activate() -> store.selection -> GraphView highlight
"""

from typing import Callable, List, Optional

from ..core.store import StoreSnapshot, TripleStore
from ..core.timeline import TemporalEvent
from .render import render_graph, render_json, render_timeline
from .symbols import SymbolSet, get_symbols, safe_print

Output = Callable[[str], None]


class _StoreView:
    """Shared subscription handling."""

    def __init__(self, store: TripleStore, symbols: Optional[SymbolSet] = None,
                 output: Output = safe_print, fmt: str = "text"):
        self.store = store
        self.symbols = symbols or get_symbols()
        self.output = output
        self.format = fmt
        self.last_output: Optional[str] = None
        self._unsubscribers: List[Callable[[], None]] = [store.on_update(self._on_update)]

    def _on_update(self, snapshot: StoreSnapshot) -> None:
        self.render()

    def render(self) -> str:
        raise NotImplementedError

    def _emit(self, text: str) -> str:
        self.last_output = text
        self.output(text)
        return text

    def close(self) -> None:
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers = []


class GraphView(_StoreView):
    """Nodes and links; highlights the subject named by the selection signal."""

    def __init__(self, store: TripleStore, **kwargs):
        super().__init__(store, **kwargs)
        self.selected: Optional[str] = None
        self._unsubscribers.append(store.selection.subscribe(self._on_select))

    def _on_select(self, subject: str) -> None:
        self.selected = subject
        self.render()

    def render(self) -> str:
        projection = self.store.get_nodes_and_links()
        prefixes = self.store.get_prefix_map()
        if self.format == "json":
            data = projection.to_dict(prefixes)
            data["selected"] = self.selected
            return self._emit(render_json(data))
        return self._emit(render_graph(projection, prefixes, self.symbols, selected=self.selected))


class TimelineView(_StoreView):
    """Sorted provenance events; markers can be activated by position."""

    def __init__(self, store: TripleStore, width: int = 60, **kwargs):
        super().__init__(store, **kwargs)
        self.width = width
        self.events: List[TemporalEvent] = []

    def render(self) -> str:
        self.events = self.store.get_events()
        if self.format == "json":
            return self._emit(render_json([event.to_dict() for event in self.events]))
        return self._emit(render_timeline(
            self.events, self.store.get_prefix_map(), self.symbols, width=self.width
        ))

    def activate(self, position: int) -> TemporalEvent:
        """
        Activate the marker at `position` (as numbered in the last render).

        Broadcasts the event's subject on the store's selection channel.

        Raises:
            IndexError: If no marker exists at that position
        """
        if not 0 <= position < len(self.events):
            raise IndexError(f"No timeline marker at position {position} ({len(self.events)} shown)")
        event = self.events[position]
        self.store.selection.select(event.subject)
        return event
