"""
Presentation -- Terminal rendering of the projections

- symbols: Unicode/ASCII vocabulary, safe_print
- render: Text and JSON renderers
- views: Store-subscribed graph and timeline views
"""

from .symbols import SymbolSet, UNICODE, ASCII, get_symbols, safe_print, truncate
from .render import render_graph, render_timeline, render_axis, render_json
from .views import GraphView, TimelineView

__all__ = [
    'SymbolSet', 'UNICODE', 'ASCII', 'get_symbols', 'safe_print', 'truncate',
    'render_graph', 'render_timeline', 'render_axis', 'render_json',
    'GraphView', 'TimelineView',
]
