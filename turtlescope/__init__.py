"""
turtlescope -- Reactive graph and timeline views over RDF Turtle

One TripleStore owns the parsed document. Views re-query its
projections whenever a parse commits; invalid edits are rejected
without disturbing what is shown.
"""

__version__ = "0.1.0"

from .core import (
    TripleStore,
    StoreSnapshot,
    ParseResult,
    TurtleParseError,
    TurtlescopeError,
    GraphProjection,
    TemporalEvent,
)

__all__ = [
    '__version__',
    'TripleStore', 'StoreSnapshot', 'ParseResult',
    'TurtleParseError', 'TurtlescopeError',
    'GraphProjection', 'TemporalEvent',
]
