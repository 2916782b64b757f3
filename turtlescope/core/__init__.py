"""
Core -- Reactive data layer for turtlescope

Contains the foundational pieces:
- Terms: Quad and Term values, vocabulary IRIs
- Parser/Writer: rdflib adapters for Turtle in and out
- Store: Subject-indexed snapshot, swapped atomically per parse
- Bus: Ordered, failure-isolated change notification
- Classifier: Heuristic class detection
- Graph: Node/link projection
- Timeline: Provenance event projection
"""

from .terms import (
    Term, TermKind, Quad, QuadIndex, PrefixMap,
    RDF_TYPE, RDFS_SUBCLASS_OF, OWL_CLASS,
    named, literal, local_name, fragment_title, compact_iri, prefix_of,
)
from .parser import TurtlescopeError, TurtleParseError, ParsedDocument, parse_turtle
from .writer import serialize_turtle
from .bus import ChangeBus, SelectionChannel, ListenerFailure
from .classifier import classes_of
from .graph import Node, NodeType, Link, GraphProjection, project_graph, resolve_title
from .timeline import TemporalEvent, project_events, parse_instant, time_extent
from .store import TripleStore, StoreSnapshot, ParseResult, build_index

__all__ = [
    # Terms
    "Term", "TermKind", "Quad", "QuadIndex", "PrefixMap",
    "RDF_TYPE", "RDFS_SUBCLASS_OF", "OWL_CLASS",
    "named", "literal", "local_name", "fragment_title", "compact_iri", "prefix_of",
    # Adapters
    "TurtlescopeError", "TurtleParseError", "ParsedDocument", "parse_turtle",
    "serialize_turtle",
    # Bus
    "ChangeBus", "SelectionChannel", "ListenerFailure",
    # Projections
    "classes_of",
    "Node", "NodeType", "Link", "GraphProjection", "project_graph", "resolve_title",
    "TemporalEvent", "project_events", "parse_instant", "time_extent",
    # Store
    "TripleStore", "StoreSnapshot", "ParseResult", "build_index",
]
