"""
Writer adapter -- QuadIndex and PrefixMap back to Turtle text

Round-trip keeps the triple set; formatting and statement order are
whatever rdflib's Turtle serializer produces.
"""

from rdflib import URIRef

from .parser import RecordingGraph, from_term
from .terms import PrefixMap, QuadIndex


def serialize_turtle(index: QuadIndex, prefixes: PrefixMap) -> str:
    """Serialize every quad in the index, using the given prefix bindings."""
    graph = RecordingGraph()
    for prefix, namespace in prefixes.items():
        graph.bind(prefix, URIRef(namespace), override=True, replace=True)

    for quads in index.values():
        for quad in quads:
            graph.add((from_term(quad.subject), URIRef(quad.predicate), from_term(quad.object)))

    return graph.serialize(format="turtle")
