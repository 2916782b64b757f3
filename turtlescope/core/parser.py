"""
Parser adapter -- Turtle text to quads via rdflib

rdflib's Turtle sink adds statements one at a time in document order.
RecordingGraph keeps that order so the store's index is reproducible;
the in-memory store itself iterates in hash order.
"""

import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from rdflib import BNode, Graph, Literal, URIRef
from rdflib.exceptions import ParserError

from .terms import Quad, Term, TermKind


class TurtlescopeError(Exception):
    """Base class for errors raised by turtlescope."""


class TurtleParseError(TurtlescopeError):
    """Text is not valid Turtle."""

    def __init__(self, message: str, line: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.line = line

    def __str__(self) -> str:
        if self.line is not None:
            return f"line {self.line}: {self.message}"
        return self.message


@dataclass
class ParsedDocument:
    quads: List[Quad] = field(default_factory=list)
    prefixes: Dict[str, str] = field(default_factory=dict)


class RecordingGraph(Graph):
    """rdflib Graph that remembers first-seen statement order."""

    def __init__(self):
        super().__init__(bind_namespaces="none")
        self.statements: List[Tuple] = []
        self._seen = set()

    def add(self, triple):
        if triple not in self._seen:
            self._seen.add(triple)
            self.statements.append(triple)
        return super().add(triple)


_LINE_RE = re.compile(r"line (\d+)")

# Relative IRIs resolve against this when no base is given, never the cwd
DEFAULT_BASE_IRI = "https://turtlescope.invalid/"

# Characters IRIREF excludes; rdflib only warns about them
_INVALID_IRI_RE = re.compile(r'[\x00-\x20<>"{}|^`\\]')


def to_term(node) -> Term:
    """Convert an rdflib node to a Term."""
    if isinstance(node, Literal):
        return Term(
            str(node),
            TermKind.LITERAL,
            datatype=str(node.datatype) if node.datatype is not None else None,
            language=node.language,
        )
    if isinstance(node, BNode):
        return Term(str(node), TermKind.BLANK_NODE)
    return Term(str(node), TermKind.NAMED_NODE)


def from_term(term: Term):
    """Convert a Term back to an rdflib node."""
    if term.kind == TermKind.LITERAL:
        if term.language:
            return Literal(term.value, lang=term.language)
        datatype = URIRef(term.datatype) if term.datatype else None
        return Literal(term.value, datatype=datatype)
    if term.kind == TermKind.BLANK_NODE:
        return BNode(term.value)
    return URIRef(term.value)


def parse_turtle(text: str, base_iri: Optional[str] = None) -> ParsedDocument:
    """
    Parse Turtle text into quads and the prefixes it declares.

    Args:
        text: Turtle source
        base_iri: Base for resolving relative IRIs (DEFAULT_BASE_IRI if None)

    Returns:
        ParsedDocument with quads in document order

    Raises:
        TurtleParseError: If the text is not valid Turtle
    """
    graph = RecordingGraph()
    try:
        graph.parse(data=text, format="turtle", publicID=base_iri or DEFAULT_BASE_IRI)
    # notation3 reports some syntax errors (e.g. unterminated long strings) via assert
    except (SyntaxError, ParserError, ValueError, AssertionError) as e:
        message = str(e).strip() or e.__class__.__name__
        match = _LINE_RE.search(message)
        raise TurtleParseError(message, int(match.group(1)) if match else None) from e

    for statement in graph.statements:
        for node in statement:
            if isinstance(node, URIRef) and _INVALID_IRI_RE.search(node):
                raise TurtleParseError(f"Invalid IRI <{node}>")

    quads = [
        Quad(subject=to_term(s), predicate=str(p), object=to_term(o))
        for s, p, o in graph.statements
    ]
    prefixes = {prefix: str(namespace) for prefix, namespace in graph.namespaces()}
    return ParsedDocument(quads=quads, prefixes=prefixes)
