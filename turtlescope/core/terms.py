"""
Terms -- RDF data model shared by the store and its projections

Quads are immutable once the parser adapter produces them.
Nothing in here knows about rdflib; the adapters translate at the edges.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Mapping, Optional, Tuple


RDF_NS = "http://www.w3.org/1999/02/22-rdf-syntax-ns#"
RDFS_NS = "http://www.w3.org/2000/01/rdf-schema#"
OWL_NS = "http://www.w3.org/2002/07/owl#"
PROV_NS = "http://www.w3.org/ns/prov#"

RDF_TYPE = f"{RDF_NS}type"
RDFS_SUBCLASS_OF = f"{RDFS_NS}subClassOf"
OWL_CLASS = f"{OWL_NS}Class"

BLANK_PREFIX = "_:"


class TermKind(Enum):
    NAMED_NODE = "NamedNode"
    BLANK_NODE = "BlankNode"
    LITERAL = "Literal"


@dataclass(frozen=True)
class Term:
    """A subject or object position value."""
    value: str
    kind: TermKind = TermKind.NAMED_NODE
    datatype: Optional[str] = None
    language: Optional[str] = None

    @property
    def is_named_node(self) -> bool:
        return self.kind == TermKind.NAMED_NODE

    @property
    def is_blank(self) -> bool:
        return self.kind == TermKind.BLANK_NODE

    @property
    def key(self) -> str:
        """Identity used for indexing; blank labels can't collide with IRIs."""
        if self.is_blank:
            return f"{BLANK_PREFIX}{self.value}"
        return self.value

    def to_dict(self) -> Dict[str, Optional[str]]:
        return {
            "value": self.value,
            "termType": self.kind.value,
            "datatype": self.datatype,
            "language": self.language,
        }


def named(iri: str) -> Term:
    return Term(iri, TermKind.NAMED_NODE)


def literal(value: str, datatype: Optional[str] = None, language: Optional[str] = None) -> Term:
    return Term(value, TermKind.LITERAL, datatype=datatype, language=language)


@dataclass(frozen=True)
class Quad:
    subject: Term
    predicate: str
    object: Term
    graph: Optional[str] = None

    @property
    def subject_id(self) -> str:
        return self.subject.key

    def as_triple(self) -> Tuple[Term, str, Term]:
        return (self.subject, self.predicate, self.object)


# subject key -> quads asserted with that subject, in document order
QuadIndex = Mapping[str, Tuple[Quad, ...]]
PrefixMap = Mapping[str, str]


def local_name(iri: str) -> str:
    """Text after the last '#' or '/' of an IRI."""
    cut = max(iri.rfind("#"), iri.rfind("/"))
    return iri[cut + 1:] if cut >= 0 else iri


def fragment_title(iri: str) -> str:
    """Fragment after the last '#', or the whole IRI when there is none."""
    _, sep, fragment = iri.rpartition("#")
    if sep and fragment:
        return fragment
    return iri


def compact_iri(iri: str, prefixes: PrefixMap) -> str:
    """
    Shorten an IRI with the longest matching namespace.

    Returns the IRI unchanged when no prefix applies.
    """
    best: Optional[Tuple[str, str]] = None
    for prefix, namespace in prefixes.items():
        if namespace and iri.startswith(namespace):
            if best is None or len(namespace) > len(best[1]):
                best = (prefix, namespace)
    if best is None:
        return iri
    prefix, namespace = best
    return f"{prefix}:{iri[len(namespace):]}"


def prefix_of(iri: str, prefixes: PrefixMap) -> Optional[str]:
    """First prefix (in map order) whose namespace starts the IRI."""
    for prefix, namespace in prefixes.items():
        if namespace and iri.startswith(namespace):
            return prefix
    return None
