"""
Graph Projection -- nodes and links derived from the quad index

This is a PROJECTION, recomputed on every call.
Nothing here is cached across edits; the node set is a function
of the index and the class set only.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, FrozenSet, Iterable, List, Optional, Tuple

from .terms import PrefixMap, Quad, QuadIndex, fragment_title, local_name, prefix_of


class NodeType(Enum):
    INSTANCE = "instance"
    CLASS = "class"


@dataclass(frozen=True)
class Node:
    id: str
    type: NodeType
    title: str

    @property
    def is_class(self) -> bool:
        return self.type == NodeType.CLASS

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "type": self.type.value, "title": self.title}


@dataclass(frozen=True)
class Link:
    source: str
    target: str
    predicate: str  # Kept for filtering; renderers treat all links alike

    def to_dict(self) -> Dict[str, Any]:
        return {"source": self.source, "target": self.target, "predicate": self.predicate}


@dataclass(frozen=True)
class GraphProjection:
    nodes: Tuple[Node, ...] = ()
    links: Tuple[Link, ...] = ()
    _by_id: Dict[str, Node] = field(default_factory=dict, compare=False, repr=False)

    def __post_init__(self):
        self._by_id.update((node.id, node) for node in self.nodes)

    def node(self, node_id: str) -> Optional[Node]:
        return self._by_id.get(node_id)

    def classes(self) -> List[Node]:
        return [n for n in self.nodes if n.is_class]

    def instances(self) -> List[Node]:
        return [n for n in self.nodes if not n.is_class]

    def neighbors(self, node_id: str) -> List[str]:
        """Ids linked to node_id in either direction, first-seen order."""
        seen: Dict[str, None] = {}
        for link in self.links:
            if link.source == node_id:
                seen.setdefault(link.target)
            elif link.target == node_id:
                seen.setdefault(link.source)
        return list(seen)

    def to_dict(self, prefixes: Optional[PrefixMap] = None) -> Dict[str, Any]:
        nodes = []
        for node in self.nodes:
            entry = node.to_dict()
            if prefixes is not None:
                entry["prefix"] = prefix_of(node.id, prefixes)
            nodes.append(entry)
        return {"nodes": nodes, "links": [link.to_dict() for link in self.links]}


def resolve_title(subject: str, quads: Iterable[Quad]) -> str:
    """First `title` value of the subject, else its fragment, else the IRI."""
    for quad in quads:
        if local_name(quad.predicate) == "title":
            return quad.object.value
    return fragment_title(subject)


def project_graph(index: QuadIndex, classes: FrozenSet[str]) -> GraphProjection:
    """
    Build the node/link view.

    Args:
        index: Subject-keyed quad index
        classes: Output of classes_of() for the same index

    Returns:
        GraphProjection; subjects first in index order, then class-only
        IRIs sorted
    """
    nodes: Dict[str, Node] = {}
    for subject, quads in index.items():
        node_type = NodeType.CLASS if subject in classes else NodeType.INSTANCE
        nodes[subject] = Node(subject, node_type, resolve_title(subject, quads))

    for class_iri in sorted(classes):
        if class_iri not in nodes:
            nodes[class_iri] = Node(class_iri, NodeType.CLASS, fragment_title(class_iri))

    links = [
        Link(subject, quad.object.value, quad.predicate)
        for subject, quads in index.items()
        for quad in quads
        if quad.object.is_named_node and quad.object.value in nodes
    ]
    return GraphProjection(nodes=tuple(nodes.values()), links=tuple(links))
