"""
Renderers -- Text and JSON output for the graph and timeline projections

Text output is for terminals; JSON output (orjson) is for piping.
Renderers only read projections, they never touch the store.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence

import orjson

from ..core.graph import GraphProjection, Link, Node
from ..core.terms import PrefixMap, compact_iri
from ..core.timeline import TemporalEvent, time_extent
from .symbols import SymbolSet, get_symbols, truncate

TITLE_LENGTH = 60
DEFAULT_AXIS_WIDTH = 60


def render_json(data: Any) -> str:
    """Pretty JSON; objects with to_dict() are converted."""
    return orjson.dumps(data, default=_to_jsonable, option=orjson.OPT_INDENT_2).decode()


def _to_jsonable(obj: Any) -> Any:
    if hasattr(obj, "to_dict"):
        return obj.to_dict()
    if hasattr(obj, "value"):  # Enum
        return obj.value
    raise TypeError(f"Cannot serialize {type(obj).__name__}")


# =============================================================================
# Graph
# =============================================================================

def _node_line(node: Node, prefixes: PrefixMap, symbols: SymbolSet,
               selected: Optional[str], full: bool) -> str:
    marker = symbols.class_node if node.is_class else symbols.instance_node
    line = f"{marker} {truncate(node.title, TITLE_LENGTH, full)}  ({compact_iri(node.id, prefixes)})"
    if node.id == selected:
        line = f"{line} {symbols.selected}"
    return line


def render_graph(
    projection: GraphProjection,
    prefixes: PrefixMap,
    symbols: Optional[SymbolSet] = None,
    selected: Optional[str] = None,
    full: bool = False,
) -> str:
    """
    Render nodes grouped by type, each with its outgoing links.

    Args:
        projection: Output of project_graph()
        prefixes: Used to shorten IRIs
        symbols: SymbolSet (auto-detect if None)
        selected: Node id to mark as selected
        full: Don't truncate titles
    """
    symbols = symbols or get_symbols()
    outgoing: Dict[str, List[Link]] = {}
    for link in projection.links:
        outgoing.setdefault(link.source, []).append(link)

    lines = [f"GRAPH  {len(projection.nodes)} nodes, {len(projection.links)} links"]
    for heading, nodes in (("CLASSES", projection.classes()), ("INSTANCES", projection.instances())):
        if not nodes:
            continue
        lines.append("")
        lines.append(heading)
        for node in nodes:
            lines.append("  " + _node_line(node, prefixes, symbols, selected, full))
            links = outgoing.get(node.id, [])
            for i, link in enumerate(links):
                branch = symbols.tree_end if i == len(links) - 1 else symbols.tree_branch
                target = projection.node(link.target)
                title = target.title if target else link.target
                lines.append(
                    f"    {branch} {symbols.link} {truncate(title, TITLE_LENGTH, full)}"
                    f"  [{compact_iri(link.predicate, prefixes)}]"
                )
    return "\n".join(lines)


# =============================================================================
# Timeline
# =============================================================================

def _position(when: datetime, start: datetime, end: datetime, width: int) -> int:
    if end == start:
        return width // 2
    span = (end - start).total_seconds()
    offset = (when - start).total_seconds()
    return round(offset / span * (width - 1))


def render_axis(events: Sequence[TemporalEvent], symbols: SymbolSet,
                width: int = DEFAULT_AXIS_WIDTH) -> str:
    """One-line time axis with a marker per event."""
    extent = time_extent(events)
    cells = [symbols.axis] * width
    if extent is None:
        return "".join(cells)
    start, end = extent
    cells[0] = cells[-1] = symbols.tick
    for event in events:
        cells[_position(event.time, start, end, width)] = symbols.event
    return "".join(cells)


def render_timeline(
    events: Sequence[TemporalEvent],
    prefixes: PrefixMap,
    symbols: Optional[SymbolSet] = None,
    width: int = DEFAULT_AXIS_WIDTH,
    full: bool = False,
) -> str:
    """Render the axis followed by one numbered line per event."""
    symbols = symbols or get_symbols()
    lines = [f"TIMELINE  {len(events)} events"]
    if not events:
        return lines[0]

    start, end = time_extent(events)
    lines.append("")
    lines.append(render_axis(events, symbols, width))
    lines.append(f"{start.isoformat()}  ..  {end.isoformat()}")
    lines.append("")
    for position, event in enumerate(events):
        lines.append(
            f"  {position:>3} {symbols.event} {event.time.isoformat()}  "
            f"{truncate(event.label, TITLE_LENGTH, full)}  "
            f"[{compact_iri(event.predicate, prefixes)}]"
        )
    return "\n".join(lines)
