"""
Triple Store -- Subject-indexed quads with atomic replace-on-edit

The committed state is one immutable StoreSnapshot behind a single
reference. A parse builds a fresh index; only a successful parse swaps
the reference, merges prefixes and notifies listeners. A failed parse
leaves the previous snapshot untouched and notifies nobody.

Prefixes accumulate: a later parse never removes a binding, even if the
prefix disappeared from the new text.
"""

import logging
import threading
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Callable, Dict, FrozenSet, Iterator, List, Optional, Tuple

from .bus import ChangeBus, ListenerFailure, SelectionChannel
from .classifier import classes_of
from .graph import GraphProjection, project_graph
from .parser import ParsedDocument, TurtleParseError, parse_turtle
from .terms import PrefixMap, Quad, QuadIndex
from .timeline import TemporalEvent, project_events
from .writer import serialize_turtle

logger = logging.getLogger(__name__)

Parser = Callable[..., ParsedDocument]


@dataclass(frozen=True)
class StoreSnapshot:
    """Read-only view of the committed index and prefixes."""
    index: QuadIndex = field(default_factory=lambda: MappingProxyType({}))
    prefixes: PrefixMap = field(default_factory=lambda: MappingProxyType({}))
    revision: int = 0

    def quads(self) -> Iterator[Quad]:
        for quads in self.index.values():
            yield from quads

    def quad_count(self) -> int:
        return sum(len(quads) for quads in self.index.values())

    def subjects(self) -> List[str]:
        return list(self.index.keys())


@dataclass
class ParseResult:
    """Outcome of TripleStore.parse(). Truthy only on success."""
    success: bool
    revision: int
    quad_count: int = 0
    error: Optional[TurtleParseError] = None
    listener_errors: List[ListenerFailure] = field(default_factory=list)
    deferred: bool = False

    def __bool__(self) -> bool:
        return self.success


def build_index(quads: List[Quad]) -> QuadIndex:
    """Group quads by subject, keeping first-seen order."""
    grouped: Dict[str, List[Quad]] = {}
    for quad in quads:
        grouped.setdefault(quad.subject_id, []).append(quad)
    return MappingProxyType({subject: tuple(qs) for subject, qs in grouped.items()})


class TripleStore:
    """
    Owner of the current quad index and prefix map.

    Invariants:
    - The snapshot is replaced wholesale, never mutated in place
    - Parse, swap, prefix merge and notification happen under one lock,
      so overlapping parse() calls queue instead of interleaving; a
      listener's own parse() waits for the fan-out to finish
    - Listeners run once per successful parse, in registration order

    Usage:
        store = TripleStore(initial_ttl)
        store.on_update(lambda snapshot: redraw(store.get_nodes_and_links()))
        result = store.parse(edited_ttl)
        if not result:
            print(result.error)
    """

    def __init__(
        self,
        initial_text: str = "",
        *,
        base_iri: Optional[str] = None,
        parser: Parser = parse_turtle,
    ):
        """
        Args:
            initial_text: Turtle document loaded with prefix capture
            base_iri: Base for relative IRIs in every parse
            parser: Adapter returning a ParsedDocument or raising TurtleParseError

        Raises:
            TurtleParseError: If initial_text is not valid Turtle
        """
        self.base_iri = base_iri
        self._parser = parser
        self._lock = threading.Lock()
        self._notifying = threading.local()
        self._deferred: List[Tuple[str, bool]] = []
        self._snapshot = StoreSnapshot()
        self.changes = ChangeBus("store")
        self.selection = SelectionChannel()

        result = self.parse(initial_text, capture_prefixes=True)
        if not result:
            raise result.error

    # -------------------------------------------------------------------------
    # Write path
    # -------------------------------------------------------------------------

    def parse(self, text: str, capture_prefixes: bool = False) -> ParseResult:
        """
        Replace the store contents with the quads of `text`.

        A parse requested by a listener while it is being notified is
        deferred: it runs after the current fan-out completes, so every
        listener sees commits in revision order.

        Args:
            text: Turtle document
            capture_prefixes: Merge the document's prefixes into the prefix map

        Returns:
            ParseResult; on failure the store is unchanged. Deferred
            requests get a falsy result with `deferred=True`.
        """
        if getattr(self._notifying, "active", False):
            self._deferred.append((text, capture_prefixes))
            logger.debug("Parse requested during notification, deferred")
            return ParseResult(success=False, revision=self._snapshot.revision, deferred=True)

        with self._lock:
            result = self._commit(text, capture_prefixes)
            while self._deferred:
                deferred_text, deferred_capture = self._deferred.pop(0)
                deferred_result = self._commit(deferred_text, deferred_capture)
                if not deferred_result:
                    logger.warning("Deferred parse rejected: %s", deferred_result.error)
            return result

    def _commit(self, text: str, capture_prefixes: bool) -> ParseResult:
        """Parse, swap and notify. Caller holds the lock."""
        previous = self._snapshot
        try:
            document = self._parser(text, base_iri=self.base_iri)
        except TurtleParseError as e:
            logger.debug("Parse rejected, keeping revision %d: %s", previous.revision, e)
            return ParseResult(success=False, revision=previous.revision, error=e)

        prefixes = previous.prefixes
        if capture_prefixes and document.prefixes:
            merged = dict(previous.prefixes)
            merged.update(document.prefixes)
            prefixes = MappingProxyType(merged)

        snapshot = StoreSnapshot(
            index=build_index(document.quads),
            prefixes=prefixes,
            revision=previous.revision + 1,
        )
        self._snapshot = snapshot
        logger.debug(
            "Committed revision %d: %d subjects, %d quads",
            snapshot.revision, len(snapshot.index), len(document.quads),
        )

        self._notifying.active = True
        try:
            failures = self.changes.notify(snapshot)
        finally:
            self._notifying.active = False
        return ParseResult(
            success=True,
            revision=snapshot.revision,
            quad_count=len(document.quads),
            listener_errors=failures,
        )

    def on_update(self, listener: Callable[[StoreSnapshot], None]) -> Callable[[], None]:
        """Register a listener for committed parses. Returns an unsubscribe function."""
        return self.changes.subscribe(listener)

    # -------------------------------------------------------------------------
    # Read path
    # -------------------------------------------------------------------------

    @property
    def snapshot(self) -> StoreSnapshot:
        return self._snapshot

    @property
    def revision(self) -> int:
        return self._snapshot.revision

    def get_quad_index(self) -> QuadIndex:
        return self._snapshot.index

    def get_prefix_map(self) -> PrefixMap:
        return self._snapshot.prefixes

    def get_classes(self) -> FrozenSet[str]:
        return classes_of(self._snapshot.index)

    def get_nodes_and_links(self) -> GraphProjection:
        index = self._snapshot.index
        return project_graph(index, classes_of(index))

    def get_events(self) -> List[TemporalEvent]:
        return project_events(self._snapshot.index)

    def to_turtle(self) -> str:
        snapshot = self._snapshot
        return serialize_turtle(snapshot.index, snapshot.prefixes)

    def quad_set(self) -> set:
        """Statements as (subject, predicate, object) tuples, order-free."""
        return {quad.as_triple() for quad in self._snapshot.quads()}

    def __repr__(self) -> str:
        snapshot = self._snapshot
        return f"<TripleStore revision={snapshot.revision} subjects={len(snapshot.index)}>"
