"""
Tests for TripleStore -- atomic replace-on-parse and notification

These tests validate:
- A failed parse changes nothing and notifies nobody
- A successful parse swaps the snapshot and notifies in order
- Listener failures are isolated
- Prefixes only accumulate
"""

import threading

import pytest

from turtlescope.core.parser import ParsedDocument, TurtleParseError
from turtlescope.core.store import StoreSnapshot, TripleStore
from tests.factories import (
    EX,
    HIERARCHY_DOC,
    INVALID_DOC,
    PROV_DOC,
    TASK_DOC,
    TASK_DOC_FULL_IRIS,
)


class TestConstruction:
    """Initial document."""

    def test_empty_store(self):
        store = TripleStore()
        assert store.revision == 1
        assert dict(store.get_quad_index()) == {}
        assert store.get_nodes_and_links().nodes == ()

    def test_initial_text_captures_prefixes(self, task_store):
        assert task_store.get_prefix_map()["ex"] == EX

    def test_index_keyed_by_subject(self, task_store):
        index = task_store.get_quad_index()
        assert list(index) == [EX + "Task1", EX + "Task"]
        assert len(index[EX + "Task1"]) == 1

    def test_invalid_initial_text_raises(self):
        with pytest.raises(TurtleParseError):
            TripleStore(INVALID_DOC)

    def test_index_is_read_only(self, task_store):
        with pytest.raises(TypeError):
            task_store.get_quad_index()["x"] = ()


class TestAtomicity:
    """Invalid text leaves the committed state untouched."""

    def test_failed_parse_result(self, task_store):
        result = task_store.parse(INVALID_DOC)
        assert not result
        assert isinstance(result.error, TurtleParseError)
        assert result.revision == 1

    def test_unterminated_long_string_is_rejected(self, task_store):
        result = task_store.parse('<http://example.org/a> <http://example.org/p> """oops')
        assert not result
        assert isinstance(result.error, TurtleParseError)
        assert task_store.revision == 1

    def test_failed_parse_keeps_projections(self, task_store):
        nodes_before = task_store.get_nodes_and_links()
        events_before = task_store.get_events()
        snapshot_before = task_store.snapshot

        task_store.parse(INVALID_DOC)

        assert task_store.get_nodes_and_links() == nodes_before
        assert task_store.get_events() == events_before
        assert task_store.snapshot is snapshot_before

    def test_failed_parse_notifies_nobody(self, task_store):
        calls = []
        task_store.on_update(calls.append)
        task_store.parse(INVALID_DOC)
        assert calls == []

    def test_successful_parse_replaces_everything(self, task_store):
        result = task_store.parse(HIERARCHY_DOC)
        assert result
        assert result.revision == 2
        assert EX + "Task1" not in task_store.get_quad_index()
        assert EX + "bug42" in task_store.get_quad_index()

    def test_parse_result_counts(self, task_store):
        result = task_store.parse(PROV_DOC)
        assert result.quad_count == task_store.snapshot.quad_count()
        assert result.listener_errors == []

    def test_reparse_same_text_is_idempotent(self, task_store):
        first = task_store.get_nodes_and_links()
        task_store.parse(TASK_DOC)
        assert task_store.get_nodes_and_links() == first


class TestNotification:
    """on_update contract."""

    def test_listener_receives_snapshot(self, task_store):
        received = []
        task_store.on_update(received.append)
        task_store.parse(PROV_DOC)
        assert len(received) == 1
        assert isinstance(received[0], StoreSnapshot)
        assert received[0] is task_store.snapshot

    def test_listeners_called_in_registration_order(self, task_store):
        order = []
        task_store.on_update(lambda s: order.append("first"))
        task_store.on_update(lambda s: order.append("second"))
        task_store.parse(TASK_DOC)
        assert order == ["first", "second"]

    def test_failing_listener_does_not_stop_others(self, task_store):
        """Two listeners, the first raises: both are called once, in order."""
        order = []

        def broken(snapshot):
            order.append("broken")
            raise RuntimeError("listener bug")

        task_store.on_update(broken)
        task_store.on_update(lambda s: order.append("healthy"))

        result = task_store.parse(TASK_DOC)

        assert result
        assert order == ["broken", "healthy"]
        assert len(result.listener_errors) == 1
        assert isinstance(result.listener_errors[0].error, RuntimeError)

    def test_listener_sees_committed_state(self, task_store):
        seen = []
        task_store.on_update(lambda s: seen.append(task_store.get_classes()))
        task_store.parse(HIERARCHY_DOC)
        assert seen == [frozenset({EX + "Bug"})]

    def test_unsubscribe(self, task_store):
        calls = []
        unsubscribe = task_store.on_update(calls.append)
        unsubscribe()
        task_store.parse(TASK_DOC)
        assert calls == []

    def test_one_notification_per_parse(self, task_store):
        calls = []
        task_store.on_update(calls.append)
        for _ in range(3):
            task_store.parse(TASK_DOC)
        assert [s.revision for s in calls] == [2, 3, 4]

    def test_parse_from_listener_runs_after_fan_out(self, task_store):
        """A listener that parses again: every listener sees 2 before 3."""
        seen = []
        nested = []

        def reparse(snapshot):
            if not nested:
                nested.append(task_store.parse(PROV_DOC))

        task_store.on_update(reparse)
        task_store.on_update(lambda s: seen.append(s.revision))

        result = task_store.parse(HIERARCHY_DOC)

        assert result.revision == 2
        assert seen == [2, 3]
        assert not nested[0]
        assert nested[0].deferred
        assert task_store.revision == 3
        assert EX + "run1" in task_store.get_quad_index()


class TestPrefixes:
    """Prefix capture and accumulation."""

    def test_capture_disabled_by_default(self, task_store):
        task_store.parse("@prefix new: <http://new.example/> .\nnew:a new:p new:b .")
        assert "new" not in task_store.get_prefix_map()

    def test_capture_merges(self, task_store):
        task_store.parse(
            "@prefix new: <http://new.example/> .\nnew:a new:p new:b .",
            capture_prefixes=True,
        )
        prefixes = task_store.get_prefix_map()
        assert prefixes["new"] == "http://new.example/"
        assert prefixes["ex"] == EX

    def test_prefixes_survive_later_parse(self, task_store):
        """Prefixes from an earlier capture stay after a parse without them."""
        task_store.parse(TASK_DOC_FULL_IRIS, capture_prefixes=True)
        assert task_store.get_prefix_map()["ex"] == EX
        assert task_store.get_prefix_map()["owl"] == "http://www.w3.org/2002/07/owl#"

    def test_later_binding_overrides(self, task_store):
        task_store.parse("@prefix ex: <http://other.example/> .", capture_prefixes=True)
        assert task_store.get_prefix_map()["ex"] == "http://other.example/"

    def test_failed_parse_keeps_prefixes(self, task_store):
        before = dict(task_store.get_prefix_map())
        task_store.parse("@prefix new: <http://new.example/> .\n" + INVALID_DOC, capture_prefixes=True)
        assert dict(task_store.get_prefix_map()) == before


class TestParserInjection:
    """The parser adapter is replaceable."""

    def test_custom_parser(self):
        calls = []

        def parser(text, base_iri=None):
            calls.append((text, base_iri))
            return ParsedDocument()

        store = TripleStore("anything", base_iri="http://example.org/", parser=parser)
        assert calls == [("anything", "http://example.org/")]
        assert store.revision == 1

    def test_parser_error_is_atomic(self):
        documents = [ParsedDocument()]

        def parser(text, base_iri=None):
            if documents:
                return documents.pop()
            raise TurtleParseError("nope")

        store = TripleStore("first", parser=parser)
        result = store.parse("second")
        assert not result
        assert result.revision == 1
        assert str(result.error) == "nope"


class TestConcurrency:
    """Overlapping parse() calls queue behind each other."""

    def test_parallel_parses_all_commit(self, task_store):
        revisions = []
        task_store.on_update(lambda s: revisions.append(s.revision))

        threads = [
            threading.Thread(target=task_store.parse, args=(text,))
            for text in (TASK_DOC, PROV_DOC, HIERARCHY_DOC) * 3
        ]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert revisions == list(range(2, 11))
        assert task_store.revision == 10
