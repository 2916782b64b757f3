"""
Tests for the Turtle parser adapter (rdflib)

These tests validate:
- Document order of the produced quads
- Term kinds and literal details
- Declared prefixes are reported
- Invalid Turtle raises TurtleParseError with a line number
"""

import pytest

from turtlescope.core.parser import DEFAULT_BASE_IRI, TurtleParseError, TurtlescopeError, parse_turtle
from turtlescope.core.terms import RDF_TYPE, TermKind
from tests.factories import EX, INVALID_DOC, PROV_DOC, TASK_DOC


class TestParseTurtle:
    """Valid documents."""

    def test_quads_in_document_order(self):
        document = parse_turtle(TASK_DOC)
        assert [q.subject.value for q in document.quads] == [EX + "Task1", EX + "Task"]
        assert all(q.predicate == RDF_TYPE for q in document.quads)

    def test_declared_prefixes(self):
        document = parse_turtle(TASK_DOC)
        assert document.prefixes["ex"] == EX
        assert document.prefixes["owl"] == "http://www.w3.org/2002/07/owl#"

    def test_no_default_prefixes(self):
        """Only what the document declares."""
        document = parse_turtle(TASK_DOC)
        assert set(document.prefixes) == {"ex", "owl"}

    def test_literal_terms(self):
        document = parse_turtle(PROV_DOC)
        titles = [q.object for q in document.quads if q.predicate.endswith("title")]
        assert len(titles) == 1
        assert titles[0].kind == TermKind.LITERAL
        assert titles[0].value == "Second run"

    def test_typed_literal_datatype(self):
        document = parse_turtle(PROV_DOC)
        times = [q.object for q in document.quads if q.predicate.endswith("startedAtTime")]
        assert times[0].datatype == "http://www.w3.org/2001/XMLSchema#dateTime"

    def test_blank_node_subject(self):
        document = parse_turtle("[] <http://example.org/p> <http://example.org/o> .")
        assert document.quads[0].subject.kind == TermKind.BLANK_NODE
        assert document.quads[0].subject_id.startswith("_:")

    def test_duplicate_statements_collapse(self):
        text = "<http://example.org/a> <http://example.org/p> <http://example.org/b> .\n" * 2
        assert len(parse_turtle(text).quads) == 1

    def test_empty_document(self):
        document = parse_turtle("")
        assert document.quads == []
        assert document.prefixes == {}

    def test_base_iri_resolves_relative(self):
        document = parse_turtle("<a> <p> <b> .", base_iri="http://example.org/")
        assert document.quads[0].subject.value == "http://example.org/a"

    def test_relative_iri_without_base(self, tmp_path, monkeypatch):
        """Resolution doesn't depend on the working directory."""
        monkeypatch.chdir(tmp_path)
        document = parse_turtle("<a> <p> <b> .")
        assert document.quads[0].subject.value == DEFAULT_BASE_IRI + "a"
        assert document.quads[0].predicate == DEFAULT_BASE_IRI + "p"


class TestParseErrors:
    """Invalid documents."""

    def test_undeclared_prefix_raises(self):
        with pytest.raises(TurtleParseError):
            parse_turtle(INVALID_DOC)

    def test_error_carries_line(self):
        with pytest.raises(TurtleParseError) as exc_info:
            parse_turtle(INVALID_DOC)
        assert exc_info.value.line is not None
        assert str(exc_info.value).startswith(f"line {exc_info.value.line}: ")

    def test_error_is_package_error(self):
        with pytest.raises(TurtlescopeError):
            parse_turtle('<http://example.org/a> <http://example.org/p> "unterminated .')

    def test_unterminated_long_string(self):
        """rdflib signals this one with an assert."""
        with pytest.raises(TurtleParseError):
            parse_turtle('<http://example.org/a> <http://example.org/p> """oops')

    def test_iri_with_space_rejected(self):
        with pytest.raises(TurtleParseError) as exc_info:
            parse_turtle("<a b> <p> <o> .")
        assert "Invalid IRI" in str(exc_info.value)
