"""
Tests for the CLI -- command registration and end-to-end runs

Commands run through main() against documents in tmp_path, with
ASCII symbols forced through the environment.
"""

import orjson
import pytest

from turtlescope.cli import main
from turtlescope.commands import get_registered_commands
from turtlescope.core.parser import parse_turtle
from tests.factories import EX, INVALID_DOC, PROV_DOC, TASK_DOC


@pytest.fixture
def run(scope_factory, monkeypatch):
    """Run the CLI in the factory's project directory."""
    monkeypatch.setenv("TURTLESCOPE_DISPLAY_SYMBOLS", "ascii")

    def _run(*args):
        return main(["--project", str(scope_factory.project_dir), *args])
    return _run


class TestRegistration:

    def test_all_commands_registered(self, run):
        run()
        assert get_registered_commands() == ["graph", "timeline", "watch", "fmt", "config"]

    def test_no_command_prints_help(self, run, capsys):
        assert run() == 0
        assert "usage:" in capsys.readouterr().out

    def test_version(self, run, capsys):
        with pytest.raises(SystemExit) as exc_info:
            run("--version")
        assert exc_info.value.code == 0
        assert "turtlescope 0.1.0" in capsys.readouterr().out


class TestGraphCommand:

    def test_text(self, run, scope_factory, capsys):
        path = scope_factory.write_document("tasks.ttl", TASK_DOC)
        assert run("graph", str(path)) == 0
        out = capsys.readouterr().out
        assert out.startswith("GRAPH  2 nodes, 1 links")
        assert "(C) Task  (ex:Task)" in out

    def test_json(self, run, scope_factory, capsys):
        path = scope_factory.write_document("tasks.ttl", TASK_DOC)
        assert run("graph", str(path), "--json") == 0
        data = orjson.loads(capsys.readouterr().out)
        assert [n["id"] for n in data["nodes"]] == [EX + "Task1", EX + "Task"]
        assert data["selected"] is None

    def test_json_from_config(self, run, scope_factory, capsys, monkeypatch):
        monkeypatch.setenv("TURTLESCOPE_DISPLAY_FORMAT", "json")
        path = scope_factory.write_document("tasks.ttl", TASK_DOC)
        run("graph", str(path))
        assert "nodes" in orjson.loads(capsys.readouterr().out)

    def test_select(self, run, scope_factory, capsys):
        path = scope_factory.write_document("tasks.ttl", TASK_DOC)
        assert run("graph", str(path), "--select", EX + "Task1") == 0
        out = capsys.readouterr().out
        assert out.count("GRAPH") == 1
        assert "[I] Task1  (ex:Task1) *" in out

    def test_select_unknown_node(self, run, scope_factory, capsys):
        path = scope_factory.write_document("tasks.ttl", TASK_DOC)
        assert run("graph", str(path), "--select", EX + "Nope") == 1
        assert "No node" in capsys.readouterr().err

    def test_invalid_document(self, run, scope_factory, capsys):
        path = scope_factory.write_document("broken.ttl", INVALID_DOC)
        assert run("graph", str(path)) == 1
        captured = capsys.readouterr()
        assert captured.out == ""
        assert captured.err.startswith("Error: ")
        assert "line " in captured.err

    def test_missing_file(self, run, scope_factory, capsys):
        assert run("graph", str(scope_factory.project_dir / "missing.ttl")) == 1
        assert "Cannot read" in capsys.readouterr().err


class TestTimelineCommand:

    def test_text_order(self, run, scope_factory, capsys):
        path = scope_factory.write_document("prov.ttl", PROV_DOC)
        assert run("timeline", str(path)) == 0
        out = capsys.readouterr().out
        assert out.startswith("TIMELINE  3 events")
        assert out.index("run1") < out.index("dataset") < out.index("run2")

    def test_json(self, run, scope_factory, capsys):
        path = scope_factory.write_document("prov.ttl", PROV_DOC)
        run("timeline", str(path), "--json")
        data = orjson.loads(capsys.readouterr().out)
        assert [e["subject"] for e in data] == [EX + "run1", EX + "dataset", EX + "run2"]

    def test_select_highlights_graph(self, run, scope_factory, capsys):
        path = scope_factory.write_document("prov.ttl", PROV_DOC)
        assert run("timeline", str(path), "--select", "0") == 0
        out = capsys.readouterr().out
        graph = out[out.index("GRAPH"):]
        assert "[I] run1  (ex:run1) *" in graph

    def test_select_out_of_range(self, run, scope_factory, capsys):
        path = scope_factory.write_document("prov.ttl", PROV_DOC)
        assert run("timeline", str(path), "--select", "7") == 1
        assert "No timeline marker" in capsys.readouterr().err


class TestFmtCommand:

    def test_prints_round_trip(self, run, scope_factory, capsys):
        path = scope_factory.write_document("prov.ttl", PROV_DOC)
        assert run("fmt", str(path)) == 0
        out = capsys.readouterr().out
        original = {q.as_triple() for q in parse_turtle(PROV_DOC).quads}
        assert {q.as_triple() for q in parse_turtle(out).quads} == original

    def test_write(self, run, scope_factory, capsys):
        path = scope_factory.write_document("prov.ttl", PROV_DOC)
        assert run("fmt", str(path), "--write") == 0
        assert "Rewrote" in capsys.readouterr().out

        rewritten = path.read_text(encoding="utf-8")
        assert rewritten != PROV_DOC
        original = {q.as_triple() for q in parse_turtle(PROV_DOC).quads}
        assert {q.as_triple() for q in parse_turtle(rewritten).quads} == original

        assert run("fmt", str(path), "--write") == 0
        assert {q.as_triple() for q in parse_turtle(path.read_text(encoding="utf-8")).quads} == original


class TestWatchCommand:

    def test_bounded_run(self, run, scope_factory, capsys):
        path = scope_factory.write_document("prov.ttl", PROV_DOC)
        assert run("watch", str(path), "--interval", "0", "--max-polls", "2") == 0
        out = capsys.readouterr().out
        assert "GRAPH  4 nodes, 3 links" in out
        assert "TIMELINE  3 events" in out
        assert "0 change(s) in 2 poll(s), revision 1" in out

    def test_invalid_document(self, run, scope_factory, capsys):
        path = scope_factory.write_document("broken.ttl", INVALID_DOC)
        assert run("watch", str(path), "--max-polls", "1") == 1


class TestConfigCommand:

    def test_show(self, run, capsys):
        assert run("config") == 0
        assert "Symbols: ascii" in capsys.readouterr().out

    def test_set(self, run, scope_factory, capsys):
        assert run("config", "--set", "editor.debounce_ms=100") == 0
        assert "Set editor.debounce_ms = 100" in capsys.readouterr().out
        assert (scope_factory.project_dir / ".turtlescope" / "config.yaml").exists()

    def test_set_invalid(self, run, capsys):
        assert run("config", "--set", "display.format=xml") == 1
        assert "Unknown format" in capsys.readouterr().err

    def test_set_missing_equals(self, run, capsys):
        assert run("config", "--set", "display.format") == 1
        assert "KEY=VALUE" in capsys.readouterr().err
