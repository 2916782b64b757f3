"""
TimelineCommand -- Provenance events of a Turtle document

Prints events (startedAtTime / generatedAtTime values) on a time axis,
numbered in time order. `--select N` activates marker N: its subject is
broadcast on the store's selection channel and the graph view redraws
with that node highlighted.
"""

from typing import Optional

from ..commands.base import BaseCommand
from ..presentation.views import GraphView, TimelineView


class TimelineCommand(BaseCommand):
    """Command for the timeline view."""

    def show(self, path: str, as_json: bool = False, select: Optional[int] = None) -> int:
        """
        Render the timeline of `path`.

        Args:
            path: Turtle file
            as_json: Emit JSON instead of text
            select: Marker number to activate

        Returns:
            Exit status
        """
        opened = self.open_store(path)
        if opened is None:
            return 1
        store, _ = opened

        fmt = self.output_format(as_json)
        timeline = TimelineView(store, symbols=self.symbols, fmt=fmt)
        timeline.render()

        status = 0
        if select is not None:
            graph = GraphView(store, symbols=self.symbols, fmt=fmt)
            print()
            try:
                timeline.activate(select)
            except IndexError as e:
                self.error(str(e))
                status = 1
            graph.close()

        timeline.close()
        return status


# =============================================================================
# Command Registration (Self-Registration Pattern)
# =============================================================================

COMMAND_NAME = 'timeline'


def register_parser(subparsers):
    """Register timeline command parser."""
    p = subparsers.add_parser('timeline', help='Show provenance events of a Turtle file')
    p.add_argument('file', help='Turtle document')
    p.add_argument('--json', action='store_true', help='Output as JSON')
    p.add_argument('--select', type=int, metavar='N',
                   help='Activate marker N and show its subject in the graph')
    return p


def handle(cli, args):
    """Handle timeline command dispatch."""
    return cli._timeline_cmd.show(args.file, as_json=args.json, select=args.select)
