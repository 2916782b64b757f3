"""
GraphCommand -- Nodes and links of a Turtle document

Prints the graph projection grouped into classes and instances, each
node followed by its outgoing links. `--select` highlights one node the
same way a timeline activation does.
"""

from ..commands.base import BaseCommand
from ..presentation.views import GraphView


class GraphCommand(BaseCommand):
    """Command for the graph view."""

    def show(self, path: str, as_json: bool = False, select: str = None) -> int:
        """
        Render the graph of `path`.

        Args:
            path: Turtle file
            as_json: Emit JSON instead of text
            select: IRI of a node to highlight

        Returns:
            Exit status
        """
        opened = self.open_store(path)
        if opened is None:
            return 1
        store, _ = opened

        view = GraphView(store, symbols=self.symbols, fmt=self.output_format(as_json))
        if select:
            if store.get_nodes_and_links().node(select) is None:
                self.error(f"No node with IRI {select}")
                view.close()
                return 1
            # Selection re-renders the view
            store.selection.select(select)
        else:
            view.render()
        view.close()
        return 0


# =============================================================================
# Command Registration (Self-Registration Pattern)
# =============================================================================

COMMAND_NAME = 'graph'


def register_parser(subparsers):
    """Register graph command parser."""
    p = subparsers.add_parser('graph', help='Show nodes and links of a Turtle file')
    p.add_argument('file', help='Turtle document')
    p.add_argument('--json', action='store_true', help='Output as JSON')
    p.add_argument('--select', metavar='IRI', help='Highlight the node with this IRI')
    return p


def handle(cli, args):
    """Handle graph command dispatch."""
    return cli._graph_cmd.show(args.file, as_json=args.json, select=args.select)
