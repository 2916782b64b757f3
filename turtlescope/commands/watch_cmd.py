"""
WatchCommand -- Live graph and timeline for a file being edited

Wires the whole edit loop together:
  file -> DocumentWatcher -> TurtleEditor (debounced parse) -> TripleStore
       -> GraphView / TimelineView redraw

Invalid intermediate states are reported by the editor's logger and the
views keep showing the last valid document.
"""

import logging
from pathlib import Path
from typing import Optional

from ..commands.base import BaseCommand
from ..presentation.views import GraphView, TimelineView
from ..services.editor import TurtleEditor
from ..services.watcher import DocumentWatcher

logger = logging.getLogger(__name__)


class WatchCommand(BaseCommand):
    """Command for re-rendering on every committed change."""

    def watch(self, path: str, interval: Optional[float] = None,
              max_polls: Optional[int] = None, as_json: bool = False) -> int:
        """
        Watch `path` until interrupted (or for `max_polls` polls).

        Args:
            path: Turtle file
            interval: Seconds between polls (default: editor.poll_interval)
            max_polls: Stop after this many polls
            as_json: Emit JSON instead of text

        Returns:
            Exit status
        """
        opened = self.open_store(path)
        if opened is None:
            return 1
        store, text = opened

        if interval is None:
            interval = self.config.editor.poll_interval
        fmt = self.output_format(as_json)

        views = [
            GraphView(store, symbols=self.symbols, fmt=fmt),
            TimelineView(store, symbols=self.symbols, fmt=fmt),
        ]
        for view in views:
            view.render()

        editor = TurtleEditor(store, debounce=self.config.editor.debounce_seconds)
        watcher = DocumentWatcher(Path(path), editor, initial_text=text)
        logger.info("Watching %s every %.2fs", path, interval)

        try:
            changes = watcher.run(interval=interval, max_polls=max_polls)
        except KeyboardInterrupt:
            changes = None
        finally:
            editor.close()
            for view in views:
                view.close()

        if changes is None:
            print("\nStopped.")
        else:
            print(f"\n{self.symbols.check_pass} {changes} change(s) in {watcher.polls} poll(s), "
                  f"revision {store.revision}")
        return 0


# =============================================================================
# Command Registration (Self-Registration Pattern)
# =============================================================================

COMMAND_NAME = 'watch'


def register_parser(subparsers):
    """Register watch command parser."""
    p = subparsers.add_parser('watch', help='Re-render graph and timeline when a file changes')
    p.add_argument('file', help='Turtle document')
    p.add_argument('--interval', type=float, metavar='S',
                   help='Seconds between polls (default: editor.poll_interval)')
    p.add_argument('--max-polls', type=int, metavar='N',
                   help='Stop after N polls')
    p.add_argument('--json', action='store_true', help='Output as JSON')
    return p


def handle(cli, args):
    """Handle watch command dispatch."""
    return cli._watch_cmd.watch(
        args.file,
        interval=args.interval,
        max_polls=args.max_polls,
        as_json=args.json,
    )
