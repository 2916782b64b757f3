"""
CLI -- Command interface

Each invocation loads one Turtle document into a TripleStore and drives
the views over it. Configuration (symbols, output format, timing, base
IRI, log level) comes from ConfigManager.
"""

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import Optional, Tuple

from .config import ConfigManager
from .core.store import TripleStore
from .presentation.symbols import get_symbols
from .commands.graph_cmd import GraphCommand
from .commands.timeline_cmd import TimelineCommand
from .commands.fmt_cmd import FmtCommand
from .commands.watch_cmd import WatchCommand
from .commands.config_cmd import ConfigCommand
from . import __version__

LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"


class TurtlescopeCLI:
    """Command-line interface for turtlescope."""

    def __init__(self, project_dir: Path):
        self.project_dir = Path(project_dir)
        self.config_manager = ConfigManager(self.project_dir)
        self.config = self.config_manager.load()

        # Initialize symbols based on config
        self.symbols = get_symbols(self.config.display.symbols)

        # Initialize command handlers
        self._graph_cmd = GraphCommand(self)
        self._timeline_cmd = TimelineCommand(self)
        self._fmt_cmd = FmtCommand(self)
        self._watch_cmd = WatchCommand(self)
        self._config_cmd = ConfigCommand(self)

    def open_store(self, path: str) -> Tuple[TripleStore, str]:
        """
        Read `path` and build a store from it.

        Raises:
            OSError: If the file can't be read
            TurtleParseError: If the file isn't valid Turtle
        """
        text = Path(path).read_text(encoding="utf-8")
        return TripleStore(text, base_iri=self.config.parser.base_iri), text

    # Delegation (programmatic use)

    def graph(self, path: str, as_json: bool = False, select: Optional[str] = None) -> int:
        """Show the graph. Delegates to GraphCommand."""
        return self._graph_cmd.show(path, as_json=as_json, select=select)

    def timeline(self, path: str, as_json: bool = False, select: Optional[int] = None) -> int:
        """Show the timeline. Delegates to TimelineCommand."""
        return self._timeline_cmd.show(path, as_json=as_json, select=select)

    def show_config(self) -> int:
        """Show configuration. Delegates to ConfigCommand."""
        return self._config_cmd.show_config()

    def set_config(self, key: str, value: str, scope: str = "project") -> int:
        """Set a configuration value. Delegates to ConfigCommand."""
        return self._config_cmd.set_config(key, value, scope=scope)


def configure_logging(level: str, verbose: bool = False) -> None:
    """Root handler on stderr; --verbose forces DEBUG."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else getattr(logging, level.upper(), logging.WARNING),
        format=LOG_FORMAT,
        stream=sys.stderr,
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="turtlescope",
        description="turtlescope -- Graph and timeline views of RDF Turtle documents",
    )

    parser.add_argument(
        '--project', '-p',
        default=os.environ.get("TURTLESCOPE_PROJECT_PATH", "."),
        help='Project directory for configuration (default: TURTLESCOPE_PROJECT_PATH or current)'
    )

    parser.add_argument(
        '--verbose', '-v',
        action='store_true',
        help='Debug logging'
    )

    parser.add_argument(
        '--version', '-V',
        action='version',
        version=f'turtlescope {__version__}'
    )

    subparsers = parser.add_subparsers(dest='command', help='Commands')

    # Register all commands from command modules (self-registration pattern)
    from .commands import register_all
    register_all(subparsers)
    return parser


def main(argv=None) -> int:
    """
    Main entry point for the turtlescope CLI.

    Returns:
        Process exit status
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 0

    cli = TurtlescopeCLI(Path(args.project))
    configure_logging(cli.config.logging.level, verbose=args.verbose)

    from .commands import dispatch
    try:
        return dispatch(args.command, cli, args) or 0
    except KeyError as e:
        print(f"Error: {e}", file=sys.stderr)
        parser.print_help()
        return 2


if __name__ == '__main__':
    sys.exit(main())
