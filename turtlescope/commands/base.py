"""
BaseCommand -- Shared foundation for all CLI commands

Provides access to CLI resources via composition.
Commands receive the CLI instance and access its resources through properties.
"""

import sys
from pathlib import Path
from typing import TYPE_CHECKING, Optional, Tuple

from ..core.parser import TurtleParseError
from ..core.store import TripleStore

if TYPE_CHECKING:
    from ..cli import TurtlescopeCLI


class BaseCommand:
    """
    Base class for CLI commands with access to shared resources.

    Commands don't reinitialize resources, they reach them via the CLI instance.
    """

    def __init__(self, cli: 'TurtlescopeCLI'):
        """
        Args:
            cli: The TurtlescopeCLI instance holding all resources
        """
        self._cli = cli

    # -------------------------------------------------------------------------
    # Core resources (convenience properties)
    # -------------------------------------------------------------------------

    @property
    def project_dir(self) -> Path:
        return self._cli.project_dir

    @property
    def config(self):
        """Application configuration."""
        return self._cli.config

    @property
    def symbols(self):
        """Symbol set for display (Unicode/ASCII)."""
        return self._cli.symbols

    def output_format(self, as_json: bool = False) -> str:
        """`--json` wins over display.format."""
        return "json" if as_json else self.config.display.format

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def open_store(self, path: str) -> Optional[Tuple[TripleStore, str]]:
        """
        Load a document, reporting failures on stderr.

        Returns:
            (store, text), or None if the file is unreadable or invalid
        """
        try:
            return self._cli.open_store(path)
        except OSError as e:
            self.error(f"Cannot read {path}: {e.strerror or e}")
        except TurtleParseError as e:
            self.error(f"{path}: {e}")
        return None

    @staticmethod
    def error(message: str) -> None:
        print(f"Error: {message}", file=sys.stderr)
