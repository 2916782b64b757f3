"""
FmtCommand -- Re-serialize a Turtle document

The output keeps the triple set and the declared prefixes; formatting
and statement order come from the serializer.
"""

from pathlib import Path

from ..commands.base import BaseCommand
from ..presentation.symbols import safe_print


class FmtCommand(BaseCommand):
    """Command for round-tripping a document through the store."""

    def format(self, path: str, write: bool = False) -> int:
        opened = self.open_store(path)
        if opened is None:
            return 1
        store, text = opened

        formatted = store.to_turtle()
        if not write:
            safe_print(formatted.rstrip("\n"))
            return 0

        if formatted == text:
            print(f"{self.symbols.check_pass} {path} already formatted")
            return 0
        Path(path).write_text(formatted, encoding="utf-8")
        print(f"{self.symbols.check_pass} Rewrote {path} ({store.snapshot.quad_count()} triples)")
        return 0


# =============================================================================
# Command Registration (Self-Registration Pattern)
# =============================================================================

COMMAND_NAME = 'fmt'


def register_parser(subparsers):
    """Register fmt command parser."""
    p = subparsers.add_parser('fmt', help='Re-serialize a Turtle file')
    p.add_argument('file', help='Turtle document')
    p.add_argument('--write', '-w', action='store_true',
                   help='Rewrite the file in place instead of printing')
    return p


def handle(cli, args):
    """Handle fmt command dispatch."""
    return cli._fmt_cmd.format(args.file, write=args.write)
