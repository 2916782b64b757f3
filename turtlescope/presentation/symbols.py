"""
Symbols -- Visual vocabulary for graph and timeline output

Unicode where the terminal can show it, ASCII otherwise.
Configurable via display.symbols (auto | unicode | ascii).

safe_print() is for document-derived text: titles and literals come
straight from the Turtle source and may hold anything.
"""

import codecs
import os
import sys
from dataclasses import dataclass
from typing import Optional


# Unicode drawing characters -> ASCII stand-ins
_ASCII_FALLBACK = str.maketrans({
    '→': '->',
    '←': '<-',
    '…': '...',
    '●': 'o',
    '◆': '*',
    '◎': '(C)',
    '▢': '[I]',
    '─': '-',
    '│': '|',
    '┼': '+',
    '├': '|',
    '└': '`',
    '✓': '[OK]',
    '✗': '[X]',
})

_TRUTHY = ('1', 'true', 'yes')


def safe_print(text: str, end: str = '\n', file=None) -> None:
    """
    Print, degrading to ASCII stand-ins and then '?' when the stream
    can't encode the text.
    """
    stream = file or sys.stdout
    try:
        print(text, end=end, file=stream)
    except UnicodeEncodeError:
        encoding = getattr(stream, 'encoding', None) or 'ascii'
        fallback = text.translate(_ASCII_FALLBACK).encode(encoding, errors='replace')
        print(fallback.decode(encoding), end=end, file=stream)


def truncate(text: str, length: int, full: bool = False) -> str:
    """Truncate text with '...', unless full is set."""
    if not text:
        return ""
    if full or len(text) <= length:
        return text
    if length <= 3:
        return text[:length]
    return text[:length - 3] + "..."


@dataclass(frozen=True)
class SymbolSet:
    """Symbols used by the text renderers."""
    class_node: str
    instance_node: str
    link: str
    event: str
    selected: str
    axis: str
    tick: str
    tree_branch: str
    tree_end: str
    check_pass: str
    check_fail: str


UNICODE = SymbolSet(
    class_node='◎',
    instance_node='▢',
    link='→',
    event='●',
    selected='◆',
    axis='─',
    tick='┼',
    tree_branch='├─',
    tree_end='└─',
    check_pass='✓',
    check_fail='✗',
)

ASCII = SymbolSet(
    class_node='(C)',
    instance_node='[I]',
    link='->',
    event='o',
    selected='*',
    axis='-',
    tick='+',
    tree_branch='|-',
    tree_end='`-',
    check_pass='[OK]',
    check_fail='[X]',
)


def supports_unicode() -> bool:
    """
    Guess whether stdout can show Unicode symbols.

    TURTLESCOPE_ASCII_ONLY / TURTLESCOPE_UNICODE force the answer;
    otherwise the stream encoding decides, then the locale. Unknown
    means ASCII.
    """
    if os.environ.get('TURTLESCOPE_ASCII_ONLY', '').lower() in _TRUTHY:
        return False
    if os.environ.get('TURTLESCOPE_UNICODE', '').lower() in _TRUTHY:
        return True

    encoding = getattr(sys.stdout, 'encoding', None)
    if encoding:
        try:
            return codecs.lookup(encoding).name.startswith('utf')
        except LookupError:
            return False

    locale = (os.environ.get('LC_ALL') or os.environ.get('LANG') or '').lower()
    return 'utf-8' in locale or 'utf8' in locale


def get_symbols(preference: Optional[str] = None) -> SymbolSet:
    """
    Get appropriate symbol set based on preference or auto-detection.

    Args:
        preference: "unicode", "ascii", or "auto" (None = auto)
    """
    if preference == 'unicode':
        return UNICODE
    if preference == 'ascii':
        return ASCII
    return UNICODE if supports_unicode() else ASCII
