"""
Services -- Collaborators around the core store

- editor: Debounced text buffer with suppressed programmatic updates
- watcher: File polling that feeds the editor
"""

from .editor import TurtleEditor, Debouncer
from .watcher import DocumentWatcher, fingerprint

__all__ = ['TurtleEditor', 'Debouncer', 'DocumentWatcher', 'fingerprint']
