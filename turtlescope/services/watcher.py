"""
DocumentWatcher -- Feed a Turtle file on disk into an editor buffer

Polls the file and fingerprints its text with xxhash; only text that
differs from the last submitted fingerprint becomes an edit. The
editor's own re-serialization never reaches the file, so the watcher
compares against what it read, not against the buffer.
"""

import logging
import threading
import time
from pathlib import Path
from typing import Optional

import xxhash

from .editor import TurtleEditor

logger = logging.getLogger(__name__)


def fingerprint(text: str) -> str:
    return xxhash.xxh64(text.encode("utf-8")).hexdigest()


class DocumentWatcher:
    """
    Usage:
        watcher = DocumentWatcher(path, editor)
        watcher.run(interval=1.0)        # until interrupted
    """

    def __init__(self, path: Path, editor: TurtleEditor, initial_text: Optional[str] = None):
        """
        Args:
            path: File to watch
            editor: Buffer that receives changed text
            initial_text: Text the store was built from (not re-submitted)
        """
        self.path = Path(path)
        self.editor = editor
        self.polls = 0
        self._fingerprint = fingerprint(initial_text) if initial_text is not None else None

    def poll(self) -> bool:
        """
        Check the file once.

        Returns:
            True if changed text was submitted to the editor
        """
        self.polls += 1
        try:
            text = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            logger.warning("Watched file %s is missing", self.path)
            return False

        digest = fingerprint(text)
        if digest == self._fingerprint:
            return False

        self._fingerprint = digest
        logger.info("Change detected in %s (%s)", self.path, digest)
        self.editor.edit(text)
        self.editor.flush()
        return True

    def run(self, interval: float = 1.0, max_polls: Optional[int] = None,
            stop: Optional[threading.Event] = None) -> int:
        """
        Poll until `stop` is set or `max_polls` polls were made.

        Returns:
            Number of polls that submitted changes
        """
        changes = 0
        while True:
            if stop is not None and stop.is_set():
                break
            if self.poll():
                changes += 1
            if max_polls is not None and self.polls >= max_polls:
                break
            if stop is not None:
                stop.wait(interval)
            else:
                time.sleep(interval)
        return changes
