"""File watching for extension development mode."""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Callable, Iterable

logger = logging.getLogger(__name__)

IGNORED_DIRS = frozenset({"node_modules"})


class ExtensionWatcher:
    """Poll an extension directory and report changed source files.

    Modified and newly created files with a watched suffix are reported;
    anything under node_modules or a hidden path is ignored. `watch()` blocks
    until `stop()` is called.

    Example:
        >>> watcher = ExtensionWatcher(Path("my-ext"), on_change=print)
        >>> watcher.watch()  # Ctrl+C -> caller invokes watcher.stop()
    """

    def __init__(
        self,
        root: Path,
        on_change: Callable[[str], None],
        suffixes: Iterable[str] = (".js", ".ts"),
        interval: float = 0.5,
    ) -> None:
        self.root = Path(root)
        self.on_change = on_change
        self.suffixes = tuple(suffixes)
        self.interval = interval
        self._stop = threading.Event()
        self._snapshot: dict[str, float] = {}

    def _ignored(self, rel_path: Path) -> bool:
        return any(
            part in IGNORED_DIRS or part.startswith(".") for part in rel_path.parts
        )

    def snapshot(self) -> dict[str, float]:
        """Map watched files (relative paths) to their modification times."""
        files: dict[str, float] = {}
        for path in self.root.rglob("*"):
            rel_path = path.relative_to(self.root)
            if self._ignored(rel_path):
                continue
            if not path.is_file() or path.suffix not in self.suffixes:
                continue
            try:
                files[rel_path.as_posix()] = path.stat().st_mtime
            except OSError:
                # Removed between listing and stat
                continue
        return files

    def start(self) -> None:
        """Take the baseline snapshot."""
        self._stop.clear()
        self._snapshot = self.snapshot()

    def poll(self) -> list[str]:
        """Compare against the previous snapshot and report changes."""
        current = self.snapshot()
        changed = sorted(
            path
            for path, mtime in current.items()
            if self._snapshot.get(path) != mtime
        )
        self._snapshot = current

        for path in changed:
            logger.debug("Changed: %s", path)
            self.on_change(path)
        return changed

    def watch(self) -> None:
        """Poll until stop() is called."""
        self.start()
        while not self._stop.wait(self.interval):
            self.poll()

    def stop(self) -> None:
        """Release the watcher; watch() returns after the current poll."""
        self._stop.set()

    @property
    def stopped(self) -> bool:
        return self._stop.is_set()
