from __future__ import annotations

import logging
import os
from typing import Callable, Iterable, Iterator, List, Optional, Sequence

from .models import FileEntry, FileKind

logger = logging.getLogger(__name__)

ErrorCallback = Callable[[str, OSError], None]
RootCallback = Callable[[int, int, str], None]


def classify(entry: os.DirEntry) -> FileKind:
    """Classify a directory entry without following symlinks."""
    try:
        if entry.is_symlink():
            return FileKind.SYMLINK
        if entry.is_dir(follow_symlinks=False):
            return FileKind.DIRECTORY
        if entry.is_file(follow_symlinks=False):
            return FileKind.FILE
    except OSError:
        pass
    return FileKind.OTHER


class PathWalker:
    """
    Depth-first walk yielding regular files, entries sorted by name in
    every directory.

    The order only depends on the names in the tree, so walking an
    unchanged tree twice gives the same sequence. Two-pass duplicate
    reconstruction relies on this.

    ``pruned`` holds full directory paths that are skipped without being
    listed, such as the directories an earlier walk could not read.
    """

    def __init__(
        self,
        excluded_dirs: Iterable[str] = (),
        on_error: Optional[ErrorCallback] = None,
        pruned: Iterable[str] = (),
    ) -> None:
        self.excluded_dirs = frozenset(excluded_dirs)
        self.on_error = on_error
        self.pruned = frozenset(pruned)

    def walk(self, root: str) -> Iterator[FileEntry]:
        if root in self.pruned:
            logger.debug("Skipping pruned root %s", root)
            return
        stack: List[Iterator[os.DirEntry]] = []
        entries = self._list(root)
        if entries is not None:
            stack.append(iter(entries))

        while stack:
            entry = next(stack[-1], None)
            if entry is None:
                stack.pop()
                continue
            kind = classify(entry)
            if kind is FileKind.FILE:
                yield FileEntry(entry.path, kind)
            elif kind is FileKind.DIRECTORY:
                if entry.name in self.excluded_dirs:
                    logger.debug("Skipping excluded directory %s", entry.path)
                    continue
                if entry.path in self.pruned:
                    logger.debug("Skipping pruned directory %s", entry.path)
                    continue
                children = self._list(entry.path)
                if children is not None:
                    stack.append(iter(children))
            # symlinks and special files are never surfaced

    def iter_files(
        self,
        roots: Sequence[str],
        on_root: Optional[RootCallback] = None,
    ) -> Iterator[str]:
        """Chain the walks of ``roots`` in order, calling ``on_root(index, total, root)`` first."""
        for index, root in enumerate(roots, 1):
            if on_root is not None:
                on_root(index, len(roots), root)
            for entry in self.walk(root):
                yield entry.path

    def _list(self, directory: str) -> Optional[List[os.DirEntry]]:
        try:
            with os.scandir(directory) as it:
                return sorted(it, key=lambda e: e.name)
        except OSError as exc:
            logger.warning("Cannot list directory %s: %s", directory, exc)
            if self.on_error is not None:
                self.on_error(directory, exc)
            return None
