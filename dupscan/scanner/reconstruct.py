"""Second pass: find the first occurrence of every repeated digest."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import AbstractSet, Iterator, List, Optional, Sequence

from .digest import ContentDigester
from .errors import DigestError, TreeChangedError
from .models import CandidateMap, DuplicateGroup, ScanIssue
from .observer import NullObserver, ScanObserver
from .walker import PathWalker

logger = logging.getLogger(__name__)

PASS_NUMBER = 2


@dataclass
class ReconstructResult:
    groups: List[DuplicateGroup] = field(default_factory=list)
    issues: List[ScanIssue] = field(default_factory=list)
    files_scanned: int = 0


def reconstruct_groups(
    roots: Sequence[str],
    candidates: CandidateMap,
    walker: PathWalker,
    digester: ContentDigester,
    *,
    skipped: AbstractSet[str] = frozenset(),
    paths: Optional[Sequence[str]] = None,
    observer: ScanObserver | None = None,
    strict: bool = False,
) -> ReconstructResult:
    """
    Re-walk ``roots`` and turn ``candidates`` into complete duplicate groups.

    The walk must visit files in the same order as the first pass. The
    first file whose digest is still a key in ``candidates`` is then the
    original that pass 1 left out, so the group is that path followed by
    the recorded copies. ``candidates`` is consumed: each key is removed
    as its group is emitted, and the walk stops once it is empty.

    If the tree changed between passes, the change is reported as a
    ``TREE_CHANGED`` issue and the affected groups are best-effort, or a
    ``TreeChangedError`` is raised when ``strict`` is set. A file added
    ahead of an original with the same content cannot be told apart from
    the original and is reported as such.
    """
    observer = observer or NullObserver()
    result = ReconstructResult()

    def flag(path: str, message: str) -> None:
        if strict:
            raise TreeChangedError(message, path)
        issue = ScanIssue(path=path, code="TREE_CHANGED", message=message)
        logger.warning("%s", message)
        result.issues.append(issue)
        observer.issue_recorded(issue)

    def emit(digest: bytes, group_paths: List[str]) -> None:
        group = DuplicateGroup(digest=digest, paths=group_paths)
        result.groups.append(group)
        observer.group_found(group.count)

    observer.pass_started(PASS_NUMBER, roots, total=len(candidates))
    if candidates:
        for path in _iter_paths(roots, walker, paths, observer):
            if path in skipped:
                continue
            try:
                digest = digester.digest(path)
            except DigestError as exc:
                flag(path, f"File became unreadable between passes: {exc}")
                continue
            result.files_scanned += 1
            observer.file_digested(PASS_NUMBER, path)

            copies = candidates.get(digest)
            if copies is None:
                continue
            del candidates[digest]
            if path in copies:
                # Reached a recorded copy before any original: the original is gone.
                flag(path, f"Original of {path} disappeared between passes")
                if len(copies) >= 2:
                    emit(digest, copies)
            else:
                emit(digest, [path, *copies])

            if not candidates:
                break

    for digest, copies in list(candidates.items()):
        flag(copies[0], f"No original found for {copies[0]}; the tree changed between passes")
        del candidates[digest]
        if len(copies) >= 2:
            emit(digest, copies)
    observer.pass_finished(PASS_NUMBER)

    logger.info(
        "Pass 2 complete: %d groups from %d files",
        len(result.groups),
        result.files_scanned,
    )
    return result


def _iter_paths(
    roots: Sequence[str],
    walker: PathWalker,
    paths: Optional[Sequence[str]],
    observer: ScanObserver,
) -> Iterator[str]:
    def on_root(index: int, total: int, root: str) -> None:
        observer.root_started(PASS_NUMBER, index, total, root)

    if paths is None:
        yield from walker.iter_files(roots, on_root)
        return

    # Cached paths keep root order, so a root starts at its first path.
    prefixes = [os.path.join(root, "") for root in roots]
    current = 0
    for path in paths:
        if not (current and path.startswith(prefixes[current - 1])):
            for index in range(current, len(roots)):
                if path.startswith(prefixes[index]):
                    current = index + 1
                    on_root(current, len(roots), roots[index])
                    break
        yield path
