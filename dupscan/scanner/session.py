from __future__ import annotations

import logging
import os
from typing import List, Sequence, Set

from .digest import ContentDigester
from .errors import ConfigurationError, RootNotFoundError, TreeChangedError
from .index import build_candidate_map
from .models import ScanIssue, ScanPreferences, ScanResult
from .observer import NullObserver, ScanObserver
from .reconstruct import reconstruct_groups
from .walker import PathWalker

logger = logging.getLogger(__name__)


def validate_roots(roots: Sequence[str]) -> List[str]:
    """Reject an empty root list or missing roots before any walking starts."""
    cleaned = [str(root) for root in roots]
    if not cleaned:
        raise ConfigurationError("No root directories supplied.", "NO_ROOTS")
    for root in cleaned:
        if not root.strip():
            raise ConfigurationError("Root list contains an empty path.", "MALFORMED_ROOTS")
        if not os.path.isdir(root):
            raise RootNotFoundError(root)

    # A file under two roots would be reported as its own duplicate.
    resolved = [os.path.realpath(root) for root in cleaned]
    for i, outer in enumerate(resolved):
        for j, inner in enumerate(resolved):
            if i != j and (inner == outer or inner.startswith(outer.rstrip(os.sep) + os.sep)):
                raise ConfigurationError(
                    f"Roots overlap: {cleaned[j]} is inside {cleaned[i]}",
                    "OVERLAPPING_ROOTS",
                )
    return cleaned


class ScanSession:
    """One duplicate scan over a fixed list of roots.

    Holds the state of a single invocation: the walk errors seen so far and
    the issues collected across both passes. Nothing is kept between runs;
    create a new session for each scan.
    """

    def __init__(
        self,
        roots: Sequence[str],
        preferences: ScanPreferences | None = None,
        observer: ScanObserver | None = None,
    ) -> None:
        self.roots = validate_roots(roots)
        self.preferences = preferences or ScanPreferences()
        self.observer = observer or NullObserver()
        self.digester = ContentDigester(self.preferences.chunk_size)
        self.issues: List[ScanIssue] = []
        self._failed_dirs: Set[str] = set()

    def run(self) -> ScanResult:
        prefs = self.preferences
        logger.info("Scanning %d root(s): %s", len(self.roots), ", ".join(self.roots))

        walker = PathWalker(prefs.excluded_dirs, on_error=self._first_pass_walk_error)
        indexed = build_candidate_map(
            self.roots,
            walker,
            self.digester,
            observer=self.observer,
            cache_paths=prefs.cache_paths,
        )
        self.issues.extend(indexed.issues)
        repeated = len(indexed.candidates)

        # Directories pass 1 could not list stay unread, like its skipped files.
        walker = PathWalker(
            prefs.excluded_dirs,
            on_error=self._second_pass_walk_error,
            pruned=self._failed_dirs,
        )
        rebuilt = reconstruct_groups(
            self.roots,
            indexed.candidates,
            walker,
            self.digester,
            skipped=indexed.skipped,
            paths=indexed.paths,
            observer=self.observer,
            strict=prefs.strict,
        )
        self.issues.extend(rebuilt.issues)

        result = ScanResult(groups=rebuilt.groups, issues=list(self.issues))
        result.summary = {
            "roots": len(self.roots),
            "files_scanned": indexed.files_scanned,
            "files_skipped": len(indexed.skipped),
            "walk_errors": len(self._failed_dirs),
            "repeated_digests": repeated,
            "duplicate_groups": len(result.groups),
            "duplicate_files": result.duplicate_files,
            "pass2_files_scanned": rebuilt.files_scanned,
            "issues_count": len(result.issues),
        }
        return result

    def _first_pass_walk_error(self, directory: str, exc: OSError) -> None:
        self._failed_dirs.add(directory)
        self._record(ScanIssue(path=directory, code="WALK_ERROR", message=str(exc)))

    def _second_pass_walk_error(self, directory: str, exc: OSError) -> None:
        message = f"Directory became unreadable between passes: {exc}"
        if self.preferences.strict:
            raise TreeChangedError(message, directory)
        self._failed_dirs.add(directory)
        self._record(ScanIssue(path=directory, code="TREE_CHANGED", message=message))

    def _record(self, issue: ScanIssue) -> None:
        self.issues.append(issue)
        self.observer.issue_recorded(issue)


def find_duplicates(
    roots: Sequence[str],
    preferences: ScanPreferences | None = None,
    observer: ScanObserver | None = None,
) -> ScanResult:
    return ScanSession(roots, preferences, observer).run()
