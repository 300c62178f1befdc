"""First pass: record which digests recur and where their later copies live."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Set

from .digest import ContentDigester
from .errors import DigestError
from .models import CandidateMap, ScanIssue
from .observer import NullObserver, ScanObserver
from .walker import PathWalker

logger = logging.getLogger(__name__)

PASS_NUMBER = 1


@dataclass
class IndexResult:
    candidates: CandidateMap = field(default_factory=dict)
    skipped: Set[str] = field(default_factory=set)
    issues: List[ScanIssue] = field(default_factory=list)
    files_scanned: int = 0
    paths: Optional[List[str]] = None


def build_candidate_map(
    roots: Sequence[str],
    walker: PathWalker,
    digester: ContentDigester,
    *,
    observer: ScanObserver | None = None,
    cache_paths: bool = False,
) -> IndexResult:
    """
    Walk ``roots`` in order and map each repeated digest to its non-first paths.

    The first occurrence of a digest only goes into the ``seen`` set, so
    memory for paths grows with the number of duplicates rather than the
    number of files. Files that cannot be read are listed in ``skipped``
    and reported as ``READ_ERROR`` issues.

    With ``cache_paths`` every enumerated path (skipped ones included) is
    kept in ``paths`` so the second pass can avoid walking again.
    """
    observer = observer or NullObserver()
    result = IndexResult(paths=[] if cache_paths else None)
    seen: Set[bytes] = set()

    def on_root(index: int, total: int, root: str) -> None:
        observer.root_started(PASS_NUMBER, index, total, root)

    observer.pass_started(PASS_NUMBER, roots)
    for path in walker.iter_files(roots, on_root):
        if result.paths is not None:
            result.paths.append(path)
        try:
            digest = digester.digest(path)
        except DigestError as exc:
            issue = ScanIssue(path=path, code=exc.code, message=str(exc))
            logger.warning("Skipping unreadable file: %s", exc)
            result.skipped.add(path)
            result.issues.append(issue)
            observer.issue_recorded(issue)
            continue

        result.files_scanned += 1
        observer.file_digested(PASS_NUMBER, path)
        if digest in seen:
            result.candidates.setdefault(digest, []).append(path)
        else:
            seen.add(digest)
    observer.pass_finished(PASS_NUMBER)

    logger.info(
        "Pass 1 complete: %d files digested, %d repeated digests, %d skipped",
        result.files_scanned,
        len(result.candidates),
        len(result.skipped),
    )
    return result
