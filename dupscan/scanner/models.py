from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
import sys
from typing import Dict, List, Tuple

_DATACLASS_KWARGS = {"slots": True} if sys.version_info >= (3, 10) else {}

# Digest bytes -> paths seen after the first occurrence of that digest.
CandidateMap = Dict[bytes, List[str]]

DEFAULT_CHUNK_SIZE = 64 * 1024


class FileKind(str, Enum):
    FILE = "file"
    DIRECTORY = "directory"
    SYMLINK = "symlink"
    OTHER = "other"


@dataclass(frozen=True, **_DATACLASS_KWARGS)
class FileEntry:
    path: str
    kind: FileKind = FileKind.FILE


@dataclass(**_DATACLASS_KWARGS)
class ScanIssue:
    path: str
    code: str
    message: str


@dataclass(**_DATACLASS_KWARGS)
class DuplicateGroup:
    """Paths sharing one digest; the first path is the first one encountered."""

    digest: bytes
    paths: List[str] = field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.paths)

    @property
    def original(self) -> str:
        return self.paths[0]

    @property
    def copies(self) -> List[str]:
        return self.paths[1:]

    @property
    def hex_digest(self) -> str:
        return self.digest.hex()


@dataclass(**_DATACLASS_KWARGS)
class ScanResult:
    groups: List[DuplicateGroup] = field(default_factory=list)
    issues: List[ScanIssue] = field(default_factory=list)
    summary: Dict[str, int] = field(default_factory=dict)

    @property
    def duplicate_files(self) -> int:
        return sum(group.count for group in self.groups)


@dataclass(**_DATACLASS_KWARGS)
class ScanPreferences:
    """
    Options for a single scan.

    Symlinks are never followed; ``excluded_dirs`` holds bare directory
    names pruned wherever they appear under a root.
    """

    excluded_dirs: Tuple[str, ...] = ()
    cache_paths: bool = False
    strict: bool = False
    chunk_size: int = DEFAULT_CHUNK_SIZE

    @property
    def follow_symlinks(self) -> bool:
        return False
