from .digest import ContentDigester
from .errors import (
    ConfigurationError,
    DigestError,
    RootNotFoundError,
    ScanError,
    TreeChangedError,
)
from .index import build_candidate_map
from .models import DuplicateGroup, FileEntry, FileKind, ScanIssue, ScanPreferences, ScanResult
from .observer import NullObserver, ScanObserver
from .reconstruct import reconstruct_groups
from .session import ScanSession, find_duplicates, validate_roots
from .walker import PathWalker

__all__ = [
    "ConfigurationError",
    "ContentDigester",
    "DigestError",
    "DuplicateGroup",
    "FileEntry",
    "FileKind",
    "NullObserver",
    "PathWalker",
    "RootNotFoundError",
    "ScanError",
    "ScanIssue",
    "ScanObserver",
    "ScanPreferences",
    "ScanResult",
    "ScanSession",
    "TreeChangedError",
    "build_candidate_map",
    "find_duplicates",
    "reconstruct_groups",
    "validate_roots",
]
