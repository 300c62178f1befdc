from __future__ import annotations


class ScanError(Exception):
    def __init__(self, message: str, code: str) -> None:
        super().__init__(message)
        self.code = code


class ConfigurationError(ScanError):
    pass


class RootNotFoundError(ScanError):
    def __init__(self, root: str) -> None:
        super().__init__(f"Root directory not found: {root}", "ROOT_MISSING")
        self.root = root


class DigestError(ScanError):
    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"Cannot read {path}: {reason}", "READ_ERROR")
        self.path = path


class TreeChangedError(ScanError):
    def __init__(self, message: str, path: str | None = None) -> None:
        super().__init__(message, "TREE_CHANGED")
        self.path = path
