"""Progress callbacks the scanner notifies while it works.

The scanner never depends on an observer being attached; ``NullObserver``
is used when none is supplied.
"""

from __future__ import annotations

from typing import Sequence

from .models import ScanIssue


class ScanObserver:
    """Base observer; every hook is a no-op so subclasses override only what they need."""

    def pass_started(self, pass_number: int, roots: Sequence[str], total: int | None = None) -> None:
        pass

    def root_started(self, pass_number: int, index: int, total: int, root: str) -> None:
        pass

    def file_digested(self, pass_number: int, path: str) -> None:
        pass

    def group_found(self, size: int) -> None:
        pass

    def issue_recorded(self, issue: ScanIssue) -> None:
        pass

    def pass_finished(self, pass_number: int) -> None:
        pass


class NullObserver(ScanObserver):
    pass


class RecordingObserver(ScanObserver):
    """Collects every event as a tuple; handy for tests and debugging."""

    def __init__(self) -> None:
        self.events: list[tuple] = []

    def pass_started(self, pass_number, roots, total=None):
        self.events.append(("pass_started", pass_number, tuple(roots), total))

    def root_started(self, pass_number, index, total, root):
        self.events.append(("root_started", pass_number, index, total, root))

    def file_digested(self, pass_number, path):
        self.events.append(("file_digested", pass_number, path))

    def group_found(self, size):
        self.events.append(("group_found", size))

    def issue_recorded(self, issue):
        self.events.append(("issue_recorded", issue.code, issue.path))

    def pass_finished(self, pass_number):
        self.events.append(("pass_finished", pass_number))
