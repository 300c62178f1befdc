"""Tests for deterministic directory traversal."""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from dupscan.scanner import walker as walker_module
from dupscan.scanner.models import FileKind
from dupscan.scanner.walker import PathWalker


def _relative(paths, root: Path):
    return [str(Path(p).relative_to(root)) for p in paths]


class TestPathWalker:
    """Tests for PathWalker ordering and filtering."""

    @pytest.fixture
    def tree(self, make_tree) -> Path:
        return make_tree(
            "root",
            {
                "b.txt": "b",
                "a.txt": "a",
                "sub/z.txt": "z",
                "sub/deeper/m.txt": "m",
                "c/only.txt": "c",
            },
        )

    def test_walk_is_depth_first_and_sorted(self, tree: Path):
        """Entries are visited by name, descending into directories in place."""
        paths = [entry.path for entry in PathWalker().walk(str(tree))]

        assert _relative(paths, tree) == [
            "a.txt",
            "b.txt",
            os.path.join("c", "only.txt"),
            os.path.join("sub", "deeper", "m.txt"),
            os.path.join("sub", "z.txt"),
        ]

    def test_walk_yields_regular_files_only(self, tree: Path):
        entries = list(PathWalker().walk(str(tree)))

        assert entries
        assert all(entry.kind is FileKind.FILE for entry in entries)

    def test_walk_is_repeatable(self, tree: Path):
        """Two walks over an unchanged tree produce the same sequence."""
        walker = PathWalker()
        first = [entry.path for entry in walker.walk(str(tree))]
        second = [entry.path for entry in PathWalker().walk(str(tree))]

        assert first == second

    def test_iter_files_keeps_root_order(self, make_tree):
        root_b = make_tree("b_root", {"x.txt": "x"})
        root_a = make_tree("a_root", {"y.txt": "y"})

        paths = list(PathWalker().iter_files([str(root_b), str(root_a)]))

        assert paths == [str(root_b / "x.txt"), str(root_a / "y.txt")]

    def test_iter_files_announces_each_root(self, make_tree):
        root_a = make_tree("a_root", {"x.txt": "x"})
        root_b = make_tree("b_root", {})
        seen = []

        list(PathWalker().iter_files([str(root_a), str(root_b)], lambda *args: seen.append(args)))

        assert seen == [(1, 2, str(root_a)), (2, 2, str(root_b))]

    def test_pruned_paths_are_not_listed(self, tree: Path, monkeypatch: pytest.MonkeyPatch):
        real_scandir = os.scandir
        listed = []

        def fake_scandir(path):
            listed.append(path)
            return real_scandir(path)

        monkeypatch.setattr(walker_module.os, "scandir", fake_scandir)
        walker = PathWalker(pruned=[str(tree / "sub")])

        paths = _relative(walker.iter_files([str(tree)]), tree)

        assert paths == ["a.txt", "b.txt", os.path.join("c", "only.txt")]
        assert str(tree / "sub") not in listed

    def test_pruned_root_yields_nothing(self, tree: Path):
        assert list(PathWalker(pruned=[str(tree)]).walk(str(tree))) == []

    def test_excluded_dirs_are_pruned(self, tree: Path):
        paths = list(PathWalker(excluded_dirs=["sub"]).iter_files([str(tree)]))

        assert _relative(paths, tree) == ["a.txt", "b.txt", os.path.join("c", "only.txt")]

    def test_symlinks_are_not_followed(self, tree: Path, tmp_path: Path):
        outside = tmp_path / "outside"
        outside.mkdir()
        (outside / "secret.txt").write_text("secret")
        try:
            os.symlink(outside, tree / "linked_dir")
            os.symlink(tree / "a.txt", tree / "linked_file.txt")
        except (OSError, NotImplementedError):
            pytest.skip("symlinks not supported on this platform")

        paths = _relative(PathWalker().iter_files([str(tree)]), tree)

        assert "linked_file.txt" not in paths
        assert not any(p.startswith("linked_dir") for p in paths)

    def test_empty_root_yields_nothing(self, make_tree):
        root = make_tree("empty", {})

        assert list(PathWalker().walk(str(root))) == []


class TestPathWalkerErrors:
    """A directory that cannot be listed is reported and skipped."""

    def test_unlistable_directory_does_not_stop_siblings(
        self, make_tree, monkeypatch: pytest.MonkeyPatch
    ):
        root = make_tree(
            "root",
            {"a/one.txt": "1", "locked/two.txt": "2", "z/three.txt": "3"},
        )
        real_scandir = os.scandir

        def fake_scandir(path):
            if os.path.basename(path) == "locked":
                raise PermissionError(13, "Permission denied", path)
            return real_scandir(path)

        monkeypatch.setattr(walker_module.os, "scandir", fake_scandir)
        errors = []
        walker = PathWalker(on_error=lambda path, exc: errors.append((path, exc)))

        paths = _relative(walker.iter_files([str(root)]), root)

        assert paths == [os.path.join("a", "one.txt"), os.path.join("z", "three.txt")]
        assert len(errors) == 1
        assert errors[0][0] == str(root / "locked")
        assert isinstance(errors[0][1], PermissionError)

    def test_errors_without_callback_are_only_logged(
        self, make_tree, monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture
    ):
        root = make_tree("root", {"locked/two.txt": "2", "ok.txt": "ok"})
        real_scandir = os.scandir

        def fake_scandir(path):
            if os.path.basename(path) == "locked":
                raise PermissionError(13, "Permission denied", path)
            return real_scandir(path)

        monkeypatch.setattr(walker_module.os, "scandir", fake_scandir)

        with caplog.at_level("WARNING"):
            paths = list(PathWalker().iter_files([str(root)]))

        assert paths == [str(root / "ok.txt")]
        assert "Cannot list directory" in caplog.text
