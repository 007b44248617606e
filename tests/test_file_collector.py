"""Tests for ``FilesystemCollector`` against ``tmp_path`` trees."""

from __future__ import annotations

import os
import sys
from pathlib import Path

import pytest

from upctl.exceptions import FileDiscoveryError, PathNotFoundError
from upctl.infra.file_collector import FilesystemCollector


def _names(paths: tuple[Path, ...], root: Path) -> list[str]:
    return [p.relative_to(root).as_posix() for p in paths]


class TestCollect:
    def test_single_file(self, tree: Path) -> None:
        files = FilesystemCollector().collect([tree / "a.txt"])
        assert files == ((tree / "a.txt").absolute(),)

    def test_directory_expands_recursively_in_order(self, tree: Path) -> None:
        files = FilesystemCollector().collect([tree])
        assert _names(files, tree) == ["a.txt", "sub/b.bin", "sub/deeper/c.log"]

    def test_count_matches_reachable_files(self, tree: Path, tmp_path: Path) -> None:
        extra = tmp_path / "extra.txt"
        extra.write_text("x")
        files = FilesystemCollector().collect([tree / "sub", extra])
        assert len(files) == 3

    def test_paths_are_absolute(self, tree: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.chdir(tree)
        files = FilesystemCollector().collect(["sub"])
        assert all(p.is_absolute() for p in files)

    def test_no_deduplication(self, tree: Path) -> None:
        files = FilesystemCollector().collect([tree / "a.txt", tree, tree / "a.txt"])
        assert len(files) == 5
        assert files.count((tree / "a.txt").absolute()) == 3

    def test_empty_directory_yields_nothing(self, tmp_path: Path) -> None:
        (tmp_path / "empty").mkdir()
        assert FilesystemCollector().collect([tmp_path / "empty"]) == ()

    def test_accepts_strings(self, tree: Path) -> None:
        assert len(FilesystemCollector().collect([str(tree)])) == 3


class TestFailures:
    @pytest.mark.parametrize("position", [0, 1, 2])
    def test_missing_path_fails_anywhere(self, tree: Path, position: int) -> None:
        args: list[str | Path] = [tree / "a.txt", tree / "sub"]
        args.insert(position, tree / "nope.txt")
        with pytest.raises(PathNotFoundError, match="nope.txt"):
            FilesystemCollector().collect(args)

    @pytest.mark.skipif(
        sys.platform == "win32" or (hasattr(os, "geteuid") and os.geteuid() == 0),
        reason="permission bits are not enforced",
    )
    def test_unreadable_directory_aborts(self, tree: Path) -> None:
        locked = tree / "sub" / "deeper"
        locked.chmod(0)
        try:
            with pytest.raises(FileDiscoveryError):
                FilesystemCollector().collect([tree])
        finally:
            locked.chmod(0o755)

    def test_walk_error_is_chained(self, tree: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        original = PermissionError(13, "Permission denied", str(tree / "sub"))

        def broken_walk(top: object, onerror: object = None, **_kw: object) -> object:
            assert callable(onerror)
            onerror(original)
            return iter(())

        monkeypatch.setattr("upctl.infra.file_collector.os.walk", broken_walk)
        with pytest.raises(FileDiscoveryError, match="Permission denied") as exc_info:
            FilesystemCollector().collect([tree])
        assert exc_info.value.__cause__ is original

    @pytest.mark.skipif(sys.platform == "win32", reason="symlinks need privileges")
    def test_symlinked_directory_aborts(self, tree: Path, tmp_path: Path) -> None:
        outside = tmp_path / "outside"
        outside.mkdir()
        (outside / "secret.txt").write_text("s")
        (tree / "sub" / "link").symlink_to(outside, target_is_directory=True)

        with pytest.raises(FileDiscoveryError, match="link: symlinked directories") as exc_info:
            FilesystemCollector().collect([tree])
        assert exc_info.value.hint

    @pytest.mark.skipif(sys.platform == "win32", reason="symlinks need privileges")
    def test_symlinked_directory_as_argument_is_walked(self, tmp_path: Path) -> None:
        outside = tmp_path / "outside"
        outside.mkdir()
        (outside / "x.txt").write_text("x")
        (tmp_path / "link").symlink_to(outside, target_is_directory=True)

        files = FilesystemCollector().collect([tmp_path / "link"])
        assert [p.name for p in files] == ["x.txt"]

    @pytest.mark.skipif(sys.platform == "win32", reason="symlinks need privileges")
    def test_symlinked_file_in_tree_is_collected(self, tree: Path) -> None:
        (tree / "z.lnk").symlink_to(tree / "a.txt")
        files = FilesystemCollector().collect([tree])
        assert (tree / "z.lnk").absolute() in files
