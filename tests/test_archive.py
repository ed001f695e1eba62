"""Tests for plinth.archive."""

from __future__ import annotations

import os
import stat
import zipfile
from pathlib import Path

import pytest

from plinth.archive import ZIP_EPOCH, collect, create_archive


def _tree(root: Path) -> Path:
    (root / "modules").mkdir(parents=True)
    (root / "common").mkdir()
    (root / "view-1.3.xsd").write_text("<view/>")
    (root / "modules" / "model-1.3.xsd").write_text("<model/>")
    return root


class TestCollect:
    def test_sorted_with_directories(self, tmp_path):
        root = _tree(tmp_path / "schema")
        names = [arc for _, arc in collect(root)]
        assert names == ["common/", "modules/", "modules/model-1.3.xsd", "view-1.3.xsd"]

    def test_exclude(self, tmp_path):
        root = _tree(tmp_path / "schema")
        names = [arc for _, arc in collect(root, exclude={root / "view-1.3.xsd"})]
        assert "view-1.3.xsd" not in names


class TestCreateArchive:
    def test_contains_tree(self, tmp_path):
        root = _tree(tmp_path / "schema")
        dest = create_archive(root, tmp_path / "out" / "schema.zip")
        with zipfile.ZipFile(dest) as zf:
            assert zf.namelist() == [
                "common/",
                "modules/",
                "modules/model-1.3.xsd",
                "view-1.3.xsd",
            ]
            assert zf.read("modules/model-1.3.xsd") == b"<model/>"

    def test_creates_parent_directory(self, tmp_path):
        root = _tree(tmp_path / "schema")
        dest = tmp_path / "deep" / "nested" / "schema.zip"
        create_archive(root, dest)
        assert dest.is_file()

    def test_permission_bits(self, tmp_path):
        root = _tree(tmp_path / "schema")
        (root / "view-1.3.xsd").chmod(0o600)
        dest = create_archive(root, tmp_path / "schema.zip")
        with zipfile.ZipFile(dest) as zf:
            for info in zf.infolist():
                mode = info.external_attr >> 16
                if info.is_dir():
                    assert stat.S_ISDIR(mode)
                    assert stat.S_IMODE(mode) == 0o755
                else:
                    assert stat.S_ISREG(mode)
                    assert stat.S_IMODE(mode) == 0o644

    def test_custom_modes(self, tmp_path):
        root = _tree(tmp_path / "schema")
        dest = create_archive(root, tmp_path / "schema.zip", dir_mode=0o700, file_mode=0o600)
        with zipfile.ZipFile(dest) as zf:
            info = zf.getinfo("view-1.3.xsd")
            assert stat.S_IMODE(info.external_attr >> 16) == 0o600

    def test_fixed_timestamps(self, tmp_path):
        root = _tree(tmp_path / "schema")
        dest = create_archive(root, tmp_path / "schema.zip")
        with zipfile.ZipFile(dest) as zf:
            assert {info.date_time for info in zf.infolist()} == {ZIP_EPOCH}

    def test_byte_identical_across_runs(self, tmp_path):
        root = _tree(tmp_path / "schema")
        first = create_archive(root, tmp_path / "a.zip").read_bytes()
        # touch every file so only mtimes differ
        for path in root.rglob("*"):
            os.utime(path, (1_900_000_000, 1_900_000_000))
        second = create_archive(root, tmp_path / "b.zip").read_bytes()
        assert first == second

    def test_dest_inside_source_excluded(self, tmp_path):
        root = _tree(tmp_path / "schema")
        dest = create_archive(root, root / "schema.zip")
        with zipfile.ZipFile(dest) as zf:
            assert "schema.zip" not in zf.namelist()

    def test_missing_source_raises(self, tmp_path):
        with pytest.raises(NotADirectoryError):
            create_archive(tmp_path / "missing", tmp_path / "schema.zip")

    def test_failure_leaves_no_archive(self, tmp_path, monkeypatch):
        root = _tree(tmp_path / "schema")
        dest = tmp_path / "schema.zip"

        def _boom(self):
            raise OSError("read failed")

        monkeypatch.setattr(Path, "read_bytes", _boom)
        with pytest.raises(OSError, match="read failed"):
            create_archive(root, dest)
        assert not dest.exists()
        assert not (tmp_path / "schema.zip.part").exists()
