"""源码快照下载/解压测试"""

from __future__ import annotations

import io
import tarfile
from pathlib import Path

import pytest

from methaur.build import snapshot as snapmod
from methaur.build.snapshot import SnapshotFetcher
from methaur.core.exceptions import FetchError, RecipeError


def _make_tarball(path: Path, members: dict[str, bytes]) -> None:
    with tarfile.open(path, "w:gz") as tf:
        for name, data in members.items():
            info = tarfile.TarInfo(name)
            info.size = len(data)
            tf.addfile(info, io.BytesIO(data))


def test_reset_dir(tmp_path: Path) -> None:
    work = tmp_path / "foo"
    (work / "old").mkdir(parents=True)
    SnapshotFetcher.reset_dir(work)
    assert work.is_dir() and list(work.iterdir()) == []


def test_download_url(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    seen = {}

    def fake_download(url, dest, *, user_agent="", timeout=60):
        seen.update(url=url, dest=dest, ua=user_agent)
        Path(dest).write_bytes(b"x")

    monkeypatch.setattr(snapmod, "download_file", fake_download)
    f = SnapshotFetcher("https://aur.archlinux.org/cgit/aur.git/snapshot", user_agent="methaur/t")
    dest = f.download("foo", tmp_path)
    assert seen["url"] == "https://aur.archlinux.org/cgit/aur.git/snapshot/foo.tar.gz"
    assert seen["ua"] == "methaur/t"
    assert dest == tmp_path / "foo.tar.gz"


def test_download_failure(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    def boom(url, dest, **kw):
        raise ConnectionError("下载失败: 404")

    monkeypatch.setattr(snapmod, "download_file", boom)
    with pytest.raises(FetchError, match="404"):
        SnapshotFetcher("https://x/").download("foo", tmp_path)


def test_extract(tmp_path: Path) -> None:
    tb = tmp_path / "foo.tar.gz"
    _make_tarball(tb, {"foo/PKGBUILD": b"pkgname=foo\n", "foo/.SRCINFO": b""})
    recipe_dir = SnapshotFetcher.extract(tb, tmp_path, "foo")
    assert recipe_dir == tmp_path / "foo"
    assert (recipe_dir / "PKGBUILD").read_text(encoding="utf-8") == "pkgname=foo\n"


def test_extract_missing_dir(tmp_path: Path) -> None:
    tb = tmp_path / "foo.tar.gz"
    _make_tarball(tb, {"other/PKGBUILD": b""})
    with pytest.raises(RecipeError, match="未找到目录"):
        SnapshotFetcher.extract(tb, tmp_path, "foo")


def test_extract_corrupt(tmp_path: Path) -> None:
    tb = tmp_path / "foo.tar.gz"
    tb.write_bytes(b"not a tarball")
    with pytest.raises(FetchError, match="解压失败"):
        SnapshotFetcher.extract(tb, tmp_path, "foo")


def test_extract_rejects_escape(tmp_path: Path) -> None:
    tb = tmp_path / "evil.tar.gz"
    _make_tarball(tb, {"../escape": b"x"})
    with pytest.raises(FetchError):
        SnapshotFetcher.extract(tb, tmp_path / "work", "foo")
    assert not (tmp_path / "escape").exists()
