"""net.py 单元测试：URL scheme 校验 + JSON 查询失败归一化"""

from __future__ import annotations

import io
import urllib.error
import urllib.request

import pytest

from methaur.core.exceptions import ValidationError
from methaur.utils import net
from methaur.utils.net import download_file, fetch_json, validate_url_scheme


class _Resp(io.BytesIO):
    def __init__(self, body: bytes, status: int = 200) -> None:
        super().__init__(body)
        self.status = status

    def __enter__(self):
        return self

    def __exit__(self, *exc) -> None:
        self.close()


class TestValidateUrlScheme:
    def test_https_ok(self) -> None:
        validate_url_scheme("https://aur.archlinux.org/rpc/?v=5")

    @pytest.mark.parametrize("url", ["file:///etc/passwd", "ftp://evil.com/x", "/local/path"])
    def test_rejected(self, url: str) -> None:
        with pytest.raises(ValidationError, match="不允许的 URL 协议"):
            validate_url_scheme(url)

    def test_context_in_error(self) -> None:
        with pytest.raises(ValidationError, match="snapshot download"):
            validate_url_scheme("file:///x", context="snapshot download")


class TestFetchJson:
    def test_ok(self, monkeypatch: pytest.MonkeyPatch) -> None:
        seen = {}

        def fake_urlopen(req, timeout):
            seen["ua"] = req.get_header("User-agent")
            return _Resp(b'{"type": "search", "results": []}')

        monkeypatch.setattr(net.urllib.request, "urlopen", fake_urlopen)
        assert fetch_json("https://x/rpc", user_agent="methaur/t") == {"type": "search", "results": []}
        assert seen["ua"] == "methaur/t"

    @pytest.mark.parametrize("body,status", [
        (b"not json", 200),
        (b"[1, 2]", 200),
        (b"{}", 503),
    ])
    def test_bad_responses_return_none(self, monkeypatch, body: bytes, status: int) -> None:
        monkeypatch.setattr(net.urllib.request, "urlopen", lambda req, timeout: _Resp(body, status))
        assert fetch_json("https://x/rpc") is None

    def test_network_error_returns_none(self, monkeypatch) -> None:
        def boom(req, timeout):
            raise urllib.error.URLError("unreachable")

        monkeypatch.setattr(net.urllib.request, "urlopen", boom)
        assert fetch_json("https://x/rpc") is None


class TestDownloadFile:
    def test_writes_file(self, tmp_path, monkeypatch) -> None:
        monkeypatch.setattr(net.urllib.request, "urlopen", lambda req, timeout: _Resp(b"tarball"))
        dest = tmp_path / "sub" / "foo.tar.gz"
        download_file("https://x/foo.tar.gz", str(dest))
        assert dest.read_bytes() == b"tarball"

    def test_failure_removes_partial(self, tmp_path, monkeypatch) -> None:
        dest = tmp_path / "foo.tar.gz"
        dest.write_bytes(b"partial")

        def boom(req, timeout):
            raise urllib.error.URLError("reset")

        monkeypatch.setattr(net.urllib.request, "urlopen", boom)
        with pytest.raises(ConnectionError, match="下载失败"):
            download_file("https://x/foo.tar.gz", str(dest))
        assert not dest.exists()
