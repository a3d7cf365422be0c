"""网络工具: URL 安全校验 + JSON 查询"""

from __future__ import annotations

import logging
import urllib.error
import urllib.request
from json import JSONDecodeError
from json import loads as json_loads
from typing import Any
from urllib.parse import urlparse

from methaur.core.exceptions import ValidationError

logger = logging.getLogger(__name__)

_ALLOWED_SCHEMES = frozenset(("http", "https"))


def validate_url_scheme(url: str, *, context: str = "") -> None:
    """校验 URL 仅使用 http/https，防止 file:// 等非预期协议访问

    Raises:
        ValidationError: URL scheme 不在白名单内
    """
    parsed = urlparse(url)
    if parsed.scheme not in _ALLOWED_SCHEMES:
        label = f" ({context})" if context else ""
        raise ValidationError(
            f"不允许的 URL 协议 '{parsed.scheme}'{label}，"
            f"仅支持 http/https: {url}"
        )


def fetch_json(
    url: str, *, user_agent: str = "", timeout: float = 30,
) -> dict[str, Any] | None:
    """GET 一个 JSON 文档，任何传输/解析失败都返回 None 而不是抛异常

    非 200、网络异常、响应体不是合法 JSON、顶层不是对象，均记录日志后返回 None。
    """
    validate_url_scheme(url, context="metadata query")
    req = urllib.request.Request(url)
    if user_agent:
        req.add_header("User-Agent", user_agent)
    try:
        with urllib.request.urlopen(req, timeout=timeout) as resp:  # nosec B310
            if resp.status != 200:
                logger.error("查询失败 (HTTP %s): %s", resp.status, url)
                return None
            data = json_loads(resp.read().decode("utf-8", errors="replace"))
    except (urllib.error.URLError, OSError) as e:
        logger.error("网络请求失败: %s - %s", url, e)
        return None
    except (JSONDecodeError, UnicodeDecodeError) as e:
        logger.error("解析 JSON 响应失败: %s - %s", url, e)
        return None
    if not isinstance(data, dict):
        logger.error("JSON 响应顶层不是对象: %s", url)
        return None
    return data


def download_file(url: str, dest: str, *, user_agent: str = "", timeout: float = 60) -> None:
    """下载文件到 dest，失败抛 ConnectionError 并清理半成品"""
    from pathlib import Path

    validate_url_scheme(url, context="snapshot download")
    target = Path(dest)
    target.parent.mkdir(parents=True, exist_ok=True)
    req = urllib.request.Request(url)
    if user_agent:
        req.add_header("User-Agent", user_agent)
    try:
        with urllib.request.urlopen(req, timeout=timeout) as resp:  # nosec B310
            target.write_bytes(resp.read())
    except (urllib.error.HTTPError, urllib.error.URLError, OSError) as e:
        target.unlink(missing_ok=True)
        raise ConnectionError(f"下载失败: {url} - {e}") from e
