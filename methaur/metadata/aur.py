"""AUR RPC 客户端

职责:
- search(query): 自由文本搜索
- info(name): 精确包名查询（含 PackageBase / Depends / MakeDepends）

网络失败、非 200、响应体非法、缺少 results 字段、结果为空，
一律返回空结果并记录日志，不向调用方抛出解析异常。
"""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import quote

from methaur import __version__
from methaur.core.models import AUR_SOURCE, PackageInfo
from methaur.utils.net import fetch_json

logger = logging.getLogger(__name__)

USER_AGENT = f"methaur/{__version__}"


def _str(obj: dict[str, Any], key: str, default: str = "") -> str:
    value = obj.get(key)
    return default if value is None else str(value)


def _int(obj: dict[str, Any], key: str) -> int:
    try:
        return max(0, int(obj.get(key) or 0))
    except (TypeError, ValueError):
        return 0


def _str_list(obj: dict[str, Any], key: str) -> tuple[str, ...]:
    value = obj.get(key)
    if not isinstance(value, list):
        return ()
    return tuple(str(v) for v in value if v)


def parse_package(obj: Any) -> PackageInfo | None:
    """把单个 RPC 结果对象转换为 PackageInfo，缺少 Name 时丢弃"""
    if not isinstance(obj, dict):
        return None
    name = _str(obj, "Name").strip()
    if not name:
        return None
    return PackageInfo(
        name=name,
        version=_str(obj, "Version"),
        description=_str(obj, "Description"),
        votes=_int(obj, "NumVotes"),
        maintainer=_str(obj, "Maintainer", "None"),
        url=_str(obj, "URL"),
        source=AUR_SOURCE,
        package_base=_str(obj, "PackageBase"),
        depends=_str_list(obj, "Depends"),
        make_depends=_str_list(obj, "MakeDepends"),
    )


class AurClient:
    """AUR RPC v5 客户端"""

    def __init__(self, rpc_url: str, *, timeout: float = 30) -> None:
        self.rpc_url = rpc_url.rstrip("&")
        self.timeout = timeout

    def _results(self, url: str, label: str) -> list[Any]:
        data = fetch_json(url, user_agent=USER_AGENT, timeout=self.timeout)
        if data is None:
            return []
        if data.get("type") == "error":
            logger.error("AUR 返回错误 (%s): %s", label, data.get("error", ""))
            return []
        results = data.get("results")
        if not isinstance(results, list) or not results:
            logger.info("AUR 无结果: %s", label)
            return []
        return results

    def search(self, query: str) -> list[PackageInfo]:
        url = f"{self.rpc_url}&type=search&arg={quote(query, safe='')}"
        packages = [p for p in map(parse_package, self._results(url, query)) if p]
        logger.debug("AUR 搜索 %s: %d 条", query, len(packages))
        return packages

    def info(self, name: str) -> PackageInfo | None:
        url = f"{self.rpc_url}&type=info&arg[]={quote(name, safe='')}"
        for obj in self._results(url, name):
            pkg = parse_package(obj)
            if pkg is not None:
                return pkg
        return None
