"""官方仓库搜索: 代理 pacman -Ss

pacman -Ss 输出格式（每个包两行）:

    extra/firefox 131.0-1 (group) [installed]
        Fast, Private & Safe Web Browser
"""

from __future__ import annotations

import logging
import re

from methaur.core.models import PackageInfo
from methaur.pacman.manager import PacmanManager

logger = logging.getLogger(__name__)

OFFICIAL_MAINTAINER = "Arch Linux"

_HEADER = re.compile(r"^(?P<repo>[^\s/]+)/(?P<name>\S+)\s+(?P<version>\S+)")


def parse_search_output(text: str) -> list[PackageInfo]:
    """解析 pacman -Ss 输出，无法识别的行直接跳过"""
    packages: list[PackageInfo] = []
    current: dict[str, str] | None = None

    def flush() -> None:
        if current is not None:
            packages.append(PackageInfo(
                name=current["name"],
                version=current["version"],
                description=current.get("description", ""),
                maintainer=OFFICIAL_MAINTAINER,
                source=current["repo"],
            ))

    for line in text.splitlines():
        if not line.strip():
            continue
        if line[0].isspace():
            if current is not None and "description" not in current:
                current["description"] = line.strip()
            continue
        m = _HEADER.match(line)
        if m is None:
            continue
        flush()
        current = m.groupdict()
    flush()
    return packages


class OfficialRepoSearch:
    """官方仓库搜索"""

    def __init__(self, pacman: PacmanManager) -> None:
        self.pacman = pacman

    def search(self, query: str) -> list[PackageInfo]:
        try:
            result = self.pacman.search(query)
        except OSError as e:
            logger.error("pacman 搜索失败: %s", e)
            return []
        if not result.success:
            # pacman -Ss 无匹配时返回 1，同样按空结果处理
            logger.debug("官方仓库无结果: %s (rc=%d)", query, result.returncode)
            return []
        return parse_search_output(result.stdout)
