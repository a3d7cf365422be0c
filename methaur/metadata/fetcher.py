"""多来源元数据合并

搜索: 官方仓库结果在前、AUR 结果在后，拼接后截断到 max_results。
不按包名去重：同一个包可能以不同来源标签出现两次，由用户选择。
"""

from __future__ import annotations

import logging

from methaur.core.models import PackageInfo
from methaur.metadata.aur import AurClient
from methaur.metadata.official import OfficialRepoSearch

logger = logging.getLogger(__name__)


class MetadataFetcher:
    """元数据查询入口（顺序查询，无并发）"""

    def __init__(
        self,
        official: OfficialRepoSearch,
        aur: AurClient,
        max_results: int = 50,
    ) -> None:
        self.official = official
        self.aur = aur
        self.max_results = max_results

    def search(self, query: str) -> list[PackageInfo]:
        merged = [*self.official.search(query), *self.aur.search(query)]
        if len(merged) > self.max_results:
            logger.info("结果 %d 条，截断为 %d 条", len(merged), self.max_results)
        return merged[: self.max_results]

    def aur_info(self, name: str) -> PackageInfo | None:
        return self.aur.info(name)
