"""包元数据查询模块

- aur.py: AUR RPC 客户端（search / info）
- official.py: 官方仓库搜索（代理 pacman -Ss）
- fetcher.py: 多来源合并（官方在前，AUR 在后，截断到上限）
"""

from methaur.metadata.aur import AurClient
from methaur.metadata.fetcher import MetadataFetcher
from methaur.metadata.official import OfficialRepoSearch

__all__ = ["AurClient", "OfficialRepoSearch", "MetadataFetcher"]
