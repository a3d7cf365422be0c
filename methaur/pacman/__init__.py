"""包管理器适配层

- manager.py: pacman 原语（查询 / 安装 / 卸载），特权操作统一提权
- oracle.py: 已安装状态查询（失败一律视为 False）
"""

from methaur.pacman.manager import PacmanManager
from methaur.pacman.oracle import InstalledStateOracle

__all__ = ["PacmanManager", "InstalledStateOracle"]
