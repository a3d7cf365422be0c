"""构建环境准备

首次构建前确保基础工具链组和必备构建工具已安装。
幂等：已安装的跳过；安装失败只告警，不影响后续流程的正确性，
只影响首次构建成功的概率。每个运行上下文只执行一次。
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from methaur.core.models import RunContext
from methaur.pacman.manager import PacmanManager
from methaur.pacman.oracle import InstalledStateOracle

logger = logging.getLogger(__name__)


class EnvironmentPreparer:
    """构建环境准备器"""

    def __init__(
        self,
        pacman: PacmanManager,
        oracle: InstalledStateOracle,
        *,
        base_group: str = "base-devel",
        essential_tools: Sequence[str] = (),
    ) -> None:
        self.pacman = pacman
        self.oracle = oracle
        self.base_group = base_group
        self.essential_tools = list(essential_tools)

    def ensure(self, ctx: RunContext) -> list[str]:
        """检查并补装缺失的工具，返回本次尝试安装的名称列表"""
        if ctx.env_prepared:
            return []
        ctx.env_prepared = True

        attempted: list[str] = []
        if self.base_group and not self.oracle.is_group_installed(self.base_group):
            logger.info("安装构建所需的 %s 组...", self.base_group)
            self._install(self.base_group)
            attempted.append(self.base_group)

        missing = [t for t in self.essential_tools if not self.oracle.is_installed(t)]
        if not missing:
            logger.info("构建工具均已安装")
            return attempted

        logger.info("安装缺失的构建工具: %s", ", ".join(missing))
        for tool in missing:
            self._install(tool)
            attempted.append(tool)
        return attempted

    def _install(self, name: str) -> None:
        r = self.pacman.install([name], needed=True, noconfirm=True)
        if not r.success:
            logger.warning("安装 %s 失败 (rc=%d)，继续", name, r.returncode)
