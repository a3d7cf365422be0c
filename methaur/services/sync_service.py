"""同步服务: CLI 与构建引擎之间的门面

职责:
- 创建运行上下文（scratch 目录 + 会话 id），启动时检查遗留台账
- 多来源搜索
- 安装分派：官方仓库包走 pacman，其余走 AUR 构建编排
- 卸载
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from methaur.build.orchestrator import BuildReport
    from methaur.services.container import ServiceContainer

from methaur.core.exceptions import ExecutionError, InstallError, LedgerError
from methaur.core.ledger import BuildDepsLedger, find_stale_ledgers
from methaur.core.models import BuildOptions, PackageInfo, RunContext

logger = logging.getLogger(__name__)


class SyncService:
    """同步/卸载服务"""

    def __init__(self, container: ServiceContainer) -> None:
        self.c = container

    def start(self, options: BuildOptions) -> RunContext:
        """创建运行上下文

        先确认提权命令可用，缺失时在任何下载或构建之前抛 PrivilegeError。
        遗留台账（其他会话留下的）不合并、不自动卸载其中的包：
        只记录告警，无法读取的台账同样告警后继续；指定 --clean 时在告警后删除台账文件。
        """
        self.c.pacman.check_privilege()
        ctx = RunContext(scratch_dir=Path(self.c.config.scratch_dir))
        ctx.scratch_dir.mkdir(parents=True, exist_ok=True)
        for path in find_stale_ledgers(ctx.scratch_dir, ctx.session_id):
            try:
                entries = BuildDepsLedger(path).read()
            except LedgerError as e:
                logger.warning("%s（忽略该台账）", e)
            else:
                logger.warning(
                    "发现上次运行遗留的构建依赖台账 %s: %s（不会合并到本次运行）",
                    path, ", ".join(entries) or "(空)",
                )
            if options.remove_build_deps:
                path.unlink(missing_ok=True)
                logger.warning("已删除遗留台账 %s，其中的包需要手动确认是否卸载", path)
        logger.debug("会话 %s, scratch=%s", ctx.session_id, ctx.scratch_dir)
        return ctx

    def search(self, query: str) -> list[PackageInfo]:
        return self.c.metadata.search(query)

    def install(
        self, pkg: PackageInfo, options: BuildOptions, ctx: RunContext,
    ) -> BuildReport | None:
        """安装选中的包；官方仓库能提供时优先二进制安装"""
        name = pkg.name
        if not pkg.is_aur or self.c.oracle.is_available_as_binary(name):
            logger.info("%s 在官方仓库中，使用 pacman 安装", name)
            r = self.c.pacman.install([name], needed=True, noconfirm=True)
            if not r.success:
                raise InstallError(
                    f"pacman 安装失败 (rc={r.returncode})", package=name, stage="install",
                )
            return None
        logger.info("%s 不在官方仓库中，从 AUR 安装", name)
        return self.c.orchestrator.build(name, options, ctx)

    def remove(self, name: str) -> None:
        logger.info("卸载 %s...", name)
        r = self.c.pacman.remove(name, recursive=False, noconfirm=True)
        if not r.success:
            raise ExecutionError(
                f"pacman 卸载失败 (rc={r.returncode})", package=name, stage="remove",
            )
