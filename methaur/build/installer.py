"""依赖安装器

按声明顺序逐个处理依赖（不重排、不按来源分组）:
  1. 已安装 → 跳过
  2. 官方仓库有二进制包 → pacman -S --needed 安装
  3. 否则 → 回调构建编排器从 AUR 源码构建（强制关闭构建依赖回滚）
  4. 步骤 2/3 装上的依赖，若请求了回滚，一律记入台账
     （是否真的卸载由回滚步骤按 "Required By" 判断）

fail-fast: 任何一个依赖失败即中止整轮，不再尝试后续依赖。
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any, Protocol

from methaur.core.exceptions import DependencyError, LedgerError, MethaurError
from methaur.core.ledger import BuildDepsLedger
from methaur.core.models import BuildOptions, RunContext
from methaur.pacman.manager import PacmanManager
from methaur.pacman.oracle import InstalledStateOracle

logger = logging.getLogger(__name__)


class SourceBuilder(Protocol):
    """可回调的源码构建入口（由构建编排器实现）"""

    def build(self, name: str, options: BuildOptions, ctx: RunContext) -> Any:
        ...


@dataclass
class DependencyPassResult:
    """一轮依赖安装的结果"""

    skipped: list[str] = field(default_factory=list)
    from_binary: list[str] = field(default_factory=list)
    from_source: list[str] = field(default_factory=list)
    ledgered: list[str] = field(default_factory=list)

    @property
    def installed(self) -> list[str]:
        return [*self.from_binary, *self.from_source]


class DependencyInstaller:
    """依赖安装器"""

    def __init__(
        self,
        pacman: PacmanManager,
        oracle: InstalledStateOracle,
        builder: SourceBuilder | None = None,
    ) -> None:
        self.pacman = pacman
        self.oracle = oracle
        self.builder = builder

    def install(
        self,
        names: Sequence[str],
        options: BuildOptions,
        ctx: RunContext,
    ) -> DependencyPassResult:
        """安装一组依赖"""
        result = DependencyPassResult()
        ledger = self._open_ledger(ctx) if options.remove_build_deps else None

        for name in names:
            if self.oracle.is_installed(name):
                logger.info("依赖 %s 已安装，跳过", name)
                result.skipped.append(name)
                continue

            if self.oracle.is_available_as_binary(name):
                self._install_binary(name)
                result.from_binary.append(name)
            else:
                self._build_from_source(name, options, ctx)
                result.from_source.append(name)

            if ledger is not None:
                ledger.append(name)
                result.ledgered.append(name)

        logger.info(
            "依赖安装完成: 跳过 %d, 二进制 %d, 源码 %d",
            len(result.skipped), len(result.from_binary), len(result.from_source),
        )
        return result

    def _install_binary(self, name: str) -> None:
        logger.info("从官方仓库安装依赖: %s", name)
        r = self.pacman.install([name], needed=True, noconfirm=True)
        if not r.success:
            raise DependencyError(
                f"依赖 {name} 安装失败 (rc={r.returncode})", package=name, stage="install_deps",
            )

    def _build_from_source(self, name: str, options: BuildOptions, ctx: RunContext) -> None:
        if self.builder is None:
            raise DependencyError(
                f"依赖 {name} 不在官方仓库，且未配置源码构建器", package=name,
            )
        logger.info("依赖 %s 不在官方仓库，从 AUR 构建", name)
        try:
            self.builder.build(name, options.for_dependency(), ctx)
        except DependencyError:
            raise
        except MethaurError as e:
            raise DependencyError(
                f"依赖 {name} 构建失败: {e}",
                package=e.package or name, stage=e.stage or "build",
            ) from e

    @staticmethod
    def _open_ledger(ctx: RunContext) -> BuildDepsLedger:
        try:
            return BuildDepsLedger.for_context(ctx)
        except LedgerError as e:
            raise DependencyError(str(e), stage="install_deps") from e
