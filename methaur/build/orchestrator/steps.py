"""构建编排步骤实现

步骤顺序：
1. check_installed - 已安装时确认是否重装
2. prepare_env - 构建环境准备（每个运行上下文一次）
3. fetch - 查询 AUR 并下载源码快照
4. extract - 解压快照，定位构建脚本
5. extract_deps - 求值构建脚本提取依赖
6. install_deps - 安装依赖（可能递归构建）
7. build - 构建（失败时走重试阶梯）
8. install_artifact - 安装构建产物
9. cleanup - 删除包的 scratch 子目录（无论成败）
10. rollback_deps - 卸载仅为构建而装的依赖
"""

from __future__ import annotations

import logging
import shutil
from collections.abc import Callable
from pathlib import Path
from typing import TYPE_CHECKING

import click

if TYPE_CHECKING:
    from methaur.services.container import ServiceContainer

from methaur.build.orchestrator.models import (
    ATTEMPT_AFTER_SCAFFOLD,
    ATTEMPT_PLAIN,
    ATTEMPT_SKIP_INTEGRITY,
    BuildReport,
)
from methaur.build.recipe import has_autotools_markers
from methaur.core.decisions import REINSTALL, VIEW_LOGS
from methaur.core.exceptions import (
    BuildError,
    InstallError,
    LedgerError,
    RecipeError,
    RollbackError,
)
from methaur.core.ledger import BuildDepsLedger
from methaur.core.models import RunContext

logger = logging.getLogger(__name__)


class BuildSteps:
    """构建步骤集合"""

    def __init__(
        self, container: ServiceContainer,
        echo: Callable[[str], None] = click.echo,
    ) -> None:
        self.c = container
        self.echo = echo

    def check_installed(self, report: BuildReport) -> bool:
        """步骤1: 已安装时请求确认，返回是否继续构建"""
        name = report.name
        if not self.c.oracle.is_installed(name):
            report.record("check_installed", installed=False)
            return True
        logger.info("%s 已安装", name)
        if self.c.decisions.confirm(REINSTALL, f"{name} 已安装，是否重新安装/升级?"):
            report.record("check_installed", installed=True, reinstall=True)
            return True
        logger.info("跳过安装 %s", name)
        report.skipped = True
        report.record("check_installed", "skipped", installed=True, reinstall=False)
        return False

    def prepare_env(self, ctx: RunContext, report: BuildReport) -> None:
        """步骤2: 构建环境准备"""
        if ctx.env_prepared:
            report.record("prepare_env", "skipped")
            return
        attempted = self.c.environment.ensure(ctx)
        report.record("prepare_env", attempted=attempted)

    def fetch(self, ctx: RunContext, report: BuildReport) -> None:
        """步骤3: 查询 AUR 并下载源码快照"""
        name = report.name
        info = self.c.metadata.aur_info(name)
        if info is None:
            raise RecipeError(f"AUR 中未找到包 {name}")
        report.info = info
        work_dir = ctx.package_dir(name)
        self.c.snapshots.reset_dir(work_dir)
        tarball = self.c.snapshots.download(info.base, work_dir)
        report.record("fetch", base=info.base, tarball=str(tarball))

    def extract(self, ctx: RunContext, report: BuildReport) -> None:
        """步骤4: 解压快照"""
        if report.info is None:
            raise RecipeError(f"{report.name} 尚未获取 AUR 信息，无法解压")
        base = report.info.base
        work_dir = ctx.package_dir(report.name)
        tarball = work_dir / f"{base}.tar.gz"
        report.recipe_dir = self.c.snapshots.extract(tarball, work_dir, base)
        report.record("extract", recipe_dir=str(report.recipe_dir))

    def extract_deps(self, report: BuildReport) -> None:
        """步骤5: 提取依赖"""
        deps = self.c.extractor.extract(_recipe_dir(report))
        report.dependencies = deps
        report.record("extract_deps", count=len(deps), dependencies=deps.all())

    def install_deps(self, ctx: RunContext, report: BuildReport) -> None:
        """步骤6: 安装依赖"""
        if report.dependencies is None:
            raise RecipeError(f"{report.name} 尚未提取依赖")
        result = self.c.installer.install(report.dependencies.all(), report.options, ctx)
        report.dep_result = result
        report.record(
            "install_deps",
            skipped=result.skipped, installed=result.installed, ledgered=result.ledgered,
        )

    def build(self, report: BuildReport) -> None:
        """步骤7: 构建，失败时按重试阶梯依次尝试，首个成功即停止

        阶梯: (a) autotools 工程先 autoreconf 再普通重试 (b) 跳过完整性校验重试
        """
        recipe_dir = _recipe_dir(report)
        builder = self.c.builder

        logger.info("构建 %s...", report.name)
        report.build_attempts.append(ATTEMPT_PLAIN)
        if builder.build(recipe_dir).success:
            report.record("build", attempts=list(report.build_attempts))
            return
        logger.error("构建 %s 失败，尝试修复后重试", report.name)

        if has_autotools_markers(recipe_dir):
            regen = builder.regenerate_scaffolding(recipe_dir)
            if not regen.success:
                logger.warning("autoreconf 失败 (rc=%d)，仍然重试构建", regen.returncode)
            report.build_attempts.append(ATTEMPT_AFTER_SCAFFOLD)
            if builder.build(recipe_dir).success:
                report.record("build", attempts=list(report.build_attempts))
                return

        logger.info("跳过完整性校验重试构建...")
        report.build_attempts.append(ATTEMPT_SKIP_INTEGRITY)
        if builder.build(recipe_dir, skip_integrity=True).success:
            report.record("build", attempts=list(report.build_attempts))
            return

        self._offer_logs(report)
        raise BuildError(
            f"构建 {report.name} 在 {len(report.build_attempts)} 次尝试后仍失败",
        )

    def _offer_logs(self, report: BuildReport) -> None:
        if not self.c.decisions.confirm(VIEW_LOGS, "是否查看构建日志?"):
            return
        logs = self.c.builder.collect_logs(_recipe_dir(report))
        if not logs:
            self.echo("未找到日志文件")
            return
        for log in logs:
            self.echo(f"==> {log.name}")
            self.echo(log.read_text(encoding="utf-8", errors="replace"))

    def install_artifact(self, report: BuildReport) -> None:
        """步骤8: 安装构建产物"""
        recipe_dir = _recipe_dir(report)
        artifacts = self.c.builder.find_artifacts(recipe_dir, report.name)
        if not artifacts:
            raise InstallError(f"未找到构建产物: {recipe_dir}/{report.name}*")
        logger.info("安装 %s...", ", ".join(a.name for a in artifacts))
        r = self.c.pacman.install_files([str(a) for a in artifacts])
        if not r.success:
            raise InstallError(f"安装构建产物失败 (rc={r.returncode})")
        report.artifacts = artifacts
        report.record("install_artifact", artifacts=[a.name for a in artifacts])

    def cleanup(self, ctx: RunContext, report: BuildReport) -> None:
        """步骤9: 删除包的 scratch 子目录（在 finally 中调用）"""
        work_dir = ctx.package_dir(report.name)
        shutil.rmtree(work_dir, ignore_errors=True)
        report.record("cleanup", path=str(work_dir))
        logger.info("已清理: %s", work_dir)

    def rollback_deps(self, ctx: RunContext, report: BuildReport) -> None:
        """步骤10: 按台账顺序卸载构建依赖，全部处理完后删除台账

        仍被其他已安装包依赖的条目（例如目标包的运行时依赖）跳过并记录，
        其余条目逐个 pacman -Rs。任一卸载失败即中止，台账保留在磁盘上供下次启动时检查。
        """
        try:
            ledger = BuildDepsLedger.for_context(ctx)
        except LedgerError as e:
            raise RollbackError(str(e)) from e
        entries = ledger.entries
        if not entries:
            report.record("rollback_deps", "skipped")
            ledger.delete()
            return
        for dep in entries:
            required_by = self.c.oracle.required_by(dep)
            if required_by:
                logger.warning("保留 %s: 仍被 %s 依赖", dep, ", ".join(required_by))
                report.kept_deps.append(dep)
                continue
            logger.info("卸载构建依赖: %s", dep)
            r = self.c.pacman.remove(dep, recursive=True, noconfirm=True)
            if not r.success:
                raise RollbackError(
                    f"卸载构建依赖 {dep} 失败 (rc={r.returncode})，台账保留: {ledger.path}",
                )
            report.rolled_back.append(dep)
        ledger.delete()
        report.record("rollback_deps", removed=list(report.rolled_back), kept=list(report.kept_deps))


def _recipe_dir(report: BuildReport) -> Path:
    if report.recipe_dir is None:
        raise RecipeError(f"{report.name} 尚未解压构建脚本")
    return report.recipe_dir
