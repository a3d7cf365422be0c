"""构建编排器 - 单个 AUR 包的状态机

职责：
- 按固定顺序驱动各步骤
- 循环依赖保护（"正在解析" 集合随上下文传递）
- 保证解压后的 cleanup 在 finally 中执行
- 失败时为异常补全包名与阶段，交由 CLI 顶层输出
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from methaur.services.container import ServiceContainer

from methaur.build.orchestrator.models import BuildReport
from methaur.build.orchestrator.steps import BuildSteps
from methaur.core.exceptions import CyclicDependencyError, MethaurError
from methaur.core.models import BuildOptions, RunContext

logger = logging.getLogger(__name__)


@contextmanager
def _stage(report: BuildReport, step: str) -> Iterator[None]:
    try:
        yield
    except MethaurError as e:
        if not e.package:
            e.package = report.name
        if not e.stage:
            e.stage = step
        report.record(step, "failed", error=str(e))
        raise


class BuildOrchestrator:
    """AUR 包构建编排器（也是依赖安装器的递归回调入口）"""

    def __init__(self, container: ServiceContainer, steps: BuildSteps | None = None) -> None:
        self.c = container
        self.steps = steps or BuildSteps(container)

    def build(self, name: str, options: BuildOptions, ctx: RunContext) -> BuildReport:
        """构建并安装一个 AUR 包"""
        if name in ctx.resolving:
            raise CyclicDependencyError(name, list(ctx.resolving))

        report = BuildReport(name=name, options=options)
        with _stage(report, "check_installed"):
            if not self.steps.check_installed(report):
                return report

        ctx.resolving.append(name)
        try:
            self._run(ctx, report)
        finally:
            ctx.resolving.pop()

        logger.info("成功安装 %s", name)
        return report

    def _run(self, ctx: RunContext, report: BuildReport) -> None:
        with _stage(report, "prepare_env"):
            self.steps.prepare_env(ctx, report)

        try:
            with _stage(report, "fetch"):
                self.steps.fetch(ctx, report)
            with _stage(report, "extract"):
                self.steps.extract(ctx, report)
            with _stage(report, "extract_deps"):
                self.steps.extract_deps(report)
            with _stage(report, "install_deps"):
                self.steps.install_deps(ctx, report)
            with _stage(report, "build"):
                self.steps.build(report)
            with _stage(report, "install_artifact"):
                self.steps.install_artifact(report)
        finally:
            self.steps.cleanup(ctx, report)

        if report.options.remove_build_deps:
            with _stage(report, "rollback_deps"):
                self.steps.rollback_deps(ctx, report)
