"""构建编排数据模型

数据类：
- BuildReport: 单个包一次构建的过程记录
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from methaur.build.installer import DependencyPassResult
from methaur.build.recipe import RecipeDependencies
from methaur.core.models import BuildOptions, PackageInfo

# 构建尝试标签（重试阶梯按此顺序）
ATTEMPT_PLAIN = "plain"
ATTEMPT_AFTER_SCAFFOLD = "after_scaffold"
ATTEMPT_SKIP_INTEGRITY = "skip_integrity"


@dataclass
class BuildReport:
    """构建过程报告

    步骤失败时异常直接抛出，因此能拿到的报告都是成功（或 skipped）的。
    """

    name: str
    options: BuildOptions
    info: PackageInfo | None = None
    recipe_dir: Path | None = None
    dependencies: RecipeDependencies | None = None
    dep_result: DependencyPassResult | None = None
    build_attempts: list[str] = field(default_factory=list)
    artifacts: list[Path] = field(default_factory=list)
    rolled_back: list[str] = field(default_factory=list)
    kept_deps: list[str] = field(default_factory=list)
    skipped: bool = False
    steps: list[dict[str, Any]] = field(default_factory=list)

    def record(self, step: str, status: str = "done", **detail: Any) -> None:
        self.steps.append({"step": step, "status": status, **detail})

    @property
    def step_names(self) -> list[str]:
        return [s["step"] for s in self.steps]
