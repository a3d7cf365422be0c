"""makepkg 构建工具封装

职责:
- 构建并打包（可强制重建、可跳过完整性校验）
- 重新生成 autotools 构建脚手架
- 查找构建产物、收集构建日志
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from pathlib import Path

from methaur.utils.shell import CommandExecutor, CommandResult, get_executor

logger = logging.getLogger(__name__)


class MakepkgBuilder:
    """makepkg 封装（输出直接继承终端）"""

    def __init__(
        self,
        executor: CommandExecutor | None = None,
        *,
        makepkg_cmd: str = "makepkg",
        autoreconf_cmd: str = "autoreconf",
        package_suffixes: Sequence[str] = (".pkg.tar.zst", ".pkg.tar.xz"),
    ) -> None:
        self.executor = executor or get_executor()
        self.makepkg_cmd = makepkg_cmd
        self.autoreconf_cmd = autoreconf_cmd
        self.package_suffixes = tuple(package_suffixes)

    def build(
        self, recipe_dir: str | Path, *,
        force: bool = True, skip_integrity: bool = False,
    ) -> CommandResult:
        # --log 让 makepkg 在构建目录写 *.log，失败后可供查看
        args = [self.makepkg_cmd, "-s", "--noconfirm", "--log"]
        if force:
            args.append("-f")
        if skip_integrity:
            args.append("--skipinteg")
        logger.info("构建: %s (cwd=%s)", " ".join(args), recipe_dir)
        return self.executor.execute(args, cwd=str(recipe_dir), capture=False)

    def regenerate_scaffolding(self, recipe_dir: str | Path) -> CommandResult:
        args = [self.autoreconf_cmd, "-fi"]
        logger.info("重新生成构建脚手架: %s", " ".join(args))
        return self.executor.execute(args, cwd=str(recipe_dir), capture=False)

    def find_artifacts(self, recipe_dir: str | Path, name: str) -> list[Path]:
        """按后缀优先级查找产物: 有 .zst 就只用 .zst，否则回退 .xz"""
        base = Path(recipe_dir)
        for suffix in self.package_suffixes:
            matches = sorted(base.glob(f"{name}*{suffix}"))
            if matches:
                return matches
        return []

    @staticmethod
    def collect_logs(recipe_dir: str | Path) -> list[Path]:
        return sorted(Path(recipe_dir).glob("*.log"))
