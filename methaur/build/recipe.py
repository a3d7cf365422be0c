"""构建脚本（PKGBUILD）依赖提取

PKGBUILD 是带可执行语法的数据文件，读取其中的 depends / makedepends /
checkdepends 必须由 bash 求值。求值即执行脚本里的任意代码，
提取器的安全性取决于脚本来源，每次提取都会以 WARNING 告知操作者。

隔离措施:
- 独立 bash 子进程（--noprofile --norc），清空环境变量，只保留最小 PATH
- 工作目录限定为脚本所在目录，HOME 指向该目录
- 硬超时，超时即判定失败
- 输出按不可信文本解析：只接受 "<段名>\\t<条目>" 形式的行，条目按包名字符集校验
"""

from __future__ import annotations

import logging
import re
import subprocess
from dataclasses import dataclass, field
from pathlib import Path

from methaur.core.exceptions import RecipeError
from methaur.utils.shell import CommandExecutor, get_executor

logger = logging.getLogger(__name__)

RECIPE_FILE = "PKGBUILD"
SECTIONS = ("depends", "makedepends", "checkdepends")
AUTOTOOLS_MARKERS = ("configure.ac", "configure.in")

_CONSTRAINT_CHARS = re.compile(r"[<>=]")
_VALID_NAME = re.compile(r"^[A-Za-z0-9@._+-]+$")

_EVAL_SCRIPT = (
    f'source "./{RECIPE_FILE}" >/dev/null 2>&1 || exit 3\n'
    + "".join(
        f'for _x in "${{{s}[@]}}"; do printf \'{s}\\t%s\\n\' "$_x"; done\n'
        for s in SECTIONS
    )
)


def strip_version_constraint(token: str) -> str:
    """截掉第一个 < > = 及其后内容并去除空白: "foo>=1.2" -> "foo" """
    return _CONSTRAINT_CHARS.split(token, maxsplit=1)[0].strip()


def has_autotools_markers(recipe_dir: str | Path) -> bool:
    """目录中存在 configure.ac / configure.in 即视为 autotools 工程"""
    base = Path(recipe_dir)
    return any((base / marker).exists() for marker in AUTOTOOLS_MARKERS)


@dataclass
class RecipeDependencies:
    """按段保存的依赖名（已去掉版本约束）"""

    depends: list[str] = field(default_factory=list)
    makedepends: list[str] = field(default_factory=list)
    checkdepends: list[str] = field(default_factory=list)

    def all(self) -> list[str]:
        """depends + makedepends + checkdepends，保序、不去重"""
        return [*self.depends, *self.makedepends, *self.checkdepends]

    def __len__(self) -> int:
        return len(self.depends) + len(self.makedepends) + len(self.checkdepends)


class RecipeDependencyExtractor:
    """在受限子进程中求值 PKGBUILD 并提取依赖名"""

    def __init__(
        self,
        executor: CommandExecutor | None = None,
        *,
        max_dependencies: int = 100,
        timeout: float = 30,
        bash: str = "bash",
    ) -> None:
        self.executor = executor or get_executor()
        self.max_dependencies = max_dependencies
        self.timeout = timeout
        self.bash = bash

    def extract(self, recipe_dir: str | Path) -> RecipeDependencies:
        base = Path(recipe_dir)
        recipe = base / RECIPE_FILE
        if not recipe.is_file():
            raise RecipeError(f"构建脚本不存在: {recipe}")

        logger.warning(
            "求值 %s 会执行其中的任意代码，请确认来源可信", recipe,
        )
        raw = self._evaluate(base)
        return self.parse(raw)

    def _evaluate(self, base: Path) -> str:
        env = {
            "PATH": "/usr/bin:/bin",
            "LC_ALL": "C",
            "HOME": str(base),
        }
        cmd = [self.bash, "--noprofile", "--norc", "-c", _EVAL_SCRIPT]
        try:
            r = self.executor.execute(cmd, cwd=str(base), env=env, timeout=self.timeout)
        except subprocess.TimeoutExpired as e:
            raise RecipeError(
                f"构建脚本求值超时 ({self.timeout}s): {base / RECIPE_FILE}",
            ) from e
        if not r.success:
            raise RecipeError(
                f"构建脚本求值失败 (rc={r.returncode}): {r.stderr[:300]}",
            )
        return r.stdout

    def parse(self, text: str) -> RecipeDependencies:
        """解析求值输出（不可信文本），超过上限的条目丢弃"""
        deps = RecipeDependencies()
        total = 0
        truncated = False
        for line in text.splitlines():
            section, sep, token = line.partition("\t")
            if not sep or section not in SECTIONS:
                continue
            name = strip_version_constraint(token)
            if not name:
                continue
            if not _VALID_NAME.match(name):
                logger.warning("忽略非法依赖名: %r", name[:80])
                continue
            if total >= self.max_dependencies:
                truncated = True
                break
            getattr(deps, section).append(name)
            total += 1
        if truncated:
            logger.warning("依赖数超过上限 %d，多余条目已忽略", self.max_dependencies)
        logger.info(
            "依赖提取: depends=%d makedepends=%d checkdepends=%d",
            len(deps.depends), len(deps.makedepends), len(deps.checkdepends),
        )
        return deps
