"""核心数据模型

包描述、构建选项、单次运行上下文集中定义，
metadata / pacman / build 各层统一从此处导入。
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field, replace
from pathlib import Path

AUR_SOURCE = "aur"


@dataclass(frozen=True)
class PackageInfo:
    """单个包的描述（构造后不可变）

    source 为官方仓库名（core / extra / multilib ...）或 "aur"。
    package_base / depends / make_depends 仅 AUR info 查询会填充。
    """

    name: str
    version: str = ""
    description: str = ""
    votes: int = 0
    maintainer: str = "None"
    url: str = ""
    source: str = AUR_SOURCE
    package_base: str = ""
    depends: tuple[str, ...] = ()
    make_depends: tuple[str, ...] = ()

    @property
    def is_aur(self) -> bool:
        return self.source == AUR_SOURCE

    @property
    def base(self) -> str:
        """快照下载所用的 PackageBase（拆分包与包名不同）"""
        return self.package_base or self.name


@dataclass(frozen=True)
class BuildOptions:
    """构建选项

    sync 与 remove 均未显式指定时默认 sync。
    """

    remove_build_deps: bool = False
    sync: bool = False
    remove: bool = False
    noconfirm: bool = False

    def __post_init__(self) -> None:
        if not self.sync and not self.remove:
            object.__setattr__(self, "sync", True)

    def for_dependency(self) -> BuildOptions:
        """递归构建依赖时使用的选项：强制关闭构建依赖回滚"""
        return replace(self, remove_build_deps=False)


@dataclass
class RunContext:
    """单次调用的运行上下文

    scratch 根目录、会话级台账路径、"正在解析" 集合都挂在这里，
    由 SyncService 每次调用创建一份，显式传给各组件。
    """

    scratch_dir: Path
    session_id: str = field(default_factory=lambda: uuid.uuid4().hex[:12])
    resolving: list[str] = field(default_factory=list)
    env_prepared: bool = False

    LEDGER_PREFIX = "build-deps."
    LEDGER_SUFFIX = ".yml"

    @property
    def ledger_path(self) -> Path:
        return self.scratch_dir / f"{self.LEDGER_PREFIX}{self.session_id}{self.LEDGER_SUFFIX}"

    def package_dir(self, name: str) -> Path:
        return self.scratch_dir / name
