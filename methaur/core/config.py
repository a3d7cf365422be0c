"""集中配置管理

所有路径、端点、外部命令名和上限值都在这里定义默认值，
支持从 YAML 文件加载 + 编程式覆盖。
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field

import yaml

from methaur.core.exceptions import ConfigError
from methaur.utils.yaml_io import load_yaml

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = os.path.join(
    os.path.expanduser("~"), ".config", "methaur", "config.yml",
)

ESSENTIAL_TOOLS = [
    "autoconf", "automake", "binutils", "bison", "fakeroot", "file",
    "findutils", "flex", "gawk", "gcc", "gettext", "grep", "groff",
    "gzip", "libtool", "m4", "make", "pacman", "patch", "pkgconf",
    "sed", "sudo", "texinfo", "which",
]


@dataclass
class Config:
    """全局配置"""

    # 目录
    scratch_dir: str = "/tmp/methaur"

    # 远程元数据
    aur_rpc_url: str = "https://aur.archlinux.org/rpc/?v=5"
    aur_snapshot_url: str = "https://aur.archlinux.org/cgit/aur.git/snapshot/"
    http_timeout: int = 30

    # 上限
    max_results: int = 50
    max_dependencies: int = 100
    recipe_eval_timeout: int = 30

    # 外部命令
    elevation_cmd: str = "sudo"   # 以 root 运行时可置空
    pacman_cmd: str = "pacman"
    makepkg_cmd: str = "makepkg"
    autoreconf_cmd: str = "autoreconf"

    # 构建环境
    base_group: str = "base-devel"
    essential_tools: list[str] = field(default_factory=lambda: list(ESSENTIAL_TOOLS))
    package_suffixes: list[str] = field(
        default_factory=lambda: [".pkg.tar.zst", ".pkg.tar.xz"],
    )

    # 放不到字段里的配置项
    extra: dict = field(default_factory=dict)

    @classmethod
    def from_file(cls, path: str = DEFAULT_CONFIG_PATH) -> Config:
        """从 YAML 文件加载配置，不存在则返回默认"""
        try:
            data = load_yaml(path)
        except (ValueError, OSError) as e:
            raise ConfigError(f"读取配置失败: {path} - {e}") from e
        except yaml.YAMLError as e:
            raise ConfigError(f"配置文件格式错误: {path} - {e}") from e
        if not data:
            return cls()
        known = {f.name for f in cls.__dataclass_fields__.values()} - {"extra"}
        matched = {k: v for k, v in data.items() if k in known}
        extra = {k: v for k, v in data.items() if k not in known}
        try:
            cfg = cls(**matched)
        except TypeError as e:
            raise ConfigError(f"配置项无效: {path} - {e}") from e
        cfg.extra = extra
        cfg.validate()
        return cfg

    def validate(self) -> None:
        if not self.scratch_dir:
            raise ConfigError("scratch_dir 不能为空")
        if self.max_results <= 0 or self.max_dependencies <= 0:
            raise ConfigError("max_results / max_dependencies 必须为正整数")
        if not self.package_suffixes:
            raise ConfigError("package_suffixes 至少需要一个后缀")


# 全局单例，首次 import 时不加载文件；由 CLI 入口显式初始化
_current: Config | None = None


def get_config() -> Config:
    """获取当前配置（未初始化则返回默认值）"""
    global _current  # noqa: PLW0603
    if _current is None:
        _current = Config()
    return _current


def init_config(path: str | None = None) -> Config:
    """从文件初始化全局配置

    路径优先级: 参数 > METHAUR_CONFIG 环境变量 > ~/.config/methaur/config.yml
    """
    global _current  # noqa: PLW0603
    path = path or os.getenv("METHAUR_CONFIG") or DEFAULT_CONFIG_PATH
    _current = Config.from_file(path)
    logger.debug("配置已加载: %s", path)
    return _current
