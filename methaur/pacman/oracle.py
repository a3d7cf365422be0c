"""已安装状态查询

纯查询：是否已安装、是否有官方二进制包、被哪些已安装包依赖。
查询本身失败（pacman 不存在、返回非零、OSError）一律视为 False，
调用方据此继续走下一个回退分支，不作为致命错误。
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from methaur.pacman.manager import PacmanManager
from methaur.utils.shell import CommandResult

logger = logging.getLogger(__name__)


class InstalledStateOracle:
    """基于 pacman 的已安装状态查询"""

    def __init__(self, pacman: PacmanManager) -> None:
        self.pacman = pacman

    @staticmethod
    def _ok(label: str, name: str, run: Callable[[str], CommandResult]) -> bool:
        try:
            result = run(name)
        except OSError as e:
            logger.debug("%s 查询异常 %s: %s", label, name, e)
            return False
        return result.success

    def is_installed(self, name: str) -> bool:
        return self._ok("installed", name, self.pacman.query_installed)

    def is_available_as_binary(self, name: str) -> bool:
        return self._ok("available", name, self.pacman.query_available)

    def is_group_installed(self, group: str) -> bool:
        return self._ok("group", group, self.pacman.query_group)

    def required_by(self, name: str) -> list[str]:
        """已安装包 name 被哪些包依赖（pacman -Qi 的 Required By 字段）

        查询失败按 "无人依赖" 处理，由后续的卸载命令自身报错。
        """
        try:
            result = self.pacman.query_info(name)
        except OSError as e:
            logger.debug("info 查询异常 %s: %s", name, e)
            return []
        if not result.success:
            return []
        return parse_required_by(result.stdout)


def parse_required_by(output: str) -> list[str]:
    """解析 pacman -Qi 输出中的 Required By 字段，None 表示为空

    字段值过长时 pacman 会折行，续行以空白开头。
    """
    names: list[str] = []
    collecting = False
    for line in output.splitlines():
        if line[:1].isspace():
            if collecting:
                names.extend(line.split())
            continue
        key, _, value = line.partition(":")
        collecting = key.strip() == "Required By"
        if collecting:
            names.extend(value.split())
    return [n for n in names if n != "None"]
