"""pacman 原语封装

查询类命令捕获输出、不提权；安装/卸载类命令需要提权，
执行前先确认提权命令存在，缺失时抛 PrivilegeError（与 "特权命令执行失败" 区分）。
安装/卸载输出直接继承终端，用户能看到 pacman 的进度。
"""

from __future__ import annotations

import logging
import os
import shutil
from collections.abc import Callable, Sequence

from methaur.core.exceptions import PrivilegeError
from methaur.utils.shell import CommandExecutor, CommandResult, get_executor

logger = logging.getLogger(__name__)


class PacmanManager:
    """pacman 命令封装"""

    def __init__(
        self,
        executor: CommandExecutor | None = None,
        pacman_cmd: str = "pacman",
        elevation_cmd: str = "sudo",
        which: Callable[[str], str | None] = shutil.which,
    ) -> None:
        self.executor = executor or get_executor()
        self.pacman_cmd = pacman_cmd
        self.elevation_cmd = elevation_cmd
        self._which = which

    # ---- 查询（非特权） ----

    def _query(self, *args: str) -> CommandResult:
        return self.executor.execute([self.pacman_cmd, *args])

    def query_installed(self, name: str) -> CommandResult:
        return self._query("-Q", name)

    def query_available(self, name: str) -> CommandResult:
        return self._query("-Si", name)

    def query_info(self, name: str) -> CommandResult:
        # -Qi 的字段名随语言环境翻译，解析时固定为英文
        env = {**os.environ, "LC_ALL": "C"}
        return self.executor.execute([self.pacman_cmd, "-Qi", name], env=env)

    def query_group(self, group: str) -> CommandResult:
        return self._query("-Qg", group)

    def search(self, query: str) -> CommandResult:
        return self._query("-Ss", query)

    # ---- 特权操作 ----

    def check_privilege(self) -> None:
        """确认提权命令可用；elevation_cmd 为空表示已是 root，直接执行"""
        if self.elevation_cmd and self._which(self.elevation_cmd) is None:
            raise PrivilegeError(
                f"需要 {self.elevation_cmd} 执行特权操作，但未找到该命令",
            )

    def _privileged(self, args: list[str]) -> CommandResult:
        self.check_privilege()
        cmd = [self.elevation_cmd, *args] if self.elevation_cmd else args
        logger.info("执行: %s", " ".join(cmd))
        return self.executor.execute(cmd, capture=False)

    def install(
        self, names: Sequence[str], *, needed: bool = True, noconfirm: bool = True,
    ) -> CommandResult:
        args = [self.pacman_cmd, "-S"]
        if needed:
            args.append("--needed")
        if noconfirm:
            args.append("--noconfirm")
        return self._privileged([*args, *names])

    def install_files(self, paths: Sequence[str], *, noconfirm: bool = True) -> CommandResult:
        args = [self.pacman_cmd, "-U"]
        if noconfirm:
            args.append("--noconfirm")
        return self._privileged([*args, *paths])

    def remove(
        self, name: str, *, recursive: bool = False, noconfirm: bool = True,
    ) -> CommandResult:
        args = [self.pacman_cmd, "-Rs" if recursive else "-R"]
        if noconfirm:
            args.append("--noconfirm")
        return self._privileged([*args, name])
