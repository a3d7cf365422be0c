"""构建依赖台账

记录 "仅为构建而安装" 的依赖名，构建成功后由回滚步骤读取并卸载。

生命周期:
  - 依赖安装轮开始时在内存中创建（仅当请求了回滚）
  - 每追加一项即原子写盘，0 项时不产生文件
  - 回滚步骤读取后删除
  - 按会话 id 隔离，不同会话的台账互不合并
"""

from __future__ import annotations

import logging
import time
from pathlib import Path

import yaml

from methaur.core.exceptions import LedgerError
from methaur.core.models import RunContext
from methaur.utils.yaml_io import load_yaml, save_yaml

logger = logging.getLogger(__name__)


class BuildDepsLedger:
    """会话级构建依赖台账"""

    def __init__(self, path: Path, session_id: str = "") -> None:
        self.path = path
        self.session_id = session_id
        self._entries: list[str] = []

    @classmethod
    def for_context(cls, ctx: RunContext) -> BuildDepsLedger:
        """以当前会话的台账路径创建；已有文件时接着追加"""
        ledger = cls(ctx.ledger_path, ctx.session_id)
        ledger._entries = ledger.read()
        return ledger

    @property
    def entries(self) -> list[str]:
        return list(self._entries)

    def append(self, name: str) -> None:
        self._entries.append(name)
        self._persist()
        logger.debug("台账追加: %s -> %s", name, self.path)

    def _persist(self) -> None:
        save_yaml(self.path, {
            "session": self.session_id,
            "updated": time.strftime("%Y-%m-%d %H:%M:%S"),
            "packages": self._entries,
        })

    def read(self) -> list[str]:
        """按写入顺序读取台账内容，文件不存在返回空列表

        异常:
            LedgerError: 文件无法读取、YAML 格式错误，或 packages 不是包名列表
        """
        try:
            data = load_yaml(self.path)
        except (yaml.YAMLError, ValueError, OSError) as e:
            raise LedgerError(f"台账无法读取: {self.path}: {e}") from e
        packages = data.get("packages") or []
        if not isinstance(packages, list) or not all(isinstance(p, str) for p in packages):
            raise LedgerError(f"台账内容损坏: {self.path}: packages 应为包名列表")
        return [p for p in packages if p]

    def delete(self) -> None:
        self.path.unlink(missing_ok=True)
        self._entries = []


def find_stale_ledgers(scratch_dir: Path, current_session: str) -> list[Path]:
    """列出 scratch 目录下不属于当前会话的台账文件"""
    if not scratch_dir.is_dir():
        return []
    own = f"{RunContext.LEDGER_PREFIX}{current_session}{RunContext.LEDGER_SUFFIX}"
    pattern = f"{RunContext.LEDGER_PREFIX}*{RunContext.LEDGER_SUFFIX}"
    return sorted(p for p in scratch_dir.glob(pattern) if p.name != own)
