"""交互决策协议

编排逻辑里需要用户拍板的地方（重装确认、是否查看构建日志、
搜索结果选择）统一通过 DecisionProvider 请求，而不是直接读终端。
CLI 注入交互实现，自动化场景和测试注入非交互实现。
"""

from __future__ import annotations

import logging
from typing import Protocol

logger = logging.getLogger(__name__)

# 确认类决策的主题
REINSTALL = "reinstall"
VIEW_LOGS = "view_logs"


class DecisionProvider(Protocol):
    """决策提供者协议"""

    def confirm(self, topic: str, prompt: str) -> bool:
        """是/否确认，topic 取 REINSTALL / VIEW_LOGS"""
        ...

    def choose(self, prompt: str, count: int) -> int:
        """从 1..count 中选择一个序号，0 表示取消"""
        ...


class AutoDecisions:
    """非交互决策（--noconfirm / 测试默认）

    - 重装确认: 同意（与 pacman --noconfirm 的语义一致）
    - 查看日志: 拒绝
    - 结果选择: 仅当结果唯一时选第 1 项，否则取消
    """

    def __init__(self, answers: dict[str, bool] | None = None) -> None:
        self.answers = {REINSTALL: True, VIEW_LOGS: False, **(answers or {})}

    def confirm(self, topic: str, prompt: str) -> bool:
        answer = self.answers.get(topic, False)
        logger.info("自动决策: %s -> %s", prompt, "是" if answer else "否")
        return answer

    def choose(self, prompt: str, count: int) -> int:
        selection = 1 if count == 1 else 0
        logger.info("自动决策: %s -> %d", prompt, selection)
        return selection
