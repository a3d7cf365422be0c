"""CLI: 交互决策实现（click.confirm / click.prompt）"""

from __future__ import annotations

import logging

import click

logger = logging.getLogger(__name__)


class ClickDecisions:
    """终端交互决策，输入流关闭（EOF）时按拒绝/取消处理"""

    def confirm(self, topic: str, prompt: str) -> bool:
        try:
            return click.confirm(prompt, default=False)
        except click.Abort:
            logger.debug("确认 [%s] 被中断，按否处理", topic)
            return False

    def choose(self, prompt: str, count: int) -> int:
        """读取 0..count 的序号；非数字输入重问一次，仍非数字按取消处理"""
        for attempt in range(2):
            try:
                raw = click.prompt(prompt, default="0", show_default=False)
            except click.Abort:
                return 0
            try:
                selection = int(str(raw).strip())
            except ValueError:
                if attempt == 0:
                    click.echo("请输入数字序号")
                continue
            if 0 <= selection <= count:
                return selection
            click.echo(f"序号超出范围: {selection}")
            return 0
        return 0
