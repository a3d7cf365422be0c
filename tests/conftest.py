"""测试共享 fixture: 记录式命令执行器

FakeExecutor 按 argv 前缀匹配预设结果，未匹配的命令默认成功（rc=0），
所有调用按顺序记录在 calls 中，便于断言 "调用了什么、调用了几次"。
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any, Union

import pytest

from methaur.utils.shell import CommandResult

Responder = Union[CommandResult, Callable[[list[str], dict[str, Any]], CommandResult]]


@dataclass
class FakeExecutor:
    rules: list[tuple[tuple[str, ...], Responder]] = field(default_factory=list)
    calls: list[list[str]] = field(default_factory=list)
    kwargs: list[dict[str, Any]] = field(default_factory=list)

    def on(self, *prefix: str, result: Responder) -> FakeExecutor:
        """注册规则；后注册的优先"""
        self.rules.insert(0, (prefix, result))
        return self

    def execute(self, cmd, *, cwd=".", env=None, timeout=None, capture=True) -> CommandResult:
        argv = list(cmd) if not isinstance(cmd, str) else cmd.split()
        kw = {"cwd": cwd, "env": env, "timeout": timeout, "capture": capture}
        self.calls.append(argv)
        self.kwargs.append(kw)
        for prefix, result in self.rules:
            if tuple(argv[: len(prefix)]) == prefix:
                return result(argv, kw) if callable(result) else result
        return CommandResult(returncode=0)

    def matching(self, *prefix: str) -> list[list[str]]:
        return [c for c in self.calls if tuple(c[: len(prefix)]) == prefix]


@pytest.fixture
def fake_executor() -> FakeExecutor:
    return FakeExecutor()
