"""methaur 日志配置

日志一律写 stderr，stdout 只留给结果表格和交互提示，
这样 `methaur -S foo 2>/dev/null` 仍能看到完整的选择流程。

终端格式沿用 makepkg 的 "==>" 前缀，与 makepkg / pacman 自身输出混排时容易区分；
METHAUR_LOG_JSON=1 时改为每行一个 JSON 对象，便于脚本消费。
"""

from __future__ import annotations

import json
import logging
import os
import sys
from collections.abc import Mapping
from datetime import datetime, timezone

LEVEL_ENV = "METHAUR_LOG_LEVEL"
JSON_ENV = "METHAUR_LOG_JSON"

_PREFIXES = {
    logging.DEBUG: "  ->",
    logging.INFO: "==>",
    logging.WARNING: "==> 警告:",
    logging.ERROR: "==> 错误:",
    logging.CRITICAL: "==> 错误:",
}


class ConsoleFormatter(logging.Formatter):
    """终端格式: `==> 消息`，DEBUG 级别额外带上来源模块"""

    def format(self, record: logging.LogRecord) -> str:
        prefix = _PREFIXES.get(record.levelno, "==>")
        message = record.getMessage()
        if record.levelno <= logging.DEBUG:
            message = f"[{record.name}] {message}"
        text = f"{prefix} {message}"
        if record.exc_info and record.exc_info[1]:
            text = f"{text}\n{self.formatException(record.exc_info)}"
        return text


class JSONFormatter(logging.Formatter):
    """每条记录一行 JSON

    字段: timestamp（事件发生时间，UTC）、level、logger、message，
    有异常时附带 exception。
    """

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info and record.exc_info[1]:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False)


def setup_logging(level: str = "INFO", json_output: bool = False) -> None:
    """配置根日志器；重复调用会先清掉已有 handler，不会重复输出

    无法识别的级别名按 INFO 处理。
    """
    reset_logging()
    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(JSONFormatter() if json_output else ConsoleFormatter())
    root.addHandler(handler)


def setup_from_env(environ: Mapping[str, str] | None = None) -> None:
    """按 METHAUR_LOG_LEVEL / METHAUR_LOG_JSON 配置日志（CLI 入口调用）"""
    env = os.environ if environ is None else environ
    setup_logging(
        level=env.get(LEVEL_ENV, "INFO"),
        json_output=env.get(JSON_ENV, "") == "1",
    )


def reset_logging() -> None:
    root = logging.getLogger()
    for handler in root.handlers[:]:
        root.removeHandler(handler)
        handler.close()
