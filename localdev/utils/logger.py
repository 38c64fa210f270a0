"""local-dev 日志配置

日志统一写 stderr，stdout 留给命令的状态输出。
支持人类可读文本和结构化 JSON（便于 CI 收集）两种格式。
"""

from __future__ import annotations

import json
import logging
import os
import sys
from datetime import datetime, timezone

LOG_LEVEL_ENV = "LOCALDEV_LOG_LEVEL"
LOG_JSON_ENV = "LOCALDEV_LOG_JSON"


class JSONFormatter(logging.Formatter):
    """单行 JSON 日志格式器

    字段: timestamp / level / logger / message，出现异常时附带 exception。
    """

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(
                record.created, tz=timezone.utc
            ).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info and record.exc_info[1]:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False)


def setup_logging(level: str = "WARNING", json_output: bool = False) -> None:
    """配置 localdev 根日志器

    参数:
        level: 日志级别字符串，无法识别时退回 WARNING
        json_output: 为 True 时输出 JSON 行

    重复调用会先移除已有 handler，避免同一条日志输出多次。
    """
    root = logging.getLogger("localdev")
    reset_logging()

    root.setLevel(getattr(logging, level.upper(), logging.WARNING))

    handler = logging.StreamHandler(sys.stderr)
    if json_output:
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            "%(asctime)s [%(levelname)-7s] %(name)s: %(message)s",
        ))
    root.addHandler(handler)


def setup_logging_from_env() -> None:
    """按环境变量 LOCALDEV_LOG_LEVEL / LOCALDEV_LOG_JSON 配置日志"""
    setup_logging(
        level=os.getenv(LOG_LEVEL_ENV, "WARNING"),
        json_output=os.getenv(LOG_JSON_ENV, "") == "1",
    )


def reset_logging() -> None:
    """移除 localdev 日志器上的全部 handler"""
    root = logging.getLogger("localdev")
    for handler in root.handlers[:]:
        root.removeHandler(handler)
        handler.close()
