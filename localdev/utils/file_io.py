"""文件读写工具

集中管理 JSON 清单与 YAML 配置的序列化，统一 encoding="utf-8" 和原子写入。
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any

import yaml

logger = logging.getLogger(__name__)


def atomic_write(path: Path, content: str) -> None:
    """原子写入文件：先写同目录临时文件再 replace

    写入中途崩溃时目标文件保持原样，不会出现被截断的清单。
    """
    fd, tmp = tempfile.mkstemp(dir=str(path.parent), suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(content)
        os.replace(tmp, str(path))
    except Exception:
        try:
            os.unlink(tmp)
        except OSError:
            pass
        raise


def dump_json(data: Any) -> str:
    """序列化为 2 空格缩进 JSON，保持键顺序，末尾带换行"""
    return json.dumps(data, indent=2, ensure_ascii=False) + "\n"


def save_json(path: str | Path, data: Any) -> None:
    """原子写入 JSON 文件"""
    atomic_write(Path(path), dump_json(data))


def load_yaml(path: str | Path) -> dict[str, Any]:
    """读取 YAML 文件

    文件不存在或为空时返回空字典；顶层不是字典时抛 TypeError，
    由调用方转换为业务异常。

    异常:
        yaml.YAMLError: YAML 格式错误
        TypeError: 顶层不是映射
    """
    p = Path(path)
    if not p.exists():
        return {}
    with open(p, encoding="utf-8") as f:
        result = yaml.safe_load(f)
    if result is None:
        return {}
    if not isinstance(result, dict):
        raise TypeError(
            f"{p} 顶层应为映射 (实际类型: {type(result).__name__})"
        )
    return result
