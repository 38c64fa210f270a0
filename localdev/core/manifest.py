"""package.json 读写

清单在内存中就是普通 dict（保持键插入顺序），本模块只负责
定位文件、解析和序列化，不解释 name / version 的含义。
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from localdev.core.exceptions import (
    ManifestNotFoundError,
    ManifestParseError,
    ManifestReadError,
)
from localdev.utils.file_io import save_json

logger = logging.getLogger(__name__)

MANIFEST_FILENAME = "package.json"

Manifest = dict[str, Any]


def manifest_path(directory: str | Path, filename: str = MANIFEST_FILENAME) -> Path:
    return Path(directory) / filename


def read_manifest(directory: str | Path, filename: str = MANIFEST_FILENAME) -> Manifest:
    """读取目录下的清单文件

    异常:
        ManifestNotFoundError: 文件不存在
        ManifestParseError: 不是合法的 UTF-8 JSON，或顶层不是对象
        ManifestReadError: 文件存在但无法读取（如权限不足）
    """
    p = manifest_path(directory, filename)
    if not p.is_file():
        raise ManifestNotFoundError(f"未找到 {filename}: {p}")
    try:
        with open(p, encoding="utf-8") as f:
            data = json.load(f)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise ManifestParseError(f"{p} 不是合法的 UTF-8 JSON: {e}") from e
    except OSError as e:
        raise ManifestReadError(f"无法读取 {p}: {e}") from e
    if not isinstance(data, dict):
        raise ManifestParseError(
            f"{p} 顶层应为 JSON 对象 (实际类型: {type(data).__name__})"
        )
    return data


def write_manifest(
    directory: str | Path, manifest: Manifest, filename: str = MANIFEST_FILENAME,
) -> Path:
    """整体覆盖写回清单：2 空格缩进，键顺序不变，末尾换行"""
    p = manifest_path(directory, filename)
    save_json(p, manifest)
    logger.info("已写入 %s", p)
    return p
