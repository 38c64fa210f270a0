"""集中配置管理

支持从 YAML 文件加载 + 环境变量覆盖。配置文件默认位于工程根目录的
.localdev.yml，不存在时全部使用默认值。
"""

from __future__ import annotations

import logging
import os
from dataclasses import asdict, dataclass, field
from pathlib import Path

import yaml

from localdev.core.exceptions import ConfigError
from localdev.utils.file_io import load_yaml

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = ".localdev.yml"
LINKER_ENV = "LOCALDEV_LINKER"


@dataclass
class Config:
    """工具全局配置"""

    manifest_filename: str = "package.json"
    linker: str = "npm"          # 外部链接工具，可换成 pnpm / yarn
    range_prefix: str = "^"
    command_timeout: float | None = None  # 秒，None 表示一直等待

    extra: dict = field(default_factory=dict)

    @classmethod
    def from_file(cls, path: str | Path) -> Config:
        """从 YAML 文件加载配置，不存在则返回默认"""
        try:
            data = load_yaml(path)
        except (yaml.YAMLError, TypeError) as e:
            raise ConfigError(f"配置文件无效: {path}: {e}") from e
        known = {f.name for f in cls.__dataclass_fields__.values()} - {"extra"}
        matched = {k: v for k, v in data.items() if k in known}
        extra = {k: v for k, v in data.items() if k not in known}
        _validate(path, matched)
        cfg = cls(**matched)
        cfg.extra = extra
        return cfg

    def apply_env(self) -> Config:
        """环境变量覆盖文件配置"""
        linker = os.getenv(LINKER_ENV, "")
        if linker:
            self.linker = linker
        return self

    def to_dict(self) -> dict:
        return asdict(self)


def _validate(path: str | Path, values: dict) -> None:
    """校验已知配置项的类型，不合法时抛 ConfigError"""
    for key in ("manifest_filename", "linker"):
        if key in values and (not isinstance(values[key], str) or not values[key]):
            raise ConfigError(f"配置文件无效: {path}: {key} 应为非空字符串")
    if "range_prefix" in values and not isinstance(values["range_prefix"], str):
        raise ConfigError(f"配置文件无效: {path}: range_prefix 应为字符串")
    timeout = values.get("command_timeout")
    if timeout is not None and (
        isinstance(timeout, bool) or not isinstance(timeout, (int, float)) or timeout <= 0
    ):
        raise ConfigError(f"配置文件无效: {path}: command_timeout 应为正数秒或 null")


# 全局单例，由 CLI 入口显式初始化
_current: Config | None = None


def get_config() -> Config:
    """获取当前配置（未初始化则返回默认值）"""
    global _current  # noqa: PLW0603
    if _current is None:
        _current = Config().apply_env()
    return _current


def init_config(path: str | Path) -> Config:
    """从文件初始化全局配置"""
    global _current  # noqa: PLW0603
    _current = Config.from_file(path).apply_env()
    logger.info("配置已加载: %s (linker=%s)", path, _current.linker)
    return _current


def reset_config() -> None:
    global _current  # noqa: PLW0603
    _current = None
