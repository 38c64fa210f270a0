"""单个依赖的链接 / 解除链接

链接流程:
  1. 相对消费方目录解析本地路径，检查存在
  2. 读取依赖包自己的 package.json，取 name / version
  3. 在依赖目录执行 `<linker> link`（注册全局链接）
  4. 在消费方目录执行 `<linker> link <name>`（接入工程）

步骤 3 成功而步骤 4 失败时，全局链接保留，不自动撤销，由使用者重试或手动清理。
"""

from __future__ import annotations

import json
import logging
import threading
from pathlib import Path

from localdev.core.config import Config, get_config
from localdev.core.exceptions import LocalDevError, MissingNameError, PathNotFoundError
from localdev.core.manifest import manifest_path, read_manifest
from localdev.core.models import DependencyIdentity
from localdev.core.reporter import NullReporter, StatusReporter
from localdev.utils.shell import CommandExecutor, run_cmd

logger = logging.getLogger(__name__)


def resolve_local_path(local_path: str, consumer_dir: str | Path) -> Path:
    """把本地依赖路径解析为绝对路径，不存在时抛 PathNotFoundError"""
    resolved = (Path(consumer_dir) / Path(local_path).expanduser()).resolve()
    if not resolved.exists():
        raise PathNotFoundError(f"路径不存在: {resolved}")
    return resolved


def _version_text(data: dict) -> str | None:
    """取 version 字段的文本形式

    字段缺失返回 None；显式的 null / 数字 / 布尔按 JSON 字面量转成文本（null -> "null"）。
    """
    if "version" not in data:
        return None
    version = data["version"]
    return version if isinstance(version, str) else json.dumps(version)

class DependencyLinker:
    """外部链接工具的封装"""

    def __init__(
        self,
        executor: CommandExecutor | None = None,
        config: Config | None = None,
        reporter: StatusReporter | None = None,
        cancel: threading.Event | None = None,
    ) -> None:
        self.executor = executor
        self.config = config or get_config()
        self.reporter: StatusReporter = reporter or NullReporter()
        self.cancel = cancel

    # ---- 外部命令 ----

    def _run(self, args: list[str], cwd: str | Path, label: str) -> None:
        run_cmd(
            [self.config.linker, *args], cwd=str(cwd), label=label,
            executor=self.executor,
            timeout=self.config.command_timeout,
            cancel=self.cancel,
        )

    def register_globally(self, dependency_dir: str | Path) -> None:
        """在依赖目录执行 `<linker> link`"""
        self._run(["link"], dependency_dir, "register")

    def consume(self, consumer_dir: str | Path, package_name: str) -> None:
        """在消费方目录执行 `<linker> link <name>`"""
        self._run(["link", package_name], consumer_dir, "consume")

    def release(self, consumer_dir: str | Path, package_name: str) -> None:
        """在消费方目录执行 `<linker> unlink <name>`"""
        self._run(["unlink", package_name], consumer_dir, "release")

    # ---- 依赖身份 ----

    def read_identity(
        self, local_path: str, consumer_dir: str | Path,
    ) -> tuple[Path, DependencyIdentity]:
        """解析路径并读取依赖包的 name / version"""
        resolved = resolve_local_path(local_path, consumer_dir)
        filename = self.config.manifest_filename
        data = read_manifest(resolved, filename)
        name = data.get("name")
        if not name:
            raise MissingNameError(
                f"依赖包缺少 name 字段: {manifest_path(resolved, filename)}"
            )
        return resolved, DependencyIdentity(
            name=str(name),
            version=_version_text(data),
            path=local_path,
        )

    # ---- 链接 / 解除 ----

    def link(self, local_path: str, consumer_dir: str | Path) -> DependencyIdentity:
        """链接一个本地依赖，返回其身份（path 为原始字符串）"""
        r = self.reporter
        try:
            r.start(f"读取 {local_path} 的 {self.config.manifest_filename}")
            resolved, identity = self.read_identity(local_path, consumer_dir)
            r.succeed(f"找到依赖包: {identity.name} v{identity.version}")

            r.start(f"为 {identity.name} 创建全局链接")
            self.register_globally(resolved)
            r.succeed(f"已创建全局链接: {identity.name}")

            r.start(f"在当前工程中链接 {identity.name}")
            self.consume(consumer_dir, identity.name)
            r.succeed(f"已链接: {identity.name}")
        except LocalDevError as e:
            r.fail(f"链接失败: {e}")
            raise
        logger.info("已链接 %s (%s -> %s)", identity.name, local_path, resolved)
        return identity

    def unlink(self, local_path: str, consumer_dir: str | Path) -> str:
        """解除一个本地依赖的链接，返回依赖包名"""
        r = self.reporter
        try:
            r.start(f"读取 {local_path} 的 {self.config.manifest_filename}")
            _, identity = self.read_identity(local_path, consumer_dir)
            r.succeed(f"找到依赖包: {identity.name}")

            r.start(f"从当前工程解除 {identity.name}")
            self.release(consumer_dir, identity.name)
            r.succeed(f"已解除链接: {identity.name}")
        except LocalDevError as e:
            r.fail(f"解除链接失败: {e}")
            raise
        logger.info("已解除链接 %s (%s)", identity.name, local_path)
        return identity.name
