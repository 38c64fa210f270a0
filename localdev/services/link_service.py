"""本地依赖服务 — install / install-all / unlink / list

每个命令开始时重新读取消费方 package.json，内存中修改，
只在需要持久化的成功路径上整体写回一次（list 从不写）。
"""

from __future__ import annotations

import logging
import threading
from pathlib import Path

from localdev.core.config import Config, get_config
from localdev.core.exceptions import LocalDevError
from localdev.core.linker import DependencyLinker
from localdev.core.manifest import Manifest, read_manifest, write_manifest
from localdev.core.models import DependencyIdentity, InstallSummary, LocalDependencyEntry
from localdev.core.reconciler import (
    apply_install,
    apply_uninstall,
    check_dependency_maps,
    local_dependencies,
)
from localdev.core.reporter import NullReporter, StatusReporter
from localdev.utils.shell import CommandExecutor

logger = logging.getLogger(__name__)


class LinkService:
    """消费方工程的本地依赖管理"""

    def __init__(
        self,
        project_dir: str | Path = ".",
        *,
        executor: CommandExecutor | None = None,
        config: Config | None = None,
        reporter: StatusReporter | None = None,
        cancel: threading.Event | None = None,
    ) -> None:
        self.project_dir = Path(project_dir)
        self.config = config or get_config()
        self.reporter: StatusReporter = reporter or NullReporter()
        self.linker = DependencyLinker(
            executor=executor, config=self.config,
            reporter=self.reporter, cancel=cancel,
        )

    def _read(self) -> Manifest:
        manifest = read_manifest(self.project_dir, self.config.manifest_filename)
        check_dependency_maps(manifest)
        return manifest

    def _write(self, manifest: Manifest) -> None:
        self.reporter.start(f"更新 {self.config.manifest_filename}")
        write_manifest(self.project_dir, manifest, self.config.manifest_filename)
        self.reporter.succeed(f"已更新 {self.config.manifest_filename}")

    # ---- 单个安装 ----

    def install(self, local_path: str) -> DependencyIdentity:
        """链接一个本地依赖并写入 dependencies / localDependencies

        任一步骤失败都直接抛出，清单不会被写入。
        """
        manifest = self._read()
        identity = self.linker.link(local_path, self.project_dir)
        apply_install(manifest, identity, self.config.range_prefix)
        self._write(manifest)
        return identity

    # ---- 批量安装 ----

    def install_all(self) -> InstallSummary:
        """按 localDependencies 的存储顺序逐个链接

        单个依赖失败只记录，不中断批次；至少成功一个时才写回清单。
        """
        summary = InstallSummary()
        manifest = self._read()
        entries = list(local_dependencies(manifest))
        if not entries:
            logger.info("localDependencies 为空，无需安装")
            return summary

        for local_path in entries:
            self.reporter.info(f"处理: {local_path}")
            try:
                identity = self.linker.link(local_path, self.project_dir)
            except LocalDevError as e:
                logger.warning("安装失败 %s: %s", local_path, e)
                summary.record_failure(local_path, str(e))
                continue
            apply_install(manifest, identity, self.config.range_prefix)
            summary.record_success()

        if summary.success_count > 0:
            self._write(manifest)
        logger.info(
            "批量安装完成: 成功 %d, 失败 %d",
            summary.success_count, summary.failure_count,
        )
        return summary

    # ---- 解除链接 ----

    def unlink(self, local_path: str) -> str:
        """解除链接并从清单中删除对应条目，返回依赖包名"""
        manifest = self._read()
        name = self.linker.unlink(local_path, self.project_dir)
        apply_uninstall(manifest, name, local_path)
        self._write(manifest)
        return name

    # ---- 列表 ----

    def list_entries(self) -> list[LocalDependencyEntry]:
        """列出 localDependencies，逐个尝试读取依赖包名；只读，不写清单"""
        result: list[LocalDependencyEntry] = []
        for local_path, version_range in local_dependencies(self._read()).items():
            entry = LocalDependencyEntry(path=local_path, version_range=str(version_range))
            try:
                _, identity = self.linker.read_identity(local_path, self.project_dir)
                entry.name = identity.name
            except LocalDevError as e:
                logger.debug("无法解析 %s: %s", local_path, e)
            result.append(entry)
        return result
