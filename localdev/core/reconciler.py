"""清单合并 — 把链接结果同步到 dependencies / localDependencies

纯内存修改，不做任何 I/O。
"""

from __future__ import annotations

from typing import Any

from localdev.core.exceptions import ManifestParseError
from localdev.core.models import DependencyIdentity

DEPENDENCIES = "dependencies"
LOCAL_DEPENDENCIES = "localDependencies"

# 依赖包没有 version 字段时写入的占位值
UNDEFINED_VERSION = "undefined"


def version_range(version: str | None, prefix: str = "^") -> str:
    """生成版本范围，如 "2.3.0" -> "^2.3.0"；缺失版本得到 "^undefined" """
    return f"{prefix}{UNDEFINED_VERSION if version is None else version}"


def check_dependency_maps(manifest: dict[str, Any]) -> None:
    """dependencies / localDependencies 存在时必须是对象，否则抛 ManifestParseError

    null 视同缺失，其他类型原样保留不做替换。
    """
    for key in (DEPENDENCIES, LOCAL_DEPENDENCIES):
        value = manifest.get(key)
        if value is not None and not isinstance(value, dict):
            raise ManifestParseError(
                f"{key} 应为 JSON 对象 (实际类型: {type(value).__name__})"
            )


def _dependency_map(manifest: dict[str, Any], key: str) -> dict[str, str]:
    check_dependency_maps(manifest)
    value = manifest.get(key)
    if value is None:
        value = manifest[key] = {}
    return value


def apply_install(
    manifest: dict[str, Any], identity: DependencyIdentity, prefix: str = "^",
) -> None:
    """写入 dependencies[name] 与 localDependencies[path]，两者版本范围相同"""
    _dependency_map(manifest, DEPENDENCIES)[identity.name] = version_range(
        identity.version, prefix,
    )
    _dependency_map(manifest, LOCAL_DEPENDENCIES)[identity.path] = version_range(
        identity.version, prefix,
    )


def apply_uninstall(manifest: dict[str, Any], name: str, path: str) -> None:
    """删除 dependencies[name] 与 localDependencies[path]，键不存在时忽略"""
    deps = manifest.get(DEPENDENCIES)
    if isinstance(deps, dict):
        deps.pop(name, None)
    local = manifest.get(LOCAL_DEPENDENCIES)
    if isinstance(local, dict):
        local.pop(path, None)


def local_dependencies(manifest: dict[str, Any]) -> dict[str, str]:
    """返回 localDependencies 映射，缺失或类型不对时返回空字典"""
    local = manifest.get(LOCAL_DEPENDENCIES)
    return local if isinstance(local, dict) else {}
