"""核心数据模型"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class DependencyIdentity:
    """一次链接解析出的依赖身份

    path 保留调用方传入的原始字符串（未解析为绝对路径），
    它就是 localDependencies 中的键。
    """

    name: str
    version: str | None
    path: str


@dataclass
class InstallFailure:
    path: str
    error: str


@dataclass
class InstallSummary:
    """批量安装汇总"""

    success_count: int = 0
    failure_count: int = 0
    failures: list[InstallFailure] = field(default_factory=list)

    @property
    def total(self) -> int:
        return self.success_count + self.failure_count

    def record_success(self) -> None:
        self.success_count += 1

    def record_failure(self, path: str, error: str) -> None:
        self.failure_count += 1
        self.failures.append(InstallFailure(path=path, error=error))


@dataclass
class LocalDependencyEntry:
    """list 命令的一行：路径、版本范围、依赖包名（读不到时为 None）"""

    path: str
    version_range: str
    name: str | None = None

    @property
    def resolved(self) -> bool:
        return self.name is not None
