"""统一异常体系

所有业务异常继承 LocalDevError。
CLI 层据此输出友好提示并以非零状态退出，批量安装据此逐条容错。
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from localdev.utils.shell import CommandResult


class LocalDevError(Exception):
    """工具基础异常"""

    code: str = "UNKNOWN"

    def __init__(self, message: str) -> None:
        super().__init__(message)


class ConfigError(LocalDevError):
    """配置文件内容无效"""

    code = "CONFIG_ERROR"


class ManifestNotFoundError(LocalDevError):
    """目录下不存在 package.json"""

    code = "MANIFEST_NOT_FOUND"


class ManifestParseError(LocalDevError):
    """package.json 不是合法的 JSON 对象"""

    code = "MANIFEST_PARSE_ERROR"


class ManifestReadError(LocalDevError):
    """package.json 存在但无法读取"""

    code = "MANIFEST_READ_ERROR"


class PathNotFoundError(LocalDevError):
    """指定的本地依赖路径不存在"""

    code = "PATH_NOT_FOUND"


class MissingNameError(LocalDevError):
    """依赖包的 package.json 缺少 name 字段"""

    code = "MISSING_NAME"


class LinkerError(LocalDevError):
    """外部链接命令执行失败（非零退出、超时或被取消）"""

    code = "LINKER_ERROR"

    def __init__(
        self, message: str, result: CommandResult,
        argv: list[str] | None = None, *, cancelled: bool = False,
    ) -> None:
        super().__init__(message)
        self.result = result
        self.argv = list(argv or [])
        self.cancelled = cancelled

    @property
    def returncode(self) -> int:
        return self.result.returncode

    @property
    def stdout(self) -> str:
        return self.result.stdout

    @property
    def stderr(self) -> str:
        return self.result.stderr
