"""外部命令执行工具 — 统一子进程调用

通过 CommandExecutor 协议抽象子进程执行，测试时注入假实现即可，
无需 patch subprocess。命令一律以参数列表形式传递。
"""

from __future__ import annotations

import logging
import shlex
import subprocess
import threading
import time
from dataclasses import dataclass
from typing import Protocol

from localdev.core.exceptions import LinkerError

logger = logging.getLogger(__name__)


# =========================================================================
# 命令执行结果
# =========================================================================

@dataclass
class CommandResult:
    """命令执行结果（与 subprocess 解耦）"""

    returncode: int
    stdout: str
    stderr: str
    cancelled: bool = False
    timed_out: bool = False

    @property
    def success(self) -> bool:
        return self.returncode == 0 and not (self.cancelled or self.timed_out)


# =========================================================================
# 命令执行器协议
# =========================================================================

class CommandExecutor(Protocol):
    """命令执行器协议 — 抽象子进程调用"""

    def execute(
        self,
        cmd: list[str],
        *,
        cwd: str = ".",
        env: dict[str, str] | None = None,
        timeout: float | None = None,
        cancel: threading.Event | None = None,
        shell: bool = False,
    ) -> CommandResult:
        """执行命令并返回结果，非零退出不抛异常"""
        ...


# =========================================================================
# 默认实现: 本地子进程执行器
# =========================================================================

class LocalExecutor:
    """本地子进程执行器（默认实现）

    cancel 事件被置位或超过 timeout 时结束子进程，
    已经产生的副作用不做回滚。
    """

    poll_interval = 0.05

    def execute(
        self,
        cmd: list[str],
        *,
        cwd: str = ".",
        env: dict[str, str] | None = None,
        timeout: float | None = None,
        cancel: threading.Event | None = None,
        shell: bool = False,
    ) -> CommandResult:
        args = list(cmd)
        if shell:
            logger.warning(
                "[SECURITY] shell 模式已开启，参数按字面值转义后交给 shell: %s",
                shlex.join(args),
            )
        try:
            proc = subprocess.Popen(
                shlex.join(args) if shell else args,
                stdout=subprocess.PIPE, stderr=subprocess.PIPE,
                text=True, cwd=cwd, env=env, shell=shell,
            )
        except FileNotFoundError as e:
            return CommandResult(returncode=127, stdout="", stderr=str(e))
        except OSError as e:
            return CommandResult(returncode=126, stdout="", stderr=str(e))

        if cancel is None and timeout is None:
            stdout, stderr = proc.communicate()
            return CommandResult(proc.returncode, stdout, stderr)

        deadline = None if timeout is None else time.monotonic() + timeout
        while True:
            try:
                stdout, stderr = proc.communicate(timeout=self.poll_interval)
                return CommandResult(proc.returncode, stdout, stderr)
            except subprocess.TimeoutExpired:
                pass
            if cancel is not None and cancel.is_set():
                logger.info("  已取消，终止进程: %s", shlex.join(args))
                stdout, stderr = _terminate(proc)
                return CommandResult(proc.returncode, stdout, stderr, cancelled=True)
            if deadline is not None and time.monotonic() >= deadline:
                logger.info("  超时 (%ss)，终止进程: %s", timeout, shlex.join(args))
                stdout, stderr = _terminate(proc)
                return CommandResult(proc.returncode, stdout, stderr, timed_out=True)


def _terminate(proc: subprocess.Popen[str]) -> tuple[str, str]:
    proc.kill()
    return proc.communicate()


# =========================================================================
# 全局默认执行器（可替换）
# =========================================================================

_default_executor: CommandExecutor = LocalExecutor()


def get_executor() -> CommandExecutor:
    """获取全局默认命令执行器"""
    return _default_executor


def set_executor(executor: CommandExecutor) -> None:
    """替换全局默认命令执行器（用于测试）"""
    global _default_executor  # noqa: PLW0603
    _default_executor = executor


# =========================================================================
# 便捷函数
# =========================================================================

def run_cmd(
    cmd: list[str], *, cwd: str = ".",
    label: str = "cmd",
    executor: CommandExecutor | None = None,
    timeout: float | None = None,
    cancel: threading.Event | None = None,
) -> CommandResult:
    """执行命令，失败抛 LinkerError

    Args:
        cmd: 参数列表
        cwd: 工作目录
        label: 日志与错误信息中的标签
        executor: 命令执行器，不传使用全局默认
        timeout: 超时秒数
        cancel: 取消事件
    """
    logger.info("  %s: %s (cwd=%s)", label, shlex.join(cmd), cwd)
    r = (executor or get_executor()).execute(
        cmd, cwd=cwd, timeout=timeout, cancel=cancel,
    )
    if r.cancelled:
        raise LinkerError(f"{label}已取消", r, cmd, cancelled=True)
    if r.timed_out:
        raise LinkerError(f"{label}超时 ({timeout}s)", r, cmd)
    if r.returncode != 0:
        detail = (r.stderr or r.stdout).strip()[:500]
        raise LinkerError(f"{label}失败 (rc={r.returncode}): {detail}", r, cmd)
    return r
