"""状态输出接口

每个操作显式接收一个 StatusReporter，不依赖全局的进度状态。
CLI 使用 ClickReporter 输出彩色文本；服务层默认 NullReporter，静默执行。
"""

from __future__ import annotations

from typing import Protocol

import click


class StatusReporter(Protocol):
    """操作进度回调"""

    def start(self, message: str) -> None:
        """一个步骤开始"""
        ...

    def succeed(self, message: str) -> None:
        """步骤成功"""
        ...

    def fail(self, message: str) -> None:
        """步骤失败"""
        ...

    def info(self, message: str) -> None:
        """普通提示"""
        ...


class NullReporter:
    """不输出任何内容"""

    def start(self, message: str) -> None:
        pass

    def succeed(self, message: str) -> None:
        pass

    def fail(self, message: str) -> None:
        pass

    def info(self, message: str) -> None:
        pass


class ClickReporter:
    """基于 click.secho 的终端输出"""

    def start(self, message: str) -> None:
        click.secho(f"  … {message}", fg="cyan")

    def succeed(self, message: str) -> None:
        click.secho(f"  ✔ {message}", fg="green")

    def fail(self, message: str) -> None:
        click.secho(f"  ✖ {message}", fg="red", err=True)

    def info(self, message: str) -> None:
        click.echo(message)

