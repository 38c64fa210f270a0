"""CLI — install / unlink"""

from __future__ import annotations

import click

from localdev.cli import _fail, _service
from localdev.core.exceptions import LocalDevError
from localdev.core.models import InstallSummary


def register(group: click.Group) -> None:
    group.add_command(install)
    group.add_command(unlink)


@click.command()
@click.argument("path", required=False)
@click.option("--strict", is_flag=True, help="批量安装中任一依赖失败时以非零状态退出")
@click.pass_context
def install(ctx: click.Context, path: str | None, strict: bool) -> None:
    """安装一个本地依赖；不带 PATH 时安装 localDependencies 中的全部依赖"""
    svc = _service(ctx)
    if path:
        click.secho("\n📦 安装本地依赖:\n", bold=True)
        try:
            svc.install(path)
        except LocalDevError as e:
            _fail(ctx, "安装失败", e)
        click.secho("\n✅ 本地依赖安装成功!\n", fg="green", bold=True)
        return

    try:
        summary = svc.install_all()
    except LocalDevError as e:
        _fail(ctx, "安装失败", e)
    if summary.total == 0:
        click.secho(f"\n⚠️  {svc.config.manifest_filename} 中没有本地依赖\n", fg="yellow")
        return
    _echo_summary(summary)
    if strict and summary.failure_count > 0:
        ctx.exit(1)


def _echo_summary(summary: InstallSummary) -> None:
    click.secho("\n📊 汇总:", bold=True)
    click.secho(f"  ✅ 成功: {summary.success_count}", fg="green")
    if summary.failure_count > 0:
        click.secho(f"  ❌ 失败: {summary.failure_count}", fg="red")
        for f in summary.failures:
            click.secho(f"     - {f.path}: {f.error}", fg="red")
    click.echo()


@click.command()
@click.argument("path")
@click.pass_context
def unlink(ctx: click.Context, path: str) -> None:
    """解除一个本地依赖的链接"""
    try:
        _service(ctx).unlink(path)
    except LocalDevError as e:
        _fail(ctx, "解除链接失败", e)
    click.secho("\n✅ 已解除本地依赖链接!\n", fg="green", bold=True)
