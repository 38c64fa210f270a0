"""CLI — list"""

from __future__ import annotations

import click

from localdev.cli import _fail, _service
from localdev.core.exceptions import LocalDevError


def register(group: click.Group) -> None:
    group.add_command(list_deps)


@click.command(name="list")
@click.pass_context
def list_deps(ctx: click.Context) -> None:
    """列出 localDependencies 中的全部本地依赖"""
    svc = _service(ctx)
    try:
        entries = svc.list_entries()
    except LocalDevError as e:
        _fail(ctx, "错误", e)
    if not entries:
        click.secho("\n⚠️  没有本地依赖\n", fg="yellow")
        return

    click.secho("\n📦 本地依赖:\n", bold=True)
    for entry in entries:
        path = click.style(entry.path, fg="cyan")
        version_range = click.style(entry.version_range, fg="bright_black")
        click.echo(f"  {path} {version_range}")
        if entry.resolved:
            click.echo(f"    └─ {click.style(entry.name, fg='green')}")
        else:
            marker = f"(未找到 {svc.config.manifest_filename})"
            click.echo(f"    └─ {click.style(marker, fg='red')}")
    click.echo()
