"""local-dev 命令行接口

命令按领域拆分为子模块，每个模块通过 register() 把命令挂到 main group。
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import NoReturn

import click

from localdev import __version__
from localdev.core.config import DEFAULT_CONFIG_FILE, Config, init_config
from localdev.core.exceptions import LocalDevError
from localdev.core.reporter import ClickReporter
from localdev.services.link_service import LinkService
from localdev.utils.logger import setup_logging_from_env


class AliasedGroup(click.Group):
    """支持命令短别名的 Group（i / u / ls）"""

    aliases = {"i": "install", "u": "unlink", "ls": "list"}

    def get_command(self, ctx: click.Context, cmd_name: str) -> click.Command | None:
        return super().get_command(ctx, self.aliases.get(cmd_name, cmd_name))

    def resolve_command(
        self, ctx: click.Context, args: list[str],
    ) -> tuple[str | None, click.Command | None, list[str]]:
        _, cmd, rest = super().resolve_command(ctx, args)
        return (cmd.name if cmd else None), cmd, rest


@dataclass
class CliState:
    """命令间共享的上下文"""

    project_dir: Path
    config: Config


def _service(ctx: click.Context) -> LinkService:
    """按当前上下文构造服务"""
    state: CliState = ctx.find_object(CliState)
    return LinkService(state.project_dir, config=state.config, reporter=ClickReporter())


def _fail(ctx: click.Context, title: str, err: LocalDevError) -> NoReturn:
    """输出错误并以状态码 1 退出"""
    click.secho(f"\n❌ {title}: {err}", fg="red", bold=True, err=True)
    ctx.exit(1)


@click.group(cls=AliasedGroup)
@click.version_option(version=__version__, prog_name="local-dev")
@click.option(
    "--directory", "-C", default=".",
    type=click.Path(file_okay=False, path_type=Path),
    help="消费方工程目录（默认当前目录）",
)
@click.option("--config", "config_path", default=None, help=f"配置文件路径（默认 <目录>/{DEFAULT_CONFIG_FILE}）")
@click.pass_context
def main(ctx: click.Context, directory: Path, config_path: str | None) -> None:
    """local-dev - 自动链接并管理本地 NPM 依赖"""
    setup_logging_from_env()
    try:
        cfg = init_config(config_path or directory / DEFAULT_CONFIG_FILE)
    except LocalDevError as e:
        _fail(ctx, "配置错误", e)
    ctx.obj = CliState(project_dir=directory, config=cfg)


# 注册各领域子命令
from localdev.cli.cmd_install import register as _reg_install  # noqa: E402
from localdev.cli.cmd_list import register as _reg_list  # noqa: E402

_reg_install(main)
_reg_list(main)
