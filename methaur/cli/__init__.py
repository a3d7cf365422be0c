"""methaur 命令行接口

单命令入口：
    methaur -S <查询>   搜索官方仓库 + AUR，选择后安装
    methaur -R <包名>   卸载
"""

from __future__ import annotations

import logging
from typing import Any, NoReturn

import click

from methaur import __version__
from methaur.cli.display import render_results
from methaur.cli.prompts import ClickDecisions
from methaur.core.config import init_config
from methaur.core.decisions import AutoDecisions
from methaur.core.exceptions import MethaurError
from methaur.core.models import BuildOptions
from methaur.services.container import ServiceContainer
from methaur.utils.logger import setup_from_env

logger = logging.getLogger(__name__)

EPILOG = """\b
示例:
  methaur -S yay            搜索并安装 yay
  methaur foo-git           不带 -S 时默认同步安装
  methaur -S -c foo-git     安装后卸载仅为构建而装的依赖
  methaur -R foo-git        卸载 foo-git
  methaur --noconfirm -S x  非交互模式（结果唯一时自动选择）
"""


class MethaurCommand(click.Command):
    """用法错误统一以退出码 1 结束"""

    def parse_args(self, ctx: click.Context, args: list[str]) -> list[str]:
        try:
            return super().parse_args(ctx, args)
        except click.UsageError as e:
            e.exit_code = 1
            raise


def _fail(ctx: click.Context, message: str) -> NoReturn:
    click.echo(f"错误 {message}", err=True)
    ctx.exit(1)


@click.command(
    cls=MethaurCommand,
    context_settings={"help_option_names": ["-h", "--help"]},
    epilog=EPILOG,
)
@click.option("-S", "--sync", is_flag=True, help="搜索并安装包")
@click.option("-R", "--remove", is_flag=True, help="卸载包")
@click.option("-c", "--clean", is_flag=True, help="构建成功后卸载仅为构建而装的依赖，并清理遗留台账")
@click.option("--noconfirm", is_flag=True, help="非交互模式")
@click.option("--config", "config_path", default=None, help="配置文件路径")
@click.argument("target", required=False)
@click.version_option(version=__version__)
@click.pass_context
def main(
    ctx: click.Context, sync: bool, remove: bool, clean: bool,
    noconfirm: bool, config_path: str | None, target: str | None,
) -> None:
    """methaur - AUR 包构建与安装助手"""
    setup_from_env()
    if sync and remove:
        _fail(ctx, "-S 与 -R 不能同时使用")
    if not target:
        click.echo(ctx.get_usage(), err=True)
        _fail(ctx, "缺少包名或搜索关键字")

    options = BuildOptions(
        remove_build_deps=clean, sync=sync, remove=remove, noconfirm=noconfirm,
    )
    decisions: Any = AutoDecisions() if noconfirm else ClickDecisions()
    try:
        container = ServiceContainer(config=init_config(config_path), decisions=decisions)
        _dispatch(ctx, container, target, options)
    except MethaurError as e:
        logger.debug("命令失败", exc_info=True)
        _fail(ctx, e.describe())


def _dispatch(
    ctx: click.Context, container: ServiceContainer, target: str, options: BuildOptions,
) -> None:
    svc = container.sync
    run_ctx = svc.start(options)

    if options.remove:
        svc.remove(target)
        click.echo(f"已卸载: {target}")
        return

    results = svc.search(target)
    if not results:
        _fail(ctx, f"未找到匹配的包: {target}")

    click.echo(render_results(results))
    count = len(results)
    selection = container.decisions.choose(f"输入要安装的包序号 (1-{count})，0 取消", count)
    if selection <= 0 or selection > count:
        click.echo("已取消")
        return

    pkg = results[selection - 1]
    report = svc.install(pkg, options, run_ctx)
    if report is not None and report.skipped:
        click.echo(f"未重新安装: {pkg.name}")
    else:
        click.echo(f"安装完成: {pkg.name}")
