"""
扫描镜像构建命令

构建日志原样写入 stdout，诊断信息写入 stderr。
"""

import sys
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape

from ... import __version__
from ...build.builder import Builder
from ...config import ScanConfig, load_config, ConfigError, ConfigValidationError
from ...utils.logging import configure_logging, set_log_file, OutputLevel


console = Console(stderr=True)


def version_callback(value: bool) -> None:
    """显示版本信息"""
    if value:
        typer.echo(f"secchecker v{__version__}")
        raise typer.Exit()


def scan_command(
    path: str = typer.Option(".", "--path", help="包含 Go 源码的目录"),
    config: Optional[str] = typer.Option(None, "--config", "-c", help="YAML 配置文件路径（可选）"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="输出详细调试日志 (DEBUG 级别)"),
    log_file: Optional[str] = typer.Option(None, "--log-file", help="日志输出文件"),
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        callback=version_callback,
        is_eager=True,
        help="显示版本信息",
    ),
) -> None:
    """生成 Dockerfile 并构建扫描镜像

    示例:
        secchecker --path ./myservice
        secchecker --path . -c secchecker.yaml -v
    """
    # 初始化日志：在任何输出前设置
    configure_logging(level=OutputLevel.DEBUG if verbose else OutputLevel.INFO)

    if log_file:
        try:
            set_log_file(log_file)
        except OSError:
            console.print(f"[yellow]无法写入日志文件: {log_file}[/yellow]")

    try:
        scan_config = load_config(config) if config else ScanConfig()
    except ConfigValidationError as e:
        console.print("[red]配置验证失败:[/red]")
        console.print(e.format_errors(), markup=False)
        raise typer.Exit(1)
    except ConfigError as e:
        console.print(f"[red]配置错误[/red]: {escape(str(e))}")
        raise typer.Exit(1)

    builder = Builder()
    result = builder.build(Path(path), scan_config, output=sys.stdout.buffer)

    # 失败原因已由构建管道输出（含失败阶段）
    if not result.success:
        raise typer.Exit(1)
