"""
secchecker CLI 主入口

单一命令：在 --path 指定的 Go 源码目录中生成 Dockerfile 并构建安全扫描镜像。
"""

import typer

from .commands import scan


app = typer.Typer(
    name="secchecker",
    help="secchecker - 构建 Go 源码安全扫描镜像 (gosec / govulncheck / safesql)",
    rich_markup_mode="rich",
    add_completion=False,
)

# 只注册一个命令，typer 会直接运行它而不需要子命令名
app.command(help="生成 Dockerfile 并构建扫描镜像")(scan.scan_command)


if __name__ == "__main__":
    app()
