"""
Dockerfile 生成步骤

把固定的扫描镜像模板写入根目录。
"""

import os

from ...utils.logging import info, success, debug, LogStage
from secchecker.build.build_context import BuildContext, BuildError
from secchecker.build.template import DOCKERFILE_MODE, DOCKERFILE_TEMPLATE
from .build_step import BuildStep


def write_dockerfile(path: os.PathLike, content: str = DOCKERFILE_TEMPLATE) -> None:
    """写入 Dockerfile，文件已存在时截断覆盖（保留原有权限）"""
    fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, DOCKERFILE_MODE)
    with os.fdopen(fd, 'w', encoding='utf-8') as f:
        f.write(content)


class TemplateStep(BuildStep):
    """Dockerfile 生成步骤"""

    def __init__(self):
        super().__init__("template", "生成扫描镜像 Dockerfile")

    def execute(self, context: BuildContext) -> None:
        dockerfile_path = context.root / context.config.build.dockerfile
        info(f"写入 Dockerfile: {dockerfile_path}", stage=LogStage.TEMPLATE)

        try:
            write_dockerfile(dockerfile_path)
        except OSError as e:
            raise BuildError(f"无法写入 Dockerfile: {e}", stage=self.name) from e

        context.dockerfile_path = dockerfile_path
        debug(f"模板大小: {len(DOCKERFILE_TEMPLATE)} 字节", stage=LogStage.TEMPLATE)
        success("Dockerfile 已生成", stage=LogStage.TEMPLATE)
