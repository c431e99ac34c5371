"""
镜像构建步骤

提交构建上下文，并把构建日志原样转发到输出。
"""

from ...utils import format_size
from ...utils.logging import info, success, LogStage
from secchecker.build.build_context import BuildContext, BuildError
from secchecker.build.engine import EngineError, relay_stream
from .build_step import BuildStep

class ImageBuildStep(BuildStep):
    """镜像构建步骤"""

    def __init__(self):
        super().__init__("build", "构建扫描镜像")

    def execute(self, context: BuildContext) -> None:
        if context.archive is None or context.engine is None:
            raise BuildError("构建上下文或客户端未就绪", stage=self.name)

        options = context.config.build
        info(
            f"构建镜像 {options.tag} (dockerfile={options.dockerfile}, pull={options.pull_parent})",
            stage=LogStage.BUILD,
        )

        try:
            stream = context.engine.build_image(context.archive.fileobj, options)
        except EngineError as e:
            raise BuildError(f"无法构建镜像: {e}", stage=self.name) from e

        try:
            context.bytes_relayed = relay_stream(stream, context.output)
        except EngineError as e:
            raise BuildError(f"无法读取构建输出: {e}", stage="relay") from e

        context.build_stats['bytes_relayed'] = context.bytes_relayed
        success(f"构建日志转发完成: {format_size(context.bytes_relayed)}", stage=LogStage.BUILD)
