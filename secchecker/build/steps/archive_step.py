"""
构建上下文打包步骤
"""

from ...utils import format_size
from ...utils.logging import info, success, LogStage
from secchecker.build.archiver import ArchiveError, ContextArchiver
from secchecker.build.build_context import BuildContext, BuildError
from .build_step import BuildStep


class ArchiveStep(BuildStep):
    """构建上下文打包步骤"""

    def __init__(self):
        super().__init__("archive", "打包构建上下文")
        self.archiver = ContextArchiver()

    def execute(self, context: BuildContext) -> None:
        if context.inclusion_list is None:
            raise BuildError("包含列表为空，无法打包", stage=self.name)

        info(f"打包 {len(context.inclusion_list)} 个包含项", stage=LogStage.ARCHIVE)

        try:
            context.archive = self.archiver.archive(context.root, context.inclusion_list)
        except ArchiveError as e:
            raise BuildError(f"无法创建 tar: {e}", stage=self.name) from e

        context.build_stats['context_size'] = context.archive.size
        success(
            f"构建上下文已打包: {len(context.archive.members)} 项, {format_size(context.archive.size)}",
            stage=LogStage.ARCHIVE,
        )
