"""
文件选择步骤

选出源码文件并拼接固定的清单文件，形成构建上下文的包含列表。
"""

from typing import List

from ...utils.logging import info, success, debug, LogStage
from secchecker.build.build_context import BuildContext, BuildError
from secchecker.build.selector import FileSelector, PatternError, SelectionError
from .build_step import BuildStep

def assemble_inclusion_list(matched: List[str], manifest_files: List[str], dockerfile: str) -> List[str]:
    """源码文件 + 清单文件 + Dockerfile，按原样拼接不去重"""
    return [*matched, *manifest_files, dockerfile]

class FileSelectionStep(BuildStep):
    """文件选择步骤"""

    def __init__(self):
        super().__init__("select", "选择要打包的源码文件")
        self.selector = FileSelector()

    def execute(self, context: BuildContext) -> None:
        pattern = context.config.pattern
        info(f"遍历 {context.root}，匹配模式: {pattern}", stage=LogStage.SELECT)

        try:
            matched = self.selector.select(context.root, pattern)
        except PatternError as e:
            raise BuildError(f"匹配模式无效: {e}", stage=self.name) from e
        except SelectionError as e:
            raise BuildError(f"无法遍历文件: {e}", stage=self.name) from e

        context.matched_files = matched
        context.inclusion_list = assemble_inclusion_list(
            matched,
            context.config.manifest_files,
            context.config.build.dockerfile,
        )
        context.build_stats['matched_files'] = len(matched)
        context.build_stats['included_files'] = len(context.inclusion_list)

        stats = self.selector.get_statistics()
        success(f"文件选择完成: 匹配 {len(matched)} 个", stage=LogStage.SELECT)
        debug(f"  遍历文件: {stats['files_visited']}, 目录: {stats['directories_visited']}", stage=LogStage.SELECT)

        # 在 DEBUG 级别输出前 20 个文件用于诊断
        for idx, name in enumerate(context.inclusion_list[:20]):
            debug(f"包含[{idx}]: {name}", stage=LogStage.SELECT)
        if len(context.inclusion_list) > 20:
            debug(f"... 还有 {len(context.inclusion_list) - 20} 个文件未列出", stage=LogStage.SELECT)
