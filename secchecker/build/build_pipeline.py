"""
构建管道模块

使用管道模式依次执行构建步骤：生成 Dockerfile → 选择文件 → 打包上下文
→ 初始化客户端 → 构建镜像并转发日志。任一步骤失败即中止，不重试。
"""

import sys
import time
from pathlib import Path
from typing import BinaryIO, List, Optional, Union

from ..config.schema import ScanConfig
from ..utils.logging import info, success, error, debug, LogStage
from .build_context import BuildContext, BuildError
from .steps.build_step import BuildStep
from .steps.template_step import TemplateStep
from .steps.file_selection_step import FileSelectionStep
from .steps.archive_step import ArchiveStep
from .steps.client_step import ClientStep, EngineFactory
from .steps.image_build_step import ImageBuildStep


class BuildPipeline:
    """构建管道，负责协调构建步骤的执行"""

    def __init__(self, engine_factory: Optional[EngineFactory] = None):
        self.engine_factory = engine_factory
        self._steps: List[BuildStep] = []
        self._init_default_steps()

    def _init_default_steps(self):
        # 客户端在打包之后创建：docker.from_env 会探测引擎版本，
        # 根目录不可读时应在任何网络请求之前失败
        self._steps = [
            TemplateStep(),
            FileSelectionStep(),
            ArchiveStep(),
            ClientStep(self.engine_factory),
            ImageBuildStep(),
        ]

    def get_steps(self) -> List[BuildStep]:
        """获取所有构建步骤"""
        return self._steps.copy()

    def execute(
        self,
        root: Union[str, Path],
        config: Optional[ScanConfig] = None,
        output: Optional[BinaryIO] = None,
    ) -> BuildContext:
        """执行构建管道

        Args:
            root: 要扫描的根目录
            config: 配置对象，默认使用内置配置
            output: 构建日志输出，默认 stdout

        Returns:
            BuildContext: 构建上下文，包含所有构建结果

        Raises:
            BuildError: 构建失败，stage 为失败的步骤名
        """
        context = BuildContext(
            root=Path(root),
            config=config or ScanConfig(),
            output=output if output is not None else sys.stdout.buffer,
        )
        context.build_stats['start_time'] = time.time()

        info(f"开始构建扫描镜像: {context.root}", stage=LogStage.INIT)
        debug(
            f"构建配置: pattern={context.config.pattern} tag={context.config.build.tag} "
            f"manifests={context.config.manifest_files}",
            stage=LogStage.INIT,
        )

        current = None
        try:
            for step in self._steps:
                current = step
                info(f"执行步骤: {step.description}", stage=LogStage.INIT)
                step.execute(context)
        except BuildError as e:
            if e.stage is None and current is not None:
                e.stage = current.name
            error(f"[{e.stage}] {e}", stage=LogStage.DONE)
            raise
        except Exception as e:
            stage = current.name if current is not None else None
            error(f"[{stage}] {e}", stage=LogStage.DONE)
            raise BuildError(str(e), stage=stage) from e
        finally:
            context.build_stats['end_time'] = time.time()
            context.release()

        build_time = context.build_stats['end_time'] - context.build_stats['start_time']
        success(f"扫描镜像构建完成: {context.config.build.tag}", stage=LogStage.DONE)
        info(f"构建时间: {build_time:.1f}秒", stage=LogStage.DONE)
        return context
