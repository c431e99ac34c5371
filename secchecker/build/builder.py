"""
构建器主类

对外提供统一的构建接口，把构建管道的异常转换为构建结果。
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import BinaryIO, List, Optional, Union

from ..config.schema import ScanConfig
from .build_context import BuildError
from .build_pipeline import BuildPipeline
from .steps.client_step import EngineFactory


@dataclass
class BuildResult:
    """构建结果"""
    success: bool
    root: Optional[Path] = None
    included_files: List[str] = field(default_factory=list)
    context_size: int = 0
    bytes_relayed: int = 0
    build_time: Optional[float] = None
    error: Optional[str] = None
    stage: Optional[str] = None


class Builder:
    """扫描镜像构建器"""

    def __init__(self, engine_factory: Optional[EngineFactory] = None):
        self.pipeline = BuildPipeline(engine_factory)

    def build(
        self,
        root: Union[str, Path],
        config: Optional[ScanConfig] = None,
        output: Optional[BinaryIO] = None,
    ) -> BuildResult:
        """构建扫描镜像

        失败不会抛出异常，而是返回 success=False 的结果，由调用方决定退出方式。
        """
        try:
            context = self.pipeline.execute(root, config, output)
        except BuildError as e:
            return BuildResult(success=False, root=Path(root), error=str(e), stage=e.stage)

        stats = context.build_stats
        return BuildResult(
            success=True,
            root=context.root,
            included_files=list(context.inclusion_list or []),
            context_size=stats['context_size'],
            bytes_relayed=context.bytes_relayed,
            build_time=stats['end_time'] - stats['start_time'],
        )
