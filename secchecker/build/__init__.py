"""构建服务模块

提供扫描镜像构建的核心功能。
"""

from .builder import Builder, BuildResult
from .build_context import BuildContext, BuildError
from .build_pipeline import BuildPipeline
from .selector import FileSelector, SelectionError, PatternError, select_files, match_name
from .archiver import ContextArchiver, ArchiveError, ArchiveResult, archive_context
from .engine import DockerEngine, EngineError, relay_stream
from .template import DOCKERFILE_TEMPLATE, DOCKERFILE_MODE, SECURITY_TOOLS

__all__ = [
    # 主构建器
    "Builder",
    "BuildResult",
    "BuildContext",
    "BuildError",
    "BuildPipeline",

    # 文件选择
    "FileSelector",
    "SelectionError",
    "PatternError",
    "select_files",
    "match_name",

    # 打包
    "ContextArchiver",
    "ArchiveError",
    "ArchiveResult",
    "archive_context",

    # Docker 引擎
    "DockerEngine",
    "EngineError",
    "relay_stream",

    # 模板
    "DOCKERFILE_TEMPLATE",
    "DOCKERFILE_MODE",
    "SECURITY_TOOLS",
]
