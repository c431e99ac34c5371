"""
构建上下文模块

定义构建过程中的共享数据结构和异常类。
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any, BinaryIO, Dict, List, Optional, TYPE_CHECKING

from ..config.schema import ScanConfig

if TYPE_CHECKING:
    from .archiver import ArchiveResult
    from .engine import DockerEngine


@dataclass
class BuildContext:
    """构建上下文，包含构建过程中的共享数据"""
    root: Path
    config: ScanConfig
    output: BinaryIO

    # 构建过程中生成的数据
    dockerfile_path: Optional[Path] = None
    matched_files: Optional[List[str]] = None
    inclusion_list: Optional[List[str]] = None
    archive: Optional['ArchiveResult'] = None
    engine: Optional['DockerEngine'] = None
    bytes_relayed: int = 0

    # 统计信息
    build_stats: Dict[str, Any] = None  # type: ignore

    def __post_init__(self):
        if self.build_stats is None:
            self.build_stats = {
                'start_time': 0,
                'end_time': 0,
                'matched_files': 0,
                'included_files': 0,
                'context_size': 0,
                'bytes_relayed': 0,
            }

    def release(self) -> None:
        """释放构建上下文和引擎客户端"""
        if self.archive is not None:
            self.archive.close()
            self.archive = None
        if self.engine is not None:
            self.engine.close()
            self.engine = None


class BuildError(Exception):
    """构建错误，stage 标明失败的阶段"""

    def __init__(self, message: str, stage: Optional[str] = None):
        super().__init__(message)
        self.stage = stage
