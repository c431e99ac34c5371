"""
构建上下文打包器

把根目录下的指定文件打包为未压缩的 tar 流，作为 Docker 构建上下文。
包含项先展开、去重并过滤掉不存在的文件，再交给 docker SDK 的
create_archive 写入 tar。
"""

import os
import tarfile
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import IO, List, Sequence, Set, Tuple, Union

from docker.utils.build import create_archive

from ..utils.logging import LogStage, get_stage_logger
from ..utils.paths import to_posix

archive_logger = get_stage_logger(LogStage.ARCHIVE)


class ArchiveError(Exception):
    """打包错误"""
    pass


@dataclass
class ArchiveResult:
    """打包结果，fileobj 已定位到开头"""
    fileobj: IO[bytes]
    members: List[str] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)
    size: int = 0

    def close(self) -> None:
        self.fileobj.close()


class ContextArchiver:
    """构建上下文打包器

    - 包含项为目录时递归打包
    - 包含项不存在时记录警告并跳过
    - 重复的包含项只写入一次
    """

    def archive(self, root: Union[str, Path], include_files: Sequence[str]) -> ArchiveResult:
        """打包根目录中的指定文件

        Args:
            root: 根目录
            include_files: 相对根目录的路径列表

        Returns:
            ArchiveResult: 打包结果

        Raises:
            ArchiveError: 打包失败
        """
        root_path = Path(root)
        if not root_path.is_dir():
            raise ArchiveError(f"根目录不存在或不是目录: {root_path}")

        fileobj = tempfile.NamedTemporaryFile()
        result = ArchiveResult(fileobj=fileobj)

        try:
            result.members, result.skipped = self.expand(root_path, include_files)
            create_archive(str(root_path), files=result.members, fileobj=fileobj)
            result.size = fileobj.seek(0, os.SEEK_END)
            fileobj.seek(0)
        except ArchiveError:
            fileobj.close()
            raise
        except (OSError, tarfile.TarError) as e:
            fileobj.close()
            raise ArchiveError(f"创建 tar 失败: {e}") from e

        return result

    def expand(self, root: Path, include_files: Sequence[str]) -> Tuple[List[str], List[str]]:
        """把包含列表展开为 tar 成员列表

        Returns:
            (members, skipped): 按包含顺序排列的成员名，以及不存在而跳过的包含项

        Raises:
            ArchiveError: 包含项位于根目录之外
            OSError: 目录无法读取
        """
        members: List[str] = []
        skipped: List[str] = []
        seen: Set[str] = set()

        for include in include_files:
            name = to_posix(os.path.normpath(include))
            if name.startswith('../') or name == '..' or os.path.isabs(name):
                raise ArchiveError(f"包含项位于根目录之外: {include}")

            source = root / name
            if not os.path.lexists(source):
                archive_logger.warning(f"文件不存在，已跳过: {name}")
                skipped.append(name)
                continue

            self._collect(source, name, seen, members)

        return members, skipped

    def _collect(self, source: Path, name: str, seen: Set[str], members: List[str]) -> None:
        if name in seen:
            archive_logger.debug(f"重复的包含项，已忽略: {name}")
            return

        seen.add(name)
        members.append(name)

        if source.is_dir() and not source.is_symlink():
            for child in sorted(os.listdir(source)):
                self._collect(source / child, f"{name}/{child}", seen, members)


def archive_context(root: Union[str, Path], include_files: Sequence[str]) -> ArchiveResult:
    """便捷函数：打包构建上下文"""
    return ContextArchiver().archive(root, include_files)
