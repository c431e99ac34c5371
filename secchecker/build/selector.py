"""
文件选择器

深度优先遍历根目录，按文件名 glob 模式选出文件，返回相对根目录的路径列表。
"""

import os
import re
from functools import lru_cache
from pathlib import Path
from typing import Dict, Iterator, List, Pattern, Tuple, Union

from ..utils.paths import to_posix


class SelectionError(Exception):
    """目录遍历错误（目录不可读、路径无法相对化等）"""
    pass


class PatternError(SelectionError):
    """glob 模式语法错误"""
    pass


def _read_class(pattern: str, start: int) -> Tuple[str, int]:
    """解析 [...] 字符类，返回正则片段和 ']' 之后的位置

    支持 [^...] / [!...] 取反、a-z 区间和反斜杠转义。
    """
    i = start + 1
    negate = False
    if i < len(pattern) and pattern[i] in '^!':
        negate = True
        i += 1

    items: List[str] = []
    nrange = 0
    while True:
        if i >= len(pattern):
            raise PatternError(f"字符类未闭合: {pattern!r}")
        if pattern[i] == ']' and nrange > 0:
            i += 1
            break
        lo, i = _read_class_char(pattern, i)
        hi = lo
        if i < len(pattern) and pattern[i] == '-':
            hi, i = _read_class_char(pattern, i + 1)
        nrange += 1
        # 反向区间合法但永远不匹配
        if lo <= hi:
            items.append(re.escape(lo) if lo == hi else f"{re.escape(lo)}-{re.escape(hi)}")

    if not items:
        return ('.' if negate else '(?!)'), i
    return f"[{'^' if negate else ''}{''.join(items)}]", i


def _read_class_char(pattern: str, i: int) -> Tuple[str, int]:
    if i >= len(pattern):
        raise PatternError(f"字符类未闭合: {pattern!r}")
    ch = pattern[i]
    if ch in '-]':
        raise PatternError(f"字符类中 {ch!r} 需要转义: {pattern!r}")
    if ch == '\\':
        i += 1
        if i >= len(pattern):
            raise PatternError(f"模式以转义符结尾: {pattern!r}")
        ch = pattern[i]
    return ch, i + 1


@lru_cache(maxsize=64)
def compile_pattern(pattern: str) -> Pattern[str]:
    """将 shell glob 模式编译为正则表达式（区分大小写，不支持 **）

    Raises:
        PatternError: 模式语法错误
    """
    parts: List[str] = []
    i = 0
    while i < len(pattern):
        ch = pattern[i]
        if ch == '*':
            parts.append('.*')
            i += 1
        elif ch == '?':
            parts.append('.')
            i += 1
        elif ch == '[':
            fragment, i = _read_class(pattern, i)
            parts.append(fragment)
        elif ch == '\\':
            if i + 1 >= len(pattern):
                raise PatternError(f"模式以转义符结尾: {pattern!r}")
            parts.append(re.escape(pattern[i + 1]))
            i += 2
        else:
            parts.append(re.escape(ch))
            i += 1

    return re.compile(''.join(parts), re.DOTALL)


def match_name(pattern: str, name: str) -> bool:
    """文件名是否匹配 glob 模式"""
    return compile_pattern(pattern).fullmatch(name) is not None


class FileSelector:
    """文件选择器

    只选择非目录项，目录本身不进入结果但会继续遍历其内容。
    任何遍历错误都会中止整个选择，不返回部分结果。
    """

    def __init__(self):
        self.matches: List[str] = []
        self.files_visited: int = 0
        self.directories_visited: int = 0

    def select(self, root: Union[str, Path], pattern: str) -> List[str]:
        """选择匹配的文件

        Args:
            root: 根目录
            pattern: glob 模式，只匹配文件名（不含目录部分）

        Returns:
            List[str]: 相对根目录的路径（正斜杠分隔），按遍历顺序排列

        Raises:
            PatternError: 模式语法错误
            SelectionError: 根目录不存在或遍历失败
        """
        regex = compile_pattern(pattern)
        root_path = Path(root)

        self.matches = []
        self.files_visited = 0
        self.directories_visited = 0

        if not root_path.exists():
            raise SelectionError(f"根目录不存在: {root_path}")

        matches: List[str] = []
        for entry, is_dir in self._walk(root_path, root_path.is_dir()):
            if is_dir:
                self.directories_visited += 1
                continue

            self.files_visited += 1
            if regex.fullmatch(entry.name) is None:
                continue

            try:
                relative = entry.relative_to(root_path)
            except ValueError as e:
                raise SelectionError(f"无法计算相对路径: {entry}") from e
            matches.append(to_posix(relative))

        self.matches = matches
        return list(matches)

    def get_statistics(self) -> Dict[str, int]:
        """获取选择统计信息"""
        return {
            'files_visited': self.files_visited,
            'directories_visited': self.directories_visited,
            'matched_files': len(self.matches),
        }

    def _walk(self, path: Path, is_dir: bool) -> Iterator[Tuple[Path, bool]]:
        """深度优先遍历，先返回目录本身，子项按名称排序

        根目录以下的符号链接不跟随，按普通文件处理。
        """
        yield path, is_dir

        if not is_dir:
            return

        try:
            children = sorted(os.scandir(path), key=lambda item: item.name)
        except OSError as e:
            raise SelectionError(f"无法读取目录 {path}: {e}") from e

        for child in children:
            yield from self._walk(path / child.name, child.is_dir(follow_symlinks=False))


def select_files(root: Union[str, Path], pattern: str) -> List[str]:
    """便捷函数：选择文件"""
    return FileSelector().select(root, pattern)
