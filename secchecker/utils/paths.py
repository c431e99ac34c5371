"""
路径工具

提供路径处理相关的工具函数。
"""

from pathlib import PurePath
from typing import Union


def to_posix(path: Union[str, PurePath]) -> str:
    """统一使用正斜杠的路径字符串（tar 成员名格式）"""
    return str(path).replace('\\', '/')


def format_size(size_bytes: int) -> str:
    """格式化文件大小

    Args:
        size_bytes: 字节数

    Returns:
        str: 格式化的大小字符串
    """
    if size_bytes == 0:
        return "0 B"

    units = ["B", "KB", "MB", "GB", "TB"]
    unit_index = 0
    size = float(size_bytes)

    while size >= 1024.0 and unit_index < len(units) - 1:
        size /= 1024.0
        unit_index += 1

    if unit_index == 0:
        return f"{int(size)} {units[unit_index]}"
    else:
        return f"{size:.1f} {units[unit_index]}"
