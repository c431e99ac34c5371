"""
Docker 引擎封装

负责创建 docker SDK 客户端、提交镜像构建请求并原样转发构建日志。
"""

import itertools
from contextlib import closing
from typing import IO, Any, Iterable, Iterator, Optional

import docker
import requests
from docker.errors import DockerException

from ..config.schema import BuildOptions, EngineModel


class EngineError(Exception):
    """Docker 引擎错误"""
    pass


class BuildStream:
    """构建日志流

    docker SDK 在读取第一个数据块时才检查 HTTP 状态，提交时已预读该数据块，
    这里把它放回流的开头。close() 关闭底层响应。
    """

    def __init__(self, first: Optional[bytes], stream: Iterable[bytes]):
        head = [] if first is None else [first]
        self._chunks = itertools.chain(head, stream)
        self._stream = stream

    def __iter__(self) -> Iterator[bytes]:
        return self._chunks

    def close(self) -> None:
        close = getattr(self._stream, 'close', None)
        if close is not None:
            close()


class DockerEngine:
    """Docker 镜像构建服务"""

    def __init__(self, client: Any):
        self.client = client

    @classmethod
    def from_config(cls, engine: Optional[EngineModel] = None) -> 'DockerEngine':
        """按配置创建客户端，未指定地址时使用 docker SDK 的环境发现

        Raises:
            EngineError: 客户端初始化失败
        """
        engine = engine or EngineModel()
        kwargs = {}
        if engine.timeout:
            kwargs['timeout'] = engine.timeout

        try:
            if engine.base_url:
                client = docker.DockerClient(base_url=engine.base_url, **kwargs)
            else:
                client = docker.from_env(**kwargs)
        except DockerException as e:
            raise EngineError(f"无法初始化 Docker 客户端: {e}") from e

        return cls(client)

    def build_image(self, context_file: IO[bytes], options: BuildOptions) -> BuildStream:
        """提交构建请求

        引擎拒绝构建（HTTP 4xx/5xx）时在这里报错，而不是在转发日志时。

        Args:
            context_file: tar 格式的构建上下文
            options: 构建选项

        Returns:
            BuildStream: 原始构建日志字节流

        Raises:
            EngineError: 提交失败或引擎拒绝构建
        """
        try:
            stream = self.client.api.build(
                fileobj=context_file,
                custom_context=True,
                tag=options.tag,
                dockerfile=options.dockerfile,
                pull=options.pull_parent,
                labels=options.labels,
                decode=False,
            )
        except (DockerException, requests.exceptions.RequestException) as e:
            raise EngineError(f"无法提交镜像构建: {e}") from e

        try:
            first = next(iter(stream), None)
        except (DockerException, requests.exceptions.RequestException) as e:
            BuildStream(None, stream).close()
            raise EngineError(f"镜像构建被拒绝: {e}") from e

        return BuildStream(first, stream)

    def close(self) -> None:
        self.client.close()


def relay_stream(stream: Iterable[bytes], sink: IO[bytes]) -> int:
    """把构建日志原样写入输出，直到流结束

    无论成功或失败都会关闭响应流。

    Returns:
        int: 转发的字节数

    Raises:
        EngineError: 读取或写入失败
    """
    total = 0
    with closing(stream):
        try:
            for chunk in stream:
                sink.write(chunk)
                total += len(chunk)
            sink.flush()
        except (DockerException, requests.exceptions.RequestException, OSError) as e:
            raise EngineError(f"无法读取镜像构建输出: {e}") from e
    return total
