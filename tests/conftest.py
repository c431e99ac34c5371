"""测试公共夹具"""

import errno
import io
import os
import threading
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from pathlib import Path

import pytest

from secchecker.utils.logging import close_logger, configure_logging


@pytest.fixture(autouse=True)
def quiet_logging():
    """诊断输出写入内存，避免干扰被测的 stdout"""
    stream = io.StringIO()
    configure_logging(level="DEBUG", enable_colors=False, stream=stream)
    yield stream
    close_logger()


@pytest.fixture
def go_tree(tmp_path):
    """场景 A：main.go、util/helper.go、go.mod、go.sum"""
    (tmp_path / "main.go").write_text("package main\n")
    (tmp_path / "util").mkdir()
    (tmp_path / "util" / "helper.go").write_text("package util\n")
    (tmp_path / "go.mod").write_text("module example.com/demo\n")
    (tmp_path / "go.sum").write_text("")
    return tmp_path


class FakeStream:
    """模拟 docker SDK 返回的构建日志流"""

    def __init__(self, chunks, error=None):
        self._chunks = iter(chunks)
        self._error = error
        self.closed = False

    def __iter__(self):
        return self

    def __next__(self):
        try:
            return next(self._chunks)
        except StopIteration:
            if self._error is not None:
                raise self._error
            raise

    def close(self):
        self.closed = True


@pytest.fixture
def make_stream():
    return FakeStream


@pytest.fixture
def deny_scandir(monkeypatch):
    """对指定目录的 os.scandir 抛出 PermissionError，与当前用户是否为 root 无关

    返回登记函数，调用时传入要拒绝读取的目录。
    """
    real_scandir = os.scandir
    denied = set()

    def scandir(path="."):
        if Path(path) in denied:
            raise PermissionError(errno.EACCES, "Permission denied", str(path))
        return real_scandir(path)

    monkeypatch.setattr("secchecker.build.selector.os.scandir", scandir)
    return denied.add


class _EngineHandler(BaseHTTPRequestHandler):
    """对所有 POST 请求返回固定状态码和 JSON 内容"""

    status = 500
    body = b"{}"
    paths = None

    def do_POST(self):
        self._drain_body()
        self.paths.append(self.path)
        self.send_response(self.status)
        self.send_header("Content-Type", "application/json")
        self.send_header("Content-Length", str(len(self.body)))
        self.end_headers()
        self.wfile.write(self.body)

    def _drain_body(self):
        if self.headers.get("Transfer-Encoding", "").lower() == "chunked":
            while True:
                size = int(self.rfile.readline().split(b";")[0], 16)
                self.rfile.read(size + 2)
                if size == 0:
                    return
        self.rfile.read(int(self.headers.get("Content-Length") or 0))

    def log_message(self, format, *args):
        pass


@pytest.fixture
def engine_server():
    """本地 HTTP 服务，扮演对构建请求返回固定响应的 Docker 引擎

    调用 engine_server(status, body) 启动，返回 (base_url, 已收到的请求路径列表)。
    """
    servers = []

    def start(status, body):
        paths = []
        handler = type("EngineHandler", (_EngineHandler,), {"status": status, "body": body, "paths": paths})
        server = ThreadingHTTPServer(("127.0.0.1", 0), handler)
        threading.Thread(target=server.serve_forever, daemon=True).start()
        servers.append(server)
        host, port = server.server_address[:2]
        return f"tcp://{host}:{port}", paths

    yield start

    for server in servers:
        server.shutdown()
        server.server_close()
