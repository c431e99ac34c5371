"""
secchecker - Go 源码安全扫描镜像构建工具

Generates a Dockerfile with gosec, govulncheck and safesql, packs the Go
sources into a build context and builds the scanner image via Docker.
"""

__version__ = "0.1.0"
__license__ = "MIT"

# 导出主要 API
from .config.schema import ScanConfig
from .build.builder import Builder

__all__ = ["ScanConfig", "Builder", "__version__"]
