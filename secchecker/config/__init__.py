"""配置和 Schema 模块

提供 YAML 配置文件的加载与验证。
"""

from .schema import ScanConfig, BuildOptions, EngineModel
from .loader import (
    ConfigLoader,
    ConfigValidationError,
    ConfigError,
    load_config,
    config_loader,
)

__all__ = [
    "ScanConfig",
    "BuildOptions",
    "EngineModel",
    "ConfigLoader",

    # 异常类
    "ConfigError",
    "ConfigValidationError",

    "load_config",
    "config_loader",
]
