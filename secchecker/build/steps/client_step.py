"""
Docker 客户端初始化步骤
"""

from typing import Callable, Optional

from ...utils.logging import info, success, LogStage
from secchecker.build.build_context import BuildContext, BuildError
from secchecker.build.engine import DockerEngine, EngineError
from secchecker.config.schema import EngineModel
from .build_step import BuildStep

EngineFactory = Callable[[Optional[EngineModel]], DockerEngine]


class ClientStep(BuildStep):
    """Docker 客户端初始化步骤"""

    def __init__(self, engine_factory: Optional[EngineFactory] = None):
        super().__init__("client", "初始化 Docker 客户端")
        self.engine_factory = engine_factory or DockerEngine.from_config

    def execute(self, context: BuildContext) -> None:
        engine_config = context.config.engine
        info(f"连接 Docker 引擎: {engine_config.base_url or '环境默认'}", stage=LogStage.CLIENT)

        try:
            context.engine = self.engine_factory(engine_config)
        except EngineError as e:
            raise BuildError(f"无法初始化客户端: {e}", stage=self.name) from e

        success("Docker 客户端已就绪", stage=LogStage.CLIENT)
