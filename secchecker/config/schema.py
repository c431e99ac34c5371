"""
配置 Schema 定义

使用 Pydantic 定义扫描镜像构建的配置模型。所有默认值即为内置的固定行为，
不提供配置文件时与默认实例完全一致。
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, field_validator

DEFAULT_IMAGE_TAG = "secchecker"
DEFAULT_DOCKERFILE_NAME = "Dockerfile"
DEFAULT_SOURCE_PATTERN = "*.go"
DEFAULT_MANIFEST_FILES = ["go.mod", "go.sum"]


class BuildOptions(BaseModel):
    """镜像构建选项（一次性传给 Docker 构建接口）"""
    model_config = {"extra": "forbid"}

    tag: str = Field(DEFAULT_IMAGE_TAG, description="镜像标签（docker SDK 的构建接口只接受一个标签）", min_length=1)
    dockerfile: str = Field(DEFAULT_DOCKERFILE_NAME, description="生成到根目录并用于构建的 Dockerfile 名称", min_length=1)
    pull_parent: bool = Field(True, description="是否总是拉取最新的基础镜像")
    labels: Dict[str, str] = Field(
        default_factory=lambda: {"custom": "test"},
        description="镜像元数据 (LABEL)",
    )

    @field_validator('tag')
    @classmethod
    def validate_tag(cls, v: str) -> str:
        """验证镜像标签"""
        v = v.strip()
        if not v:
            raise ValueError("镜像标签不能为空")
        if any(ch.isspace() for ch in v):
            raise ValueError("镜像标签不能包含空白字符")
        return v

    @field_validator('dockerfile')
    @classmethod
    def validate_dockerfile(cls, v: str) -> str:
        """Dockerfile 必须直接位于根目录下"""
        if '/' in v or '\\' in v or v in ('.', '..'):
            raise ValueError("Dockerfile 名称不能包含路径分隔符")
        return v

    @property
    def tags(self) -> List[str]:
        return [self.tag]


class EngineModel(BaseModel):
    """Docker 引擎连接配置

    均为空时完全交给 docker SDK 的环境变量发现 (DOCKER_HOST 等)。
    """
    model_config = {"extra": "forbid"}

    base_url: Optional[str] = Field(None, description="Docker 守护进程地址，例如 unix:///var/run/docker.sock")
    timeout: Optional[int] = Field(None, description="API 超时时间（秒）", ge=1, le=86400)


class ScanConfig(BaseModel):
    """secchecker 主配置模型"""

    pattern: str = Field(DEFAULT_SOURCE_PATTERN, description="源码文件匹配模式（仅匹配文件名）", min_length=1)
    manifest_files: List[str] = Field(
        default_factory=lambda: list(DEFAULT_MANIFEST_FILES),
        description="固定附加到构建上下文的清单文件",
    )
    build: BuildOptions = Field(default_factory=BuildOptions, description="镜像构建选项")
    engine: EngineModel = Field(default_factory=EngineModel, description="Docker 引擎连接配置")

    model_config = {
        "extra": "forbid",
        "validate_assignment": True,
        "str_strip_whitespace": True,
    }

    def to_dict(self) -> Dict[str, Any]:
        """转换为字典格式"""
        return self.model_dump(exclude_none=True)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ScanConfig':
        """从字典创建配置实例"""
        return cls.model_validate(data)
