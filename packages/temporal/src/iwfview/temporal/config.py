"""TemporalConfig -- Temporal 连接配置加载

从环境变量加载配置，API key 只以 SecretStr 保存。
"""

import os

import structlog
from pydantic import BaseModel, Field, SecretStr

log = structlog.get_logger()

DEFAULT_TIMEOUT_S = 10


class TemporalConfig(BaseModel):
    """Temporal 连接配置 -- 从环境变量加载

    环境变量:
        TEMPORAL_HOST_PORT: 前端服务地址（默认 localhost:7233）
        TEMPORAL_NAMESPACE: 命名空间（默认 default）
        TEMPORAL_API_KEY: Temporal Cloud API key，设置后启用 TLS
        IWFVIEW_TEMPORAL_TIMEOUT_S: 单次 RPC 超时（秒，默认 10）
    """

    host_port: str = Field(
        default="localhost:7233",
        description="Temporal 前端服务地址",
    )
    namespace: str = Field(
        default="default",
        description="Temporal 命名空间",
    )
    api_key: SecretStr = Field(
        default=SecretStr(""),
        description="Temporal Cloud API key（为空表示不鉴权）",
    )
    timeout_s: int = Field(
        default=DEFAULT_TIMEOUT_S,
        ge=1,
        description="单次 RPC 超时（秒）",
    )

    @property
    def tls_enabled(self) -> bool:
        """配置 API key 时启用 TLS"""
        return bool(self.api_key.get_secret_value())

    def public_view(self) -> dict[str, str]:
        """可暴露给前端的配置（不含密钥）"""
        return {"hostPort": self.host_port, "namespace": self.namespace}


def load_temporal_config() -> TemporalConfig:
    """从环境变量加载 Temporal 配置

    环境变量映射:
        TEMPORAL_HOST_PORT -> host_port (默认 "localhost:7233")
        TEMPORAL_NAMESPACE -> namespace (默认 "default")
        TEMPORAL_API_KEY -> api_key (默认 "")
        IWFVIEW_TEMPORAL_TIMEOUT_S -> timeout_s (默认 10)

    Returns:
        TemporalConfig 实例
    """
    kwargs: dict = {}

    if val := os.environ.get("TEMPORAL_HOST_PORT"):
        kwargs["host_port"] = val

    if val := os.environ.get("TEMPORAL_NAMESPACE"):
        kwargs["namespace"] = val

    if val := os.environ.get("TEMPORAL_API_KEY"):
        kwargs["api_key"] = SecretStr(val)

    if val := os.environ.get("IWFVIEW_TEMPORAL_TIMEOUT_S"):
        try:
            timeout_s = int(val)
        except ValueError:
            timeout_s = 0
        if timeout_s >= 1:
            kwargs["timeout_s"] = timeout_s
        else:
            log.warning(
                "invalid_timeout_config",
                env_var="IWFVIEW_TEMPORAL_TIMEOUT_S",
                value=val,
                fallback=DEFAULT_TIMEOUT_S,
            )
            # 使用默认值，不阻塞启动

    return TemporalConfig(**kwargs)
