"""TemporalHistoryClient -- Temporal 执行描述与历史获取

通过 temporalio SDK 访问 Temporal 前端服务，连接惰性建立并复用。
"""

import asyncio
from datetime import timedelta
from typing import Any

import structlog
from iwfview.core.models import PrimitiveEvent, WorkflowStatus
from iwfview.core.status import map_workflow_status
from pydantic import BaseModel, Field
from temporalio.client import Client
from temporalio.converter import decode_search_attributes
from temporalio.service import RPCError, RPCStatusCode

from .config import TemporalConfig
from .converter import HistoryConverter, history_to_primitive_events
from .exceptions import TemporalError, TemporalUnreachableError, WorkflowNotFoundError

log = structlog.get_logger()

# 健康检查超时（硬编码，应快速响应）
HEALTH_CHECK_TIMEOUT_S = 5

# 视为 "不可达" 的 RPC 状态码
_UNREACHABLE_STATUS_CODES = (
    RPCStatusCode.UNAVAILABLE,
    RPCStatusCode.DEADLINE_EXCEEDED,
)


class ExecutionDescription(BaseModel):
    """执行描述"""

    workflow_id: str
    run_id: str = ""
    workflow_type: str = Field(default="", description="运行时层面的 workflow type")
    status: WorkflowStatus | None = Field(default=None, description="粗粒度执行状态")
    start_time_seconds: int = Field(default=0, description="秒级启动时间")
    search_attributes: dict[str, Any] = Field(default_factory=dict)


def search_attribute_string(search_attributes: dict[str, Any], key: str) -> str:
    """读取字符串类 search attribute（SDK 解码为列表，取第一个值）"""
    value = search_attributes.get(key)
    if isinstance(value, list):
        value = value[0] if value else None
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


class TemporalHistoryClient:
    """Temporal 客户端封装"""

    def __init__(
        self,
        config: TemporalConfig,
        converter: HistoryConverter | None = None,
    ) -> None:
        """
        Args:
            config: 连接配置
            converter: history 转换器，默认使用 SDK 默认 payload converter
        """
        self._config = config
        self._converter = converter or HistoryConverter()
        self._client: Client | None = None
        self._connect_lock = asyncio.Lock()

    @property
    def config(self) -> TemporalConfig:
        return self._config

    async def connect(self) -> Client:
        """建立（或复用）到 Temporal 的连接

        Raises:
            TemporalUnreachableError: 连接失败
        """
        if self._client is not None:
            return self._client

        async with self._connect_lock:
            if self._client is None:
                api_key = self._config.api_key.get_secret_value() or None
                try:
                    self._client = await Client.connect(
                        self._config.host_port,
                        namespace=self._config.namespace,
                        api_key=api_key,
                        tls=self._config.tls_enabled,
                    )
                except Exception as e:
                    log.error(
                        "temporal_connect_failed",
                        host_port=self._config.host_port,
                        error=str(e),
                        error_type=type(e).__name__,
                    )
                    raise TemporalUnreachableError(self._config.host_port, e) from e
                log.info(
                    "temporal_connected",
                    host_port=self._config.host_port,
                    namespace=self._config.namespace,
                    tls=self._config.tls_enabled,
                )
        return self._client

    def _wrap_rpc_error(
        self, e: RPCError, workflow_id: str, run_id: str | None
    ) -> TemporalError:
        if e.status == RPCStatusCode.NOT_FOUND:
            return WorkflowNotFoundError(workflow_id, run_id)
        if e.status in _UNREACHABLE_STATUS_CODES:
            return TemporalUnreachableError(self._config.host_port, e)
        return TemporalError(f"Temporal API 调用失败: {e}", recoverable=False)

    async def describe(
        self, workflow_id: str, run_id: str | None = None
    ) -> ExecutionDescription:
        """查询执行描述

        Raises:
            WorkflowNotFoundError: 执行不存在
            TemporalUnreachableError: 服务不可达
            TemporalError: 其他 API 错误
            UnknownStatusError: 运行时返回无法识别的状态
        """
        client = await self.connect()
        handle = client.get_workflow_handle(workflow_id, run_id=run_id)
        try:
            desc = await handle.describe(
                rpc_timeout=timedelta(seconds=self._config.timeout_s)
            )
        except RPCError as e:
            log.warning(
                "temporal_describe_failed",
                workflow_id=workflow_id,
                run_id=run_id,
                status=str(e.status),
                error=str(e),
            )
            raise self._wrap_rpc_error(e, workflow_id, run_id) from e

        status = map_workflow_status(int(desc.status)) if desc.status else None
        start_time = desc.start_time
        return ExecutionDescription(
            workflow_id=desc.id,
            run_id=desc.run_id,
            workflow_type=desc.workflow_type,
            status=status,
            start_time_seconds=int(start_time.timestamp()) if start_time else 0,
            search_attributes=decode_search_attributes(desc.raw_info.search_attributes),
        )

    async def fetch_events(
        self, workflow_id: str, run_id: str | None = None
    ) -> list[PrimitiveEvent]:
        """获取完整历史并转换为原始事件日志

        Raises:
            WorkflowNotFoundError: 执行不存在
            TemporalUnreachableError: 服务不可达
            TemporalError: 其他 API 错误
        """
        client = await self.connect()
        handle = client.get_workflow_handle(workflow_id, run_id=run_id)
        try:
            history = await handle.fetch_history(
                rpc_timeout=timedelta(seconds=self._config.timeout_s)
            )
        except RPCError as e:
            log.warning(
                "temporal_fetch_history_failed",
                workflow_id=workflow_id,
                run_id=run_id,
                status=str(e.status),
                error=str(e),
            )
            raise self._wrap_rpc_error(e, workflow_id, run_id) from e

        events = history_to_primitive_events(history.events, self._converter)
        log.info(
            "temporal_history_fetched",
            workflow_id=workflow_id,
            run_id=run_id,
            raw_event_count=len(history.events),
            primitive_count=len(events),
        )
        return events

    async def health_check(self) -> bool:
        """检查 Temporal 前端服务可达性

        Returns:
            True 如果服务健康，False 如果不可达或异常

        注意: 此方法不抛出异常，所有异常内部捕获并返回 False。
        """
        try:
            client = await self.connect()
            return await client.service_client.check_health(
                timeout=timedelta(seconds=HEALTH_CHECK_TIMEOUT_S)
            )
        except Exception as e:
            log.debug(
                "health_check_failed",
                host_port=self._config.host_port,
                error=str(e),
            )
            return False
