"""WorkflowService -- "查看执行" 业务逻辑

流程：描述执行 -> 校验 iWF 标记 -> 获取原始事件日志 -> 重建逻辑历史 -> 组装响应。
"""

from typing import Any

import structlog
from iwfview.core import initial_input_of, reconstruct
from iwfview.core.exceptions import UnsupportedExecutionError
from iwfview.core.models import HistoryEvent, WorkflowStatus
from iwfview.temporal import search_attribute_string
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

log = structlog.get_logger()

# iWF 服务端为每个执行写入的 search attribute
IWF_WORKFLOW_TYPE_ATTRIBUTE = "IwfWorkflowType"


class WorkflowShowResponse(BaseModel):
    """查看执行的响应"""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    workflow_started_timestamp: int = Field(description="秒级启动时间")
    workflow_type: str = Field(description="iWF workflow type（非引擎层 type）")
    status: WorkflowStatus | None = None
    history_events: list[HistoryEvent] = Field(default_factory=list)

    def to_api(self) -> dict[str, Any]:
        return {
            "workflowStartedTimestamp": self.workflow_started_timestamp,
            "workflowType": self.workflow_type,
            "status": self.status.value if self.status else None,
            "historyEvents": [e.to_api() for e in self.history_events],
        }


class WorkflowService:
    """执行查看服务

    history_client 需提供 describe() / fetch_events()（TemporalHistoryClient）。
    """

    def __init__(self, history_client) -> None:
        self._client = history_client

    async def show(self, workflow_id: str, run_id: str | None = None) -> WorkflowShowResponse:
        """查看一次执行的逻辑历史

        Args:
            workflow_id: 执行 ID
            run_id: 运行 ID，None 表示最新一次运行

        Returns:
            WorkflowShowResponse

        Raises:
            UnsupportedExecutionError: 不是 iWF 执行
            MalformedHistoryError: 事件日志结构不一致
            UnknownStatusError: 无法识别的执行状态
            TemporalError: 获取描述或历史失败
        """
        description = await self._client.describe(workflow_id, run_id)

        workflow_type = search_attribute_string(
            description.search_attributes, IWF_WORKFLOW_TYPE_ATTRIBUTE
        )
        if not workflow_type:
            await log.awarning(
                "workflow_not_iwf",
                temporal_workflow_type=description.workflow_type,
            )
            raise UnsupportedExecutionError()

        # 固定到已描述的那次运行，避免描述与历史错位
        events = await self._client.fetch_events(
            workflow_id, description.run_id or run_id
        )
        result = reconstruct(initial_input_of(events), events)

        await log.ainfo(
            "workflow_show_completed",
            workflow_type=workflow_type,
            status=description.status,
            history_event_count=len(result.events),
        )

        return WorkflowShowResponse(
            workflow_started_timestamp=description.start_time_seconds,
            workflow_type=workflow_type,
            status=description.status,
            history_events=result.events,
        )
