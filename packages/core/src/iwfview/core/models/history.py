"""逻辑历史事件模型 -- 重建结果的展示单元

每个 HistoryEvent 只携带与 event_type 对应的一个 details 字段。
from_event_id 指向已产出序列中的因果来源下标，-1 表示来源于执行的初始输入。
时间戳均为秒级。
"""

from typing import Any

from pydantic import Field

from .enums import HistoryEventType, WorkflowStatus
from .iwf import (
    ContinueAsNewDumpResponse,
    EncodedObject,
    InterpreterWorkflowInput,
    IwfModel,
    StateOptions,
)

# 来源于初始输入（含续跑快照）的 from_event_id
FROM_INITIAL_INPUT = -1


class StateWaitUntilDetails(IwfModel):
    """waitUntil 步骤"""

    state_id: str
    state_execution_id: str
    input: EncodedObject | None = None
    state_options: StateOptions | None = None
    from_event_id: int
    started_at: int
    completed_at: int | None = None
    response: Any = None


class StateExecuteDetails(IwfModel):
    """execute 步骤"""

    state_id: str
    state_execution_id: str
    input: EncodedObject | None = None
    state_locals: list[dict[str, Any]] | None = None
    command_results: dict[str, Any] | None = None
    from_event_id: int
    state_options: StateOptions | None = None
    task_id: str = ""
    started_at: int
    completed_at: int | None = None
    response: Any = None


class WorkflowStartedDetails(IwfModel):
    """执行开始"""

    workflow_type: str
    started_at: int
    input: InterpreterWorkflowInput
    resume_snapshot: ContinueAsNewDumpResponse | None = None


class WorkflowClosedDetails(IwfModel):
    """执行关闭"""

    closed_at: int
    closed_type: WorkflowStatus
    output: Any = None


class SignalReceivedDetails(IwfModel):
    """收到信号（尚未接入因果图）"""

    signal_name: str
    input: Any = None
    received_at: int


class RpcExecutedDetails(IwfModel):
    """RPC 调用（尚未接入因果图，其决策不展开）"""

    rpc_name: str
    input: EncodedObject | None = None
    task_id: str = ""
    started_at: int
    completed_at: int | None = None
    response: Any = None


class HistoryEvent(IwfModel):
    """逻辑历史事件"""

    event_type: HistoryEventType = Field(description="事件类型")

    state_wait_until: StateWaitUntilDetails | None = None
    state_execute: StateExecuteDetails | None = None
    workflow_started: WorkflowStartedDetails | None = None
    workflow_closed: WorkflowClosedDetails | None = None
    signal_received: SignalReceivedDetails | None = None
    rpc_executed: RpcExecutedDetails | None = None

    @property
    def from_event_id(self) -> int | None:
        """因果来源下标；不参与因果链的事件返回 None"""
        if self.state_wait_until is not None:
            return self.state_wait_until.from_event_id
        if self.state_execute is not None:
            return self.state_execute.from_event_id
        return None

    def to_api(self) -> dict[str, Any]:
        """序列化为展示层 JSON（camelCase，省略空字段）"""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
