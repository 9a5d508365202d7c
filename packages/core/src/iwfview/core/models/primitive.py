"""Primitive Event 模型 -- 运行时记录的原始事件

事件日志 append-only，event_id 严格单调递增。
payload 中的 inputs/result 已从运行时的线路编码解码为 JSON 值，但尚未类型化。
"""

from typing import Any

from pydantic import AwareDatetime, BaseModel, Field, TypeAdapter

from .enums import CloseKind, PrimitiveEventType


class TaskScheduledAttributes(BaseModel):
    """TASK_SCHEDULED 属性"""

    task_type: str = Field(description="活动类型名")
    task_id: str = Field(default="", description="运行时的 activity id")
    inputs: list[Any] = Field(default_factory=list, description="活动输入值")


class TaskCompletedAttributes(BaseModel):
    """TASK_COMPLETED 属性"""

    scheduled_event_id: int = Field(description="对应 TASK_SCHEDULED 的 event_id")
    result: list[Any] = Field(default_factory=list, description="活动返回值")


class TaskFailedAttributes(BaseModel):
    """TASK_FAILED 属性"""

    scheduled_event_id: int
    failure_message: str = Field(default="")


class SignalReceivedAttributes(BaseModel):
    """SIGNAL_RECEIVED 属性"""

    signal_name: str
    inputs: list[Any] = Field(default_factory=list)


class ExecutionStartedAttributes(BaseModel):
    """EXECUTION_STARTED 属性"""

    workflow_type: str = Field(default="", description="运行时层面的 workflow type")
    inputs: list[Any] = Field(default_factory=list)


class ExecutionClosedAttributes(BaseModel):
    """EXECUTION_CLOSED 属性"""

    close_kind: CloseKind
    result: list[Any] = Field(default_factory=list)


class PrimitiveEvent(BaseModel):
    """原始事件

    每个事件只携带与其 type 对应的一个属性字段。
    对 TASK_SCHEDULED 而言，调度标识（schedule id）即事件自身的 event_id。
    """

    event_id: int = Field(description="事件序号，严格单调递增")
    ts: AwareDatetime = Field(description="事件时间戳，必须带时区")
    type: PrimitiveEventType = Field(description="事件类型")

    task_scheduled: TaskScheduledAttributes | None = None
    task_completed: TaskCompletedAttributes | None = None
    task_failed: TaskFailedAttributes | None = None
    signal_received: SignalReceivedAttributes | None = None
    execution_started: ExecutionStartedAttributes | None = None
    execution_closed: ExecutionClosedAttributes | None = None

    @property
    def timestamp(self) -> int:
        """秒级时间戳"""
        return int(self.ts.timestamp())


PRIMITIVE_LOG_ADAPTER: TypeAdapter[list[PrimitiveEvent]] = TypeAdapter(
    list[PrimitiveEvent]
)


def load_primitive_log(data: str | bytes) -> list[PrimitiveEvent]:
    """从 JSON 数组解析原始事件日志"""
    return PRIMITIVE_LOG_ADAPTER.validate_json(data)


def dump_primitive_log(events: list[PrimitiveEvent]) -> bytes:
    """将原始事件日志序列化为 JSON 数组"""
    return PRIMITIVE_LOG_ADAPTER.dump_json(events, exclude_none=True, indent=2)
