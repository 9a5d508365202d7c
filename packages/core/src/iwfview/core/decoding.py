"""任务 payload 的判别式解码

按任务类型名选择 payload 模型，返回类型化结果；
解码失败显式抛出 MalformedHistoryError，而不是按鸭子类型访问字段。
"""

from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from .exceptions import MalformedHistoryError, UnsupportedExecutionError
from .models.enums import TaskType
from .models.iwf import (
    ContinueAsNewDumpResponse,
    InterpreterWorkflowInput,
    InvokeRpcActivityInput,
    StateDecideActivityInput,
    StateStartActivityInput,
    WorkflowDumpResponse,
    WorkflowStateDecideResponse,
)
from .models.primitive import PrimitiveEvent

ModelT = TypeVar("ModelT", bound=BaseModel)

ActivityInput = StateStartActivityInput | StateDecideActivityInput | InvokeRpcActivityInput

# 活动入参约定为 [backendType, input]，类型化的是第二个值
ACTIVITY_INPUT_INDEX = 1

_ACTIVITY_INPUT_MODELS: dict[TaskType, type[ActivityInput]] = {
    TaskType.WAIT_UNTIL: StateStartActivityInput,
    TaskType.EXECUTE: StateDecideActivityInput,
    TaskType.INVOKE_RPC: InvokeRpcActivityInput,
}


def classify_task_type(task_type: str) -> TaskType | None:
    """识别任务类型名，未知类型返回 None"""
    try:
        return TaskType(task_type)
    except ValueError:
        return None


def first_value(values: list[Any]) -> Any:
    """取 payload 列表的第一个值（活动返回值、workflow 输入/输出）"""
    return values[0] if values else None


def _validate(model: type[ModelT], value: Any, event_id: int, what: str) -> ModelT:
    try:
        return model.model_validate(value)
    except ValidationError as e:
        raise MalformedHistoryError(
            f"Cannot decode {what} as {model.__name__}: {e.error_count()} validation error(s)",
            event_id=event_id,
        ) from e


def decode_task_input(event: PrimitiveEvent) -> ActivityInput:
    """解码 TASK_SCHEDULED 的活动入参

    Args:
        event: TASK_SCHEDULED 原始事件

    Returns:
        与任务类型对应的类型化入参

    Raises:
        MalformedHistoryError: 任务类型没有解码器、入参数量不足或结构不符
    """
    attrs = event.task_scheduled
    if attrs is None:
        raise MalformedHistoryError(
            "TASK_SCHEDULED event without attributes", event_id=event.event_id
        )

    task_type = classify_task_type(attrs.task_type)
    model = _ACTIVITY_INPUT_MODELS.get(task_type) if task_type else None
    if model is None:
        raise MalformedHistoryError(
            f"No payload decoder for task type {attrs.task_type}",
            event_id=event.event_id,
        )

    if len(attrs.inputs) <= ACTIVITY_INPUT_INDEX:
        raise MalformedHistoryError(
            f"Task {attrs.task_type} expects at least {ACTIVITY_INPUT_INDEX + 1} "
            f"input values, got {len(attrs.inputs)}",
            event_id=event.event_id,
        )

    return _validate(
        model,
        attrs.inputs[ACTIVITY_INPUT_INDEX],
        event.event_id,
        f"{attrs.task_type} input",
    )


def decode_decide_response(value: Any, event_id: int) -> WorkflowStateDecideResponse:
    """解码 execute 的返回值（空返回视为无决策）"""
    if value is None:
        return WorkflowStateDecideResponse()
    return _validate(WorkflowStateDecideResponse, value, event_id, "execute response")


def decode_dump_response(value: Any, event_id: int) -> WorkflowDumpResponse:
    """解码 DumpWorkflowInternal 的一页返回值"""
    return _validate(WorkflowDumpResponse, value, event_id, "workflow dump page")


def decode_continue_as_new_snapshot(json_data: str) -> ContinueAsNewDumpResponse:
    """解析拼接后的续跑快照 JSON

    Raises:
        MalformedHistoryError: 快照为空或不是合法的快照 JSON
    """
    if not json_data:
        raise MalformedHistoryError("Continue-as-new snapshot is empty")
    try:
        return ContinueAsNewDumpResponse.model_validate_json(json_data)
    except ValidationError as e:
        raise MalformedHistoryError(
            f"Cannot parse continue-as-new snapshot: {e.error_count()} validation error(s)"
        ) from e


def decode_workflow_input(value: Any) -> InterpreterWorkflowInput:
    """解码执行的初始输入

    Raises:
        UnsupportedExecutionError: 输入不是 iWF 解释器输入（缺少 iwfWorkflowType 标记）
    """
    if not isinstance(value, dict):
        raise UnsupportedExecutionError(
            f"Initial input is not an iWF interpreter input (got {type(value).__name__})"
        )
    try:
        workflow_input = InterpreterWorkflowInput.model_validate(value)
    except ValidationError as e:
        raise UnsupportedExecutionError(
            f"Initial input is not an iWF interpreter input: {e.error_count()} validation error(s)"
        ) from e

    if not workflow_input.iwf_workflow_type:
        raise UnsupportedExecutionError(
            "Initial input does not carry an iwfWorkflowType marker"
        )
    return workflow_input
