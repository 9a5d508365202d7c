"""iwfview Core Domain Models -- 公共类型导出

所有公共模型类型从此入口导入。
"""

from .enums import (
    CLOSE_KIND_STATUS,
    CloseKind,
    HistoryEventType,
    PrimitiveEventType,
    TaskType,
    WorkflowStatus,
)
from .history import (
    FROM_INITIAL_INPUT,
    HistoryEvent,
    RpcExecutedDetails,
    SignalReceivedDetails,
    StateExecuteDetails,
    StateWaitUntilDetails,
    WorkflowClosedDetails,
    WorkflowStartedDetails,
)
from .iwf import (
    ContinueAsNewDumpResponse,
    ContinueAsNewInput,
    EncodedObject,
    InterpreterWorkflowInput,
    InvokeRpcActivityInput,
    StateContext,
    WorkflowContext,
    StateDecideActivityInput,
    StateDecision,
    StateExecutionResumeInfo,
    StateMovement,
    StateOptions,
    StateStartActivityInput,
    WorkflowDumpResponse,
    WorkflowStateDecideRequest,
    WorkflowStateDecideResponse,
    WorkflowStateStartRequest,
    WorkflowWorkerRpcRequest,
)
from .primitive import (
    ExecutionClosedAttributes,
    ExecutionStartedAttributes,
    PrimitiveEvent,
    SignalReceivedAttributes,
    TaskCompletedAttributes,
    TaskFailedAttributes,
    TaskScheduledAttributes,
    dump_primitive_log,
    load_primitive_log,
)

__all__ = [
    # 枚举
    "PrimitiveEventType",
    "TaskType",
    "HistoryEventType",
    "WorkflowStatus",
    "CloseKind",
    "CLOSE_KIND_STATUS",
    # 原始事件
    "PrimitiveEvent",
    "TaskScheduledAttributes",
    "TaskCompletedAttributes",
    "TaskFailedAttributes",
    "SignalReceivedAttributes",
    "ExecutionStartedAttributes",
    "ExecutionClosedAttributes",
    "load_primitive_log",
    "dump_primitive_log",
    # iWF payload
    "EncodedObject",
    "StateOptions",
    "StateMovement",
    "StateDecision",
    "ContinueAsNewInput",
    "InterpreterWorkflowInput",
    "StateContext",
    "WorkflowContext",
    "WorkflowStateStartRequest",
    "WorkflowStateDecideRequest",
    "WorkflowStateDecideResponse",
    "WorkflowWorkerRpcRequest",
    "StateStartActivityInput",
    "StateDecideActivityInput",
    "InvokeRpcActivityInput",
    "WorkflowDumpResponse",
    "StateExecutionResumeInfo",
    "ContinueAsNewDumpResponse",
    # 逻辑历史事件
    "FROM_INITIAL_INPUT",
    "HistoryEvent",
    "StateWaitUntilDetails",
    "StateExecuteDetails",
    "WorkflowStartedDetails",
    "WorkflowClosedDetails",
    "SignalReceivedDetails",
    "RpcExecutedDetails",
]
