"""枚举定义

包含原始事件类型 PrimitiveEventType、逻辑历史事件类型 HistoryEventType、
iWF 活动类型 TaskType、执行关闭类型 CloseKind 与粗粒度状态 WorkflowStatus。
"""

from enum import StrEnum


class PrimitiveEventType(StrEnum):
    """运行时原始事件类型"""

    TASK_SCHEDULED = "TASK_SCHEDULED"
    TASK_COMPLETED = "TASK_COMPLETED"
    TASK_FAILED = "TASK_FAILED"
    SIGNAL_RECEIVED = "SIGNAL_RECEIVED"
    EXECUTION_STARTED = "EXECUTION_STARTED"
    EXECUTION_CLOSED = "EXECUTION_CLOSED"


class TaskType(StrEnum):
    """iWF 服务端注册的活动类型名"""

    WAIT_UNTIL = "StateApiWaitUntil"
    EXECUTE = "StateApiExecute"
    INVOKE_RPC = "InvokeWorkerRpc"
    DUMP_WORKFLOW = "DumpWorkflowInternal"


class HistoryEventType(StrEnum):
    """逻辑历史事件类型（展示层的 eventType）"""

    STATE_WAIT_UNTIL = "StateWaitUntil"
    STATE_EXECUTE = "StateExecute"
    WORKFLOW_STARTED = "WorkflowStarted"
    WORKFLOW_CLOSED = "WorkflowClosed"
    SIGNAL_RECEIVED = "SignalReceived"
    RPC_EXECUTED = "RpcExecuted"


class WorkflowStatus(StrEnum):
    """粗粒度执行状态"""

    RUNNING = "RUNNING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"
    CANCELED = "CANCELED"
    TERMINATED = "TERMINATED"
    CONTINUED_AS_NEW = "CONTINUED_AS_NEW"
    TIMEOUT = "TIMEOUT"


class CloseKind(StrEnum):
    """执行关闭事件的种类"""

    COMPLETED = "COMPLETED"
    FAILED = "FAILED"
    CANCELED = "CANCELED"
    TERMINATED = "TERMINATED"
    CONTINUED_AS_NEW = "CONTINUED_AS_NEW"
    TIMED_OUT = "TIMED_OUT"


# 关闭种类 -> 粗粒度状态
CLOSE_KIND_STATUS: dict[CloseKind, WorkflowStatus] = {
    CloseKind.COMPLETED: WorkflowStatus.COMPLETED,
    CloseKind.FAILED: WorkflowStatus.FAILED,
    CloseKind.CANCELED: WorkflowStatus.CANCELED,
    CloseKind.TERMINATED: WorkflowStatus.TERMINATED,
    CloseKind.CONTINUED_AS_NEW: WorkflowStatus.CONTINUED_AS_NEW,
    CloseKind.TIMED_OUT: WorkflowStatus.TIMEOUT,
}
