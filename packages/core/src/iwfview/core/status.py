"""执行状态映射 -- 运行时原生状态 -> WorkflowStatus

运行时可能返回状态名（可能带 WORKFLOW_EXECUTION_STATUS_ 前缀）或 1-7 的数字码。
未识别的值抛出 UnknownStatusError，绝不静默降级。
"""

from .exceptions import UnknownStatusError
from .models.enums import WorkflowStatus

STATUS_PREFIX = "WORKFLOW_EXECUTION_STATUS_"

_STATUS_TABLE: dict[str, WorkflowStatus] = {
    "RUNNING": WorkflowStatus.RUNNING,
    "COMPLETED": WorkflowStatus.COMPLETED,
    "FAILED": WorkflowStatus.FAILED,
    "CANCELED": WorkflowStatus.CANCELED,
    "TERMINATED": WorkflowStatus.TERMINATED,
    "CONTINUED_AS_NEW": WorkflowStatus.CONTINUED_AS_NEW,
    "TIMED_OUT": WorkflowStatus.TIMEOUT,
    # 数字码
    "1": WorkflowStatus.RUNNING,
    "2": WorkflowStatus.COMPLETED,
    "3": WorkflowStatus.FAILED,
    "4": WorkflowStatus.CANCELED,
    "5": WorkflowStatus.TERMINATED,
    "6": WorkflowStatus.CONTINUED_AS_NEW,
    "7": WorkflowStatus.TIMEOUT,
}


def map_workflow_status(value: str | int) -> WorkflowStatus:
    """映射运行时状态到 WorkflowStatus

    Args:
        value: 状态名、带前缀的状态名或数字码

    Returns:
        对应的 WorkflowStatus

    Raises:
        UnknownStatusError: 无法识别的状态
    """
    normalized = str(value if value is not None else "").strip().upper()
    normalized = normalized.removeprefix(STATUS_PREFIX)

    status = _STATUS_TABLE.get(normalized)
    if status is None:
        raise UnknownStatusError(value, normalized)
    return status
