"""Temporal 访问异常体系

获取日志失败时重建根本不会开始；重建过程内部不做重试。
"""


class TemporalError(Exception):
    """Temporal 包基础异常"""

    def __init__(self, message: str, recoverable: bool = True) -> None:
        """
        Args:
            message: 错误描述
            recoverable: 是否可通过重试恢复
        """
        super().__init__(message)
        self.recoverable = recoverable


class TemporalUnreachableError(TemporalError):
    """Temporal 前端服务不可达（连接失败、超时、服务不可用）"""

    def __init__(self, host_port: str, original_error: Exception) -> None:
        """
        Args:
            host_port: 尝试连接的地址
            original_error: 原始异常
        """
        super().__init__(
            f"Temporal 不可达: {host_port} -- {original_error}",
            recoverable=True,
        )
        self.host_port = host_port
        self.original_error = original_error


class WorkflowNotFoundError(TemporalError):
    """执行不存在"""

    def __init__(self, workflow_id: str, run_id: str | None = None) -> None:
        target = f"{workflow_id}/{run_id}" if run_id else workflow_id
        super().__init__(f"Workflow execution not found: {target}", recoverable=False)
        self.workflow_id = workflow_id
        self.run_id = run_id
