"""Core 异常体系

重建是全有或全无的：任何异常都意味着没有部分结果。
"""


class ReconstructionError(Exception):
    """Core 包基础异常"""

    def __init__(self, message: str, recoverable: bool = False) -> None:
        """
        Args:
            message: 错误描述
            recoverable: 重试是否可能成功（日志本身不一致时为 False）
        """
        super().__init__(message)
        self.recoverable = recoverable


class MalformedHistoryError(ReconstructionError):
    """事件日志违反结构不变量

    例如 completion 引用未知的 schedule id、同一 schedule id 被完成两次、
    需要匹配时待消费的转移上下文队列为空、payload 无法解码。
    """

    def __init__(
        self,
        message: str,
        event_id: int | None = None,
        state_id: str | None = None,
    ) -> None:
        """
        Args:
            message: 错误描述
            event_id: 出错的原始事件 event_id
            state_id: 相关的状态 ID
        """
        details = []
        if event_id is not None:
            details.append(f"event_id={event_id}")
        if state_id is not None:
            details.append(f"state_id={state_id}")
        suffix = f" ({', '.join(details)})" if details else ""
        super().__init__(f"{message}{suffix}", recoverable=False)
        self.event_id = event_id
        self.state_id = state_id


class UnsupportedExecutionError(ReconstructionError):
    """不是 iWF 执行（同一运行时上的其他 workflow 类型）"""

    def __init__(self, message: str = "Not an iWF workflow execution") -> None:
        super().__init__(message, recoverable=False)


class UnknownStatusError(ReconstructionError):
    """无法识别的执行状态码/字符串，不做默认猜测"""

    def __init__(self, value: object, normalized: str = "") -> None:
        """
        Args:
            value: 原始状态值
            normalized: 规范化后的状态值
        """
        super().__init__(
            f"Unknown workflow status: {value} (normalized: {normalized})",
            recoverable=False,
        )
        self.value = value
        self.normalized = normalized
