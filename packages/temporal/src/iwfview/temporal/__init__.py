"""iwfview Temporal -- 执行历史获取层

packages/temporal 的公开接口导出。
"""

from .client import ExecutionDescription, TemporalHistoryClient, search_attribute_string

# 配置
from .config import TemporalConfig, load_temporal_config

# 转换
from .converter import HistoryConverter, history_to_primitive_events

# 异常
from .exceptions import TemporalError, TemporalUnreachableError, WorkflowNotFoundError

__all__ = [
    "TemporalHistoryClient",
    "ExecutionDescription",
    "search_attribute_string",
    "HistoryConverter",
    "history_to_primitive_events",
    "TemporalConfig",
    "load_temporal_config",
    "TemporalError",
    "TemporalUnreachableError",
    "WorkflowNotFoundError",
]
