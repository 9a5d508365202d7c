"""依赖注入模块 -- 通过 FastAPI Depends 注入 Temporal 客户端与配置

实例通过 app.state 管理，在 lifespan 中初始化。
"""

from fastapi import Request
from iwfview.temporal import TemporalConfig, TemporalHistoryClient


def get_history_client(request: Request) -> TemporalHistoryClient:
    """从 app.state 获取 TemporalHistoryClient 实例"""
    return request.app.state.history_client


def get_temporal_config(request: Request) -> TemporalConfig:
    """从 app.state 获取 TemporalConfig 实例"""
    return request.app.state.temporal_config
