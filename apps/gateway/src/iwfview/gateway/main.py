"""FastAPI 应用主文件

app 创建 + lifespan 管理：Temporal 配置加载与客户端初始化 + 路由注册。
Temporal 连接惰性建立，启动时不阻塞。
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from iwfview.temporal import TemporalHistoryClient, load_temporal_config

from .middleware.logging_config import setup_logfire, setup_logging
from .middleware.logging_mw import LoggingMiddleware
from .middleware.trace_mw import TraceMiddleware
from .routes import config, health, workflow

log = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """应用生命周期管理：启动时初始化 Temporal 客户端"""
    temporal_config = load_temporal_config()
    app.state.temporal_config = temporal_config
    app.state.history_client = TemporalHistoryClient(temporal_config)
    log.info(
        "history_client_initialized",
        host_port=temporal_config.host_port,
        namespace=temporal_config.namespace,
        timeout_s=temporal_config.timeout_s,
    )

    yield

    app.state.history_client = None


def create_app() -> FastAPI:
    """创建 FastAPI 应用实例"""
    app = FastAPI(
        title="iwfview Gateway",
        version="0.1.0",
        description="iWF 执行历史查看 API",
        lifespan=lifespan,
    )

    # 注册中间件（顺序：先 Trace 后 Logging）
    app.add_middleware(TraceMiddleware)
    app.add_middleware(LoggingMiddleware)

    # 初始化日志
    setup_logging()
    setup_logfire(app)

    # 注册路由
    app.include_router(workflow.router, tags=["workflow"])
    app.include_router(config.router, tags=["config"])
    app.include_router(health.router, tags=["health"])

    return app


# 默认 app 实例（uvicorn 入口）
app = create_app()
