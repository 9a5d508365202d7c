"""structlog 配置模块

dev 模式：pretty print 可读输出
json 模式：结构化 JSON 输出
temporalio SDK 的日志级别单独设置（IWFVIEW_TEMPORAL_LOG_LEVEL）。
Logfire APM：LOGFIRE_SEND_TO_LOGFIRE 环境变量控制，false 时降级为纯本地日志。
"""

import logging
import os

import structlog
from fastapi import FastAPI

# 由 IWFVIEW_TEMPORAL_LOG_LEVEL 统一控制的第三方 logger
TEMPORAL_LOGGERS = ("temporalio", "temporalio.client", "temporalio.bridge")


def _renderer(log_format: str) -> structlog.types.Processor:
    if log_format == "json":
        return structlog.processors.JSONRenderer(ensure_ascii=False)
    return structlog.dev.ConsoleRenderer()


def _level(name: str, default: int) -> int:
    value = os.environ.get(name, "")
    level = logging.getLevelName(value.strip().upper()) if value else default
    return level if isinstance(level, int) else default


def setup_logging() -> None:
    """初始化 structlog 配置

    环境变量:
        IWFVIEW_LOG_FORMAT: "json" 结构化输出 / "dev"（默认）可读输出
        IWFVIEW_LOG_LEVEL: 日志级别（默认 INFO）
        IWFVIEW_TEMPORAL_LOG_LEVEL: temporalio SDK 日志级别（默认 WARNING）
    """
    log_format = os.environ.get("IWFVIEW_LOG_FORMAT", "dev")

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    # uvicorn、temporalio 的标准库日志走同一套渲染
    handler = logging.StreamHandler()
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processor=_renderer(log_format),
            foreign_pre_chain=shared_processors,
        )
    )

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(_level("IWFVIEW_LOG_LEVEL", logging.INFO))

    temporal_level = _level("IWFVIEW_TEMPORAL_LOG_LEVEL", logging.WARNING)
    for name in TEMPORAL_LOGGERS:
        logging.getLogger(name).setLevel(temporal_level)


def setup_logfire(app: FastAPI) -> None:
    """Logfire 可选初始化

    LOGFIRE_SEND_TO_LOGFIRE 环境变量控制：
    - "true": 启用 Logfire APM（需要 LOGFIRE_TOKEN，安装 apm extra）
    - "false" (默认): 纯本地日志
    """
    send_to_logfire = os.environ.get("LOGFIRE_SEND_TO_LOGFIRE", "false").lower()
    if send_to_logfire != "true":
        return
    try:
        import logfire

        logfire.configure()
        logfire.instrument_fastapi(app)
    except Exception as e:
        # APM 初始化失败不影响历史查看
        structlog.get_logger().warning(
            "logfire_init_failed",
            error=str(e),
            message="Logfire 初始化失败，降级为纯本地日志",
        )
