"""执行查看路由

GET  /api/v1/workflow/show?workflowId=&runId=: 查看执行的逻辑历史。
POST /api/v1/workflow/show: 同上，参数放在请求体中。

重建异常与 Temporal 访问异常统一映射为 {detail, error, errorType} 错误体。
"""

import structlog
from fastapi import APIRouter, Body, Depends, Query
from iwfview.core.exceptions import (
    MalformedHistoryError,
    UnknownStatusError,
    UnsupportedExecutionError,
)
from iwfview.temporal import TemporalError, WorkflowNotFoundError
from starlette.responses import JSONResponse

from ..deps import get_history_client
from ..services.workflow_service import WorkflowService

log = structlog.get_logger()

router = APIRouter()

# (异常类型, HTTP 状态码, errorType)，按顺序匹配，子类在前
_ERROR_MAPPING: list[tuple[type[Exception], int, str]] = [
    (UnsupportedExecutionError, 400, "UNSUPPORTED_EXECUTION"),
    (MalformedHistoryError, 422, "MALFORMED_HISTORY"),
    (UnknownStatusError, 502, "UNKNOWN_STATUS"),
    (WorkflowNotFoundError, 404, "WORKFLOW_NOT_FOUND"),
    (TemporalError, 502, "TEMPORAL_API_ERROR"),
]


def _missing_workflow_id() -> JSONResponse:
    return JSONResponse(status_code=400, content={"detail": "workflowId is required"})


def _error_response(error: Exception) -> JSONResponse | None:
    for error_cls, status_code, error_type in _ERROR_MAPPING:
        if isinstance(error, error_cls):
            return JSONResponse(
                status_code=status_code,
                content={
                    "detail": str(error),
                    "error": type(error).__name__,
                    "errorType": error_type,
                },
            )
    return None


async def _show(history_client, workflow_id: str, run_id: str | None) -> JSONResponse:
    service = WorkflowService(history_client)
    try:
        result = await service.show(workflow_id, run_id)
    except Exception as e:
        response = _error_response(e)
        if response is None:
            raise
        await log.awarning(
            "workflow_show_failed",
            error_type=type(e).__name__,
            error=str(e),
            status_code=response.status_code,
        )
        return response

    return JSONResponse(status_code=200, content=result.to_api())


@router.get("/api/v1/workflow/show")
async def show_workflow(
    workflow_id: str | None = Query(default=None, alias="workflowId"),
    run_id: str | None = Query(default=None, alias="runId"),
    history_client=Depends(get_history_client),
):
    """查看执行的逻辑历史（查询参数）"""
    if not workflow_id:
        return _missing_workflow_id()
    return await _show(history_client, workflow_id, run_id or None)


@router.post("/api/v1/workflow/show")
async def show_workflow_post(
    body: dict | None = Body(default=None),
    history_client=Depends(get_history_client),
):
    """查看执行的逻辑历史（请求体 {workflowId, runId?}）"""
    body = body or {}
    workflow_id = body.get("workflowId")
    run_id = body.get("runId") or None
    if not workflow_id or not isinstance(workflow_id, str):
        return _missing_workflow_id()

    # 请求体中的 ID 不经过 TraceMiddleware
    structlog.contextvars.bind_contextvars(workflow_id=workflow_id)
    if run_id:
        structlog.contextvars.bind_contextvars(run_id=run_id)

    return await _show(history_client, workflow_id, run_id)
