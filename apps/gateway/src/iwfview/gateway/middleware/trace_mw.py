"""TraceMiddleware -- 为执行查询绑定 workflow_id / run_id

从查询参数中提取 workflowId / runId，贯穿该请求的重建日志。
POST 请求体中的 ID 由路由自行绑定。
"""

import structlog
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response


class TraceMiddleware(BaseHTTPMiddleware):
    """执行级追踪中间件"""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        workflow_id = request.query_params.get("workflowId")
        if workflow_id:
            structlog.contextvars.bind_contextvars(workflow_id=workflow_id)
            run_id = request.query_params.get("runId")
            if run_id:
                structlog.contextvars.bind_contextvars(run_id=run_id)

        return await call_next(request)
