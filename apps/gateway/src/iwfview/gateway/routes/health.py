"""健康检查路由

GET /health: Liveness 检查，永远返回 200。
GET /ready: Readiness 检查，探测 Temporal 前端服务可达性。
"""

import structlog
from fastapi import APIRouter, Request
from starlette.responses import JSONResponse

log = structlog.get_logger()

router = APIRouter()


@router.get("/health")
async def health():
    """Liveness 检查 -- 永远返回 200"""
    return {"status": "ok"}


@router.get("/ready")
async def ready(request: Request):
    """Readiness 检查 -- 验证 Temporal 可用性

    检查项：
    1. temporal: 前端服务健康检查（health_check 本身不抛异常）
    """
    checks = {}
    all_ok = True

    history_client = getattr(request.app.state, "history_client", None)
    if history_client is None:
        checks["temporal"] = "not_configured"
        all_ok = False
    elif await history_client.health_check():
        checks["temporal"] = "ok"
    else:
        checks["temporal"] = "unreachable"
        all_ok = False
        log.warning("readiness_check_failed", check="temporal")

    status_code = 200 if all_ok else 503
    status_text = "ready" if all_ok else "not_ready"

    return JSONResponse(
        status_code=status_code,
        content={
            "status": status_text,
            "checks": checks,
        },
    )
