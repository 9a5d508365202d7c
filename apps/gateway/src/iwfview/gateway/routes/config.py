"""配置查询路由

GET /api/v1/config: 返回当前 Temporal 地址与命名空间（不含 API key）。
"""

from fastapi import APIRouter, Depends

from ..deps import get_temporal_config

router = APIRouter()


@router.get("/api/v1/config")
async def get_config(temporal_config=Depends(get_temporal_config)):
    return temporal_config.public_view()
