"""Temporal 包测试 fixtures"""

import pytest

TEMPORAL_ENV_VARS = (
    "TEMPORAL_HOST_PORT",
    "TEMPORAL_NAMESPACE",
    "TEMPORAL_API_KEY",
    "IWFVIEW_TEMPORAL_TIMEOUT_S",
)


@pytest.fixture
def clean_temporal_env(monkeypatch):
    """清除 Temporal 相关环境变量"""
    for name in TEMPORAL_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch
