"""apps/gateway 测试配置 -- FastAPI app + 假 history client fixture"""

from collections.abc import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from iwfview.core.models import PrimitiveEvent, WorkflowStatus
from iwfview.temporal import ExecutionDescription, TemporalConfig


class FakeHistoryClient:
    """替代 TemporalHistoryClient，返回预置的描述与事件日志"""

    def __init__(
        self,
        description: ExecutionDescription,
        events: list[PrimitiveEvent],
    ) -> None:
        self.description = description
        self.events = events
        self.describe_error: Exception | None = None
        self.fetch_error: Exception | None = None
        self.healthy = True
        self.calls: list[tuple[str, str, str | None]] = []

    async def describe(self, workflow_id: str, run_id: str | None = None) -> ExecutionDescription:
        self.calls.append(("describe", workflow_id, run_id))
        if self.describe_error is not None:
            raise self.describe_error
        return self.description

    async def fetch_events(self, workflow_id: str, run_id: str | None = None) -> list[PrimitiveEvent]:
        self.calls.append(("fetch_events", workflow_id, run_id))
        if self.fetch_error is not None:
            raise self.fetch_error
        return self.events

    async def health_check(self) -> bool:
        return self.healthy


@pytest.fixture
def iwf_history(history_builder):
    """init 状态 waitUntil -> execute，决策跳转到 a、b"""
    b = history_builder
    b.started()
    wait_id = b.wait_until("init", "init-1")
    b.complete(wait_id, {})
    execute_id = b.execute("init", "init-1")
    b.complete(execute_id, b.decision("a", "b"))
    b.wait_until("a", "a-1")
    return b


@pytest.fixture
def fake_history_client(iwf_history, base_epoch) -> FakeHistoryClient:
    description = ExecutionDescription(
        workflow_id="wf-1",
        run_id="run-1",
        workflow_type="Interpreter",
        status=WorkflowStatus.RUNNING,
        start_time_seconds=base_epoch + 1,
        search_attributes={"IwfWorkflowType": ["OrderWorkflow"]},
    )
    return FakeHistoryClient(description, iwf_history.events)


@pytest_asyncio.fixture
async def app(fake_history_client, monkeypatch):
    """创建测试用 FastAPI app 实例（绕过 lifespan）"""
    monkeypatch.setenv("LOGFIRE_SEND_TO_LOGFIRE", "false")

    from iwfview.gateway.main import create_app

    application = create_app()
    application.state.history_client = fake_history_client
    application.state.temporal_config = TemporalConfig(
        host_port="temporal:7233",
        namespace="iwf",
    )
    return application


@pytest_asyncio.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    """提供 httpx AsyncClient 用于测试"""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac
