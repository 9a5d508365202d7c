"""集成测试共享 fixture

真实的 TemporalHistoryClient + HistoryConverter + 重建 + 路由，
只有 temporalio 的网络连接被 Mock，history 使用真实 protobuf 事件。
"""

from collections.abc import AsyncGenerator
from datetime import UTC, datetime
from typing import Any
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from iwfview.temporal import TemporalConfig, TemporalHistoryClient
from temporalio.api.common.v1 import SearchAttributes
from temporalio.api.history.v1 import HistoryEvent
from temporalio.client import WorkflowExecutionStatus
from temporalio.converter import DataConverter

STARTED_AT = datetime(2026, 3, 1, 12, 0, 0, tzinfo=UTC)
STARTED_SECONDS = int(STARTED_AT.timestamp())

payload_converter = DataConverter.default.payload_converter


class TemporalHistoryFactory:
    """构造真实的 Temporal protobuf history"""

    def __init__(self) -> None:
        self.events: list[HistoryEvent] = []

    def _event(self) -> HistoryEvent:
        event = HistoryEvent(event_id=len(self.events) + 1)
        event.event_time.FromSeconds(STARTED_SECONDS + len(self.events))
        self.events.append(event)
        return event

    def started(self, workflow_input: dict[str, Any]) -> int:
        event = self._event()
        attrs = event.workflow_execution_started_event_attributes
        attrs.workflow_type.name = "Interpreter"
        attrs.input.payloads.extend(payload_converter.to_payloads([workflow_input]))
        # workflow task 事件没有原始事件对应物
        self._event().workflow_task_scheduled_event_attributes.SetInParent()
        return event.event_id

    def activity(self, activity_type: str, state_id: str, execution_id: str) -> int:
        event = self._event()
        attrs = event.activity_task_scheduled_event_attributes
        attrs.activity_type.name = activity_type
        attrs.activity_id = str(event.event_id)
        request = {
            "context": {"workflowId": "order-42", "stateExecutionId": execution_id},
            "workflowType": "OrderWorkflow",
            "workflowStateId": state_id,
        }
        attrs.input.payloads.extend(
            payload_converter.to_payloads(
                ["golang", {"IwfWorkerUrl": "http://worker:8803", "Request": request}]
            )
        )
        started = self._event()
        started.activity_task_started_event_attributes.scheduled_event_id = event.event_id
        return event.event_id

    def completed(self, scheduled_event_id: int, result: Any) -> int:
        event = self._event()
        attrs = event.activity_task_completed_event_attributes
        attrs.scheduled_event_id = scheduled_event_id
        attrs.result.payloads.extend(payload_converter.to_payloads([result]))
        return event.event_id

    def signaled(self, signal_name: str, value: Any) -> int:
        event = self._event()
        attrs = event.workflow_execution_signaled_event_attributes
        attrs.signal_name = signal_name
        attrs.input.payloads.extend(payload_converter.to_payloads([value]))
        return event.event_id

    def workflow_completed(self, result: Any) -> int:
        event = self._event()
        event.workflow_execution_completed_event_attributes.result.payloads.extend(
            payload_converter.to_payloads([result])
        )
        return event.event_id


@pytest.fixture
def temporal_history() -> TemporalHistoryFactory:
    return TemporalHistoryFactory()


@pytest.fixture
def temporal_sdk_client(temporal_history):
    """Mock 的 temporalio Client，返回真实 protobuf history"""
    search_attributes = SearchAttributes()
    search_attributes.indexed_fields["IwfWorkflowType"].CopyFrom(
        payload_converter.to_payloads(["OrderWorkflow"])[0]
    )

    desc = MagicMock()
    desc.id = "order-42"
    desc.run_id = "run-7"
    desc.workflow_type = "Interpreter"
    desc.status = WorkflowExecutionStatus.COMPLETED
    desc.start_time = STARTED_AT
    desc.raw_info.search_attributes = search_attributes

    history = MagicMock()
    history.events = temporal_history.events

    handle = MagicMock()
    handle.describe = AsyncMock(return_value=desc)
    handle.fetch_history = AsyncMock(return_value=history)

    client = MagicMock()
    client.get_workflow_handle.return_value = handle
    client.service_client.check_health = AsyncMock(return_value=True)
    return client


@pytest_asyncio.fixture
async def integration_app(temporal_sdk_client, monkeypatch):
    """集成测试用 FastAPI app"""
    monkeypatch.setenv("LOGFIRE_SEND_TO_LOGFIRE", "false")

    from iwfview.gateway.main import create_app

    app = create_app()
    config = TemporalConfig(host_port="temporal:7233", namespace="iwf")
    app.state.temporal_config = config
    app.state.history_client = TemporalHistoryClient(config)

    with patch(
        "iwfview.temporal.client.Client.connect",
        new=AsyncMock(return_value=temporal_sdk_client),
    ):
        yield app


@pytest_asyncio.fixture
async def client(integration_app) -> AsyncGenerator[AsyncClient, None]:
    async with AsyncClient(
        transport=ASGITransport(app=integration_app),
        base_url="http://test",
    ) as ac:
        yield ac
