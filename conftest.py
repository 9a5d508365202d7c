"""全局 pytest 配置 -- 原始事件日志构造 fixture"""

from datetime import UTC, datetime, timedelta
from typing import Any

import pytest
from iwfview.core.models import (
    CloseKind,
    ExecutionClosedAttributes,
    ExecutionStartedAttributes,
    PrimitiveEvent,
    PrimitiveEventType,
    SignalReceivedAttributes,
    TaskCompletedAttributes,
    TaskFailedAttributes,
    TaskScheduledAttributes,
    TaskType,
)

# 第 n 个事件的时间戳为 BASE_EPOCH + n
BASE_TS = datetime(2026, 1, 1, tzinfo=UTC)
BASE_EPOCH = int(BASE_TS.timestamp())

WORKFLOW_TYPE = "OrderWorkflow"
WORKER_URL = "http://localhost:8803"


class PrimitiveLogBuilder:
    """按日志顺序构造原始事件，event_id 从 1 开始自增"""

    def __init__(self, workflow_id: str = "wf-1", run_id: str = "run-1") -> None:
        self.workflow_id = workflow_id
        self.run_id = run_id
        self.events: list[PrimitiveEvent] = []

    @staticmethod
    def iwf_input(start_state_id: str | None = "init", **overrides: Any) -> dict[str, Any]:
        """iWF 解释器 workflow 的启动输入"""
        value: dict[str, Any] = {
            "iwfWorkflowType": WORKFLOW_TYPE,
            "iwfWorkerUrl": WORKER_URL,
            "stateInput": {"encoding": "json", "data": '"start"'},
            "stateOptions": {"searchAttributesLoadingPolicy": {"persistenceLoadingType": "LOAD_NONE"}},
        }
        if start_state_id is not None:
            value["startStateId"] = start_state_id
        value.update(overrides)
        return value

    @staticmethod
    def decision(*state_ids: str) -> dict[str, Any]:
        """execute 的返回值：依次跳转到 state_ids"""
        return {
            "stateDecision": {
                "nextStates": [
                    {
                        "stateId": state_id,
                        "stateInput": {"encoding": "json", "data": f'"{state_id}-{i}"'},
                    }
                    for i, state_id in enumerate(state_ids)
                ]
            }
        }

    def _add(self, event_type: PrimitiveEventType, **attrs: Any) -> int:
        event_id = len(self.events) + 1
        self.events.append(
            PrimitiveEvent(
                event_id=event_id,
                ts=BASE_TS + timedelta(seconds=event_id),
                type=event_type,
                **attrs,
            )
        )
        return event_id

    def _context(self, execution_id: str) -> dict[str, Any]:
        return {
            "workflowId": self.workflow_id,
            "workflowRunId": self.run_id,
            "stateExecutionId": execution_id,
        }

    def started(self, workflow_input: Any = None) -> int:
        if workflow_input is None:
            workflow_input = self.iwf_input()
        return self._add(
            PrimitiveEventType.EXECUTION_STARTED,
            execution_started=ExecutionStartedAttributes(
                workflow_type="Interpreter",
                inputs=[workflow_input],
            ),
        )

    def task(self, task_type: str, inputs: list[Any], task_id: str = "") -> int:
        """调度任意类型的任务，返回 schedule id"""
        return self._add(
            PrimitiveEventType.TASK_SCHEDULED,
            task_scheduled=TaskScheduledAttributes(
                task_type=task_type,
                task_id=task_id or str(len(self.events) + 1),
                inputs=inputs,
            ),
        )

    def wait_until(self, state_id: str, execution_id: str) -> int:
        request = {
            "context": self._context(execution_id),
            "workflowType": WORKFLOW_TYPE,
            "workflowStateId": state_id,
        }
        return self.task(
            TaskType.WAIT_UNTIL,
            ["golang", {"IwfWorkerUrl": WORKER_URL, "Request": request}],
        )

    def execute(
        self,
        state_id: str,
        execution_id: str,
        state_locals: list[dict[str, Any]] | None = None,
        command_results: dict[str, Any] | None = None,
    ) -> int:
        request: dict[str, Any] = {
            "context": self._context(execution_id),
            "workflowType": WORKFLOW_TYPE,
            "workflowStateId": state_id,
        }
        if state_locals is not None:
            request["stateLocals"] = state_locals
        if command_results is not None:
            request["commandResults"] = command_results
        return self.task(
            TaskType.EXECUTE,
            ["golang", {"IwfWorkerUrl": WORKER_URL, "Request": request}],
        )

    def rpc(self, rpc_name: str, value: str = '"ping"') -> int:
        request = {
            "context": {"workflowId": self.workflow_id, "workflowRunId": self.run_id},
            "workflowType": WORKFLOW_TYPE,
            "rpcName": rpc_name,
            "input": {"encoding": "json", "data": value},
        }
        return self.task(
            TaskType.INVOKE_RPC,
            ["golang", {"IwfWorkerUrl": WORKER_URL, "Request": request}],
        )

    def dump(self, page: int = 0) -> int:
        return self.task(TaskType.DUMP_WORKFLOW, [self.workflow_id, self.run_id, page])

    def complete(self, schedule_id: int, result: Any = None) -> int:
        return self._add(
            PrimitiveEventType.TASK_COMPLETED,
            task_completed=TaskCompletedAttributes(
                scheduled_event_id=schedule_id,
                result=[] if result is None else [result],
            ),
        )

    def fail(self, schedule_id: int, message: str = "activity error") -> int:
        return self._add(
            PrimitiveEventType.TASK_FAILED,
            task_failed=TaskFailedAttributes(
                scheduled_event_id=schedule_id,
                failure_message=message,
            ),
        )

    def signal(self, signal_name: str, value: Any = None) -> int:
        return self._add(
            PrimitiveEventType.SIGNAL_RECEIVED,
            signal_received=SignalReceivedAttributes(
                signal_name=signal_name,
                inputs=[] if value is None else [value],
            ),
        )

    def closed(self, close_kind: CloseKind = CloseKind.COMPLETED, result: Any = None) -> int:
        return self._add(
            PrimitiveEventType.EXECUTION_CLOSED,
            execution_closed=ExecutionClosedAttributes(
                close_kind=close_kind,
                result=[] if result is None else [result],
            ),
        )


@pytest.fixture
def history_builder() -> PrimitiveLogBuilder:
    """提供空的原始事件日志构造器"""
    return PrimitiveLogBuilder()


@pytest.fixture
def base_epoch() -> int:
    """event_id 为 n 的事件时间戳为 base_epoch + n"""
    return BASE_EPOCH
