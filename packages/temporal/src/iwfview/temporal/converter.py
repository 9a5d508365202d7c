"""Temporal history -> PrimitiveEvent 转换

payload 用 SDK 默认的 payload converter 解码为 JSON 值。
没有原始事件对应物的 Temporal 事件（activity started、workflow task、marker 等）被丢弃。
"""

from collections.abc import Iterable, Sequence
from datetime import UTC
from typing import Any

import structlog
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
)
from temporalio.api.common.v1 import Payload, Payloads
from temporalio.api.history.v1 import HistoryEvent
from temporalio.converter import DataConverter, PayloadConverter

log = structlog.get_logger()

# 执行关闭事件的属性字段 -> 关闭种类
_CLOSE_ATTRIBUTES: dict[str, CloseKind] = {
    "workflow_execution_completed_event_attributes": CloseKind.COMPLETED,
    "workflow_execution_failed_event_attributes": CloseKind.FAILED,
    "workflow_execution_canceled_event_attributes": CloseKind.CANCELED,
    "workflow_execution_terminated_event_attributes": CloseKind.TERMINATED,
    "workflow_execution_continued_as_new_event_attributes": CloseKind.CONTINUED_AS_NEW,
    "workflow_execution_timed_out_event_attributes": CloseKind.TIMED_OUT,
}


class HistoryConverter:
    """逐个转换 Temporal history 事件"""

    def __init__(self, payload_converter: PayloadConverter | None = None) -> None:
        self._payload_converter = (
            payload_converter or DataConverter.default.payload_converter
        )

    def decode_payloads(self, payloads: Payloads | Sequence[Payload]) -> list[Any]:
        """解码 payload 列表"""
        items = payloads.payloads if isinstance(payloads, Payloads) else payloads
        if not items:
            return []
        return self._payload_converter.from_payloads(items)

    def convert(self, event: HistoryEvent) -> PrimitiveEvent | None:
        """转换单个事件，无对应物时返回 None"""
        attribute = event.WhichOneof("attributes")
        base = {
            "event_id": event.event_id,
            "ts": event.event_time.ToDatetime(tzinfo=UTC),
        }

        if attribute == "workflow_execution_started_event_attributes":
            attrs = event.workflow_execution_started_event_attributes
            return PrimitiveEvent(
                **base,
                type=PrimitiveEventType.EXECUTION_STARTED,
                execution_started=ExecutionStartedAttributes(
                    workflow_type=attrs.workflow_type.name,
                    inputs=self.decode_payloads(attrs.input),
                ),
            )

        if attribute == "activity_task_scheduled_event_attributes":
            attrs = event.activity_task_scheduled_event_attributes
            return PrimitiveEvent(
                **base,
                type=PrimitiveEventType.TASK_SCHEDULED,
                task_scheduled=TaskScheduledAttributes(
                    task_type=attrs.activity_type.name,
                    task_id=attrs.activity_id,
                    inputs=self.decode_payloads(attrs.input),
                ),
            )

        if attribute == "activity_task_completed_event_attributes":
            attrs = event.activity_task_completed_event_attributes
            return PrimitiveEvent(
                **base,
                type=PrimitiveEventType.TASK_COMPLETED,
                task_completed=TaskCompletedAttributes(
                    scheduled_event_id=attrs.scheduled_event_id,
                    result=self.decode_payloads(attrs.result),
                ),
            )

        if attribute == "activity_task_failed_event_attributes":
            attrs = event.activity_task_failed_event_attributes
            return PrimitiveEvent(
                **base,
                type=PrimitiveEventType.TASK_FAILED,
                task_failed=TaskFailedAttributes(
                    scheduled_event_id=attrs.scheduled_event_id,
                    failure_message=attrs.failure.message,
                ),
            )

        if attribute == "workflow_execution_signaled_event_attributes":
            attrs = event.workflow_execution_signaled_event_attributes
            return PrimitiveEvent(
                **base,
                type=PrimitiveEventType.SIGNAL_RECEIVED,
                signal_received=SignalReceivedAttributes(
                    signal_name=attrs.signal_name,
                    inputs=self.decode_payloads(attrs.input),
                ),
            )

        close_kind = _CLOSE_ATTRIBUTES.get(attribute or "")
        if close_kind is not None:
            result: list[Any] = []
            if close_kind == CloseKind.COMPLETED:
                result = self.decode_payloads(
                    event.workflow_execution_completed_event_attributes.result
                )
            return PrimitiveEvent(
                **base,
                type=PrimitiveEventType.EXECUTION_CLOSED,
                execution_closed=ExecutionClosedAttributes(
                    close_kind=close_kind,
                    result=result,
                ),
            )

        return None


def history_to_primitive_events(
    events: Iterable[HistoryEvent],
    converter: HistoryConverter | None = None,
) -> list[PrimitiveEvent]:
    """转换完整的 Temporal history

    Args:
        events: Temporal history 事件（按 event_id 顺序）
        converter: 自定义转换器，默认使用 SDK 默认 payload converter

    Returns:
        有序的原始事件日志
    """
    converter = converter or HistoryConverter()
    primitive_events: list[PrimitiveEvent] = []
    dropped = 0
    for event in events:
        primitive = converter.convert(event)
        if primitive is None:
            dropped += 1
            continue
        primitive_events.append(primitive)

    log.debug(
        "history_converted",
        primitive_count=len(primitive_events),
        dropped_count=dropped,
    )
    return primitive_events
