"""History Reconstruction Engine -- 从原始事件日志重建 iWF 逻辑历史

对一次执行的原始事件日志做单遍折叠（fold），恢复逻辑状态之间的因果结构：
哪个状态产生了哪个后续状态、每条因果边上的输入/输出、每一步的起止时间。

- waitUntil 调度：从 PendingTransitionRegistry 按 FIFO 取出上下文
- execute 调度：优先经 ExecutionIdBridge 关联同一激活的 waitUntil，否则取 FIFO 上下文
- completion：经 ScheduleTable 回查逻辑事件并就地补全；execute 的决策展开为新的待消费上下文
- RPC、信号、任务失败：记录但不接入因果图

重建是全有或全无的，任何结构异常都抛出 MalformedHistoryError。
"""

import time
from collections.abc import Callable, Sequence
from typing import Any

import structlog
from pydantic import BaseModel, Field

from .decoding import (
    classify_task_type,
    decode_decide_response,
    decode_task_input,
    decode_workflow_input,
    first_value,
)
from .exceptions import MalformedHistoryError
from .models.enums import CLOSE_KIND_STATUS, HistoryEventType, PrimitiveEventType, TaskType
from .models.history import (
    FROM_INITIAL_INPUT,
    HistoryEvent,
    RpcExecutedDetails,
    SignalReceivedDetails,
    StateExecuteDetails,
    StateWaitUntilDetails,
    WorkflowClosedDetails,
    WorkflowStartedDetails,
)
from .models.iwf import ContinueAsNewDumpResponse, InterpreterWorkflowInput
from .models.primitive import PrimitiveEvent
from .registry import (
    ExecutionIdBridge,
    PendingTransition,
    PendingTransitionRegistry,
    ScheduleTable,
)
from .snapshot import collect_resume_snapshot

log = structlog.get_logger()


class HistoryReconstruction(BaseModel):
    """一次重建的结果"""

    workflow_type: str = Field(description="逻辑 workflow type（iwfWorkflowType）")
    workflow_input: InterpreterWorkflowInput = Field(description="类型化的初始输入")
    resume_snapshot: ContinueAsNewDumpResponse | None = Field(
        default=None, description="续跑快照（仅续跑执行）"
    )
    events: list[HistoryEvent] = Field(default_factory=list, description="有序逻辑事件")
    task_failures: dict[int, str] = Field(
        default_factory=dict,
        description="schedule id -> 失败信息（尚未接入因果图）",
    )
    pending_transitions: dict[str, list[PendingTransition]] = Field(
        default_factory=dict,
        description="日志末尾仍未消费的转移上下文",
    )


def check_causal_order(events: Sequence[HistoryEvent]) -> None:
    """校验因果下标不变量：from_event_id 为 -1 或严格小于自身下标

    Raises:
        MalformedHistoryError: 存在指向自身或之后事件的 from_event_id
    """
    for index, event in enumerate(events):
        from_event_id = event.from_event_id
        if from_event_id is None or from_event_id == FROM_INITIAL_INPUT:
            continue
        if not 0 <= from_event_id < index:
            raise MalformedHistoryError(
                f"Logical event {index} refers to event {from_event_id} out of causal order"
            )


class HistoryReconstructor:
    """单次重建

    查找结构只属于本实例，一个实例只重建一次。
    """

    def __init__(self, initial_input: Any) -> None:
        """
        Args:
            initial_input: 执行启动输入（已解码的 JSON 值）

        Raises:
            UnsupportedExecutionError: 初始输入不是 iWF 解释器输入
        """
        self._input = decode_workflow_input(initial_input)
        self._events: list[HistoryEvent] = []
        self._registry = PendingTransitionRegistry()
        self._schedules = ScheduleTable()
        self._bridge = ExecutionIdBridge()
        self._failures: dict[int, str] = {}
        self._snapshot: ContinueAsNewDumpResponse | None = None
        self._done = False

        self._handlers: dict[PrimitiveEventType, Callable[[PrimitiveEvent], None]] = {
            PrimitiveEventType.TASK_SCHEDULED: self._on_task_scheduled,
            PrimitiveEventType.TASK_COMPLETED: self._on_task_completed,
            PrimitiveEventType.TASK_FAILED: self._on_task_failed,
            PrimitiveEventType.SIGNAL_RECEIVED: self._on_signal_received,
            PrimitiveEventType.EXECUTION_STARTED: self._on_execution_started,
            PrimitiveEventType.EXECUTION_CLOSED: self._on_execution_closed,
        }

    def run(self, events: Sequence[PrimitiveEvent]) -> HistoryReconstruction:
        """按日志顺序折叠全部原始事件

        Args:
            events: 有序的原始事件日志

        Returns:
            HistoryReconstruction

        Raises:
            MalformedHistoryError: 日志违反结构不变量
        """
        if self._done:
            raise RuntimeError("HistoryReconstructor instances are single-use")
        self._done = True

        start_time = time.monotonic()
        self._seed(events)

        for event in events:
            self.apply_event(event)

        check_causal_order(self._events)

        pending = self._registry.snapshot()
        elapsed_ms = int((time.monotonic() - start_time) * 1000)
        log.info(
            "history_reconstruction_completed",
            workflow_type=self._input.iwf_workflow_type,
            primitive_count=len(events),
            event_count=len(self._events),
            pending_state_count=len(pending),
            failure_count=len(self._failures),
            elapsed_ms=elapsed_ms,
        )

        return HistoryReconstruction(
            workflow_type=self._input.iwf_workflow_type,
            workflow_input=self._input,
            resume_snapshot=self._snapshot,
            events=self._events,
            task_failures=self._failures,
            pending_transitions=pending,
        )

    def apply_event(self, event: PrimitiveEvent) -> None:
        """将单个原始事件应用到逻辑历史"""
        self._handlers[event.type](event)

    # ------------------------------------------------------------------
    # 初始化
    # ------------------------------------------------------------------

    def _seed(self, events: Sequence[PrimitiveEvent]) -> None:
        if self._input.is_resume_from_continue_as_new:
            self._snapshot = collect_resume_snapshot(events)
            for movement in self._snapshot.states_to_start_from_beginning or []:
                self._registry.push(
                    movement.state_id,
                    PendingTransition.from_movement(FROM_INITIAL_INPUT, movement),
                )
            for execution_id, resume_info in (
                self._snapshot.state_executions_to_resume or {}
            ).items():
                self._bridge.link_resumed(execution_id, resume_info.state)
            return

        # 非续跑执行最多只有一个起始状态，也可能没有
        if self._input.start_state_id:
            self._registry.push(
                self._input.start_state_id,
                PendingTransition(
                    origin_index=FROM_INITIAL_INPUT,
                    options=self._input.state_options,
                    input=self._input.state_input,
                ),
            )

    def _append(self, event: HistoryEvent) -> int:
        index = len(self._events)
        self._events.append(event)
        return index

    # ------------------------------------------------------------------
    # 任务调度
    # ------------------------------------------------------------------

    def _on_task_scheduled(self, event: PrimitiveEvent) -> None:
        attrs = event.task_scheduled
        if attrs is None:
            raise MalformedHistoryError(
                "TASK_SCHEDULED event without attributes", event_id=event.event_id
            )

        task_type = classify_task_type(attrs.task_type)
        if task_type == TaskType.WAIT_UNTIL:
            self._schedule_wait_until(event)
        elif task_type == TaskType.EXECUTE:
            self._schedule_execute(event)
        elif task_type == TaskType.INVOKE_RPC:
            self._schedule_rpc(event)
        else:
            # 续跑 dump 以及其他任务类型不产生逻辑事件
            self._schedules.register_unlinked(event.event_id)
            log.debug(
                "task_not_linked",
                event_id=event.event_id,
                task_type=attrs.task_type,
            )

    def _schedule_wait_until(self, event: PrimitiveEvent) -> None:
        request = decode_task_input(event).request
        state_id = request.workflow_state_id
        execution_id = request.context.state_execution_id

        transition = self._registry.pop(state_id, event.event_id)
        index = self._append(
            HistoryEvent(
                event_type=HistoryEventType.STATE_WAIT_UNTIL,
                state_wait_until=StateWaitUntilDetails(
                    state_id=state_id,
                    state_execution_id=execution_id,
                    input=transition.input,
                    state_options=transition.options,
                    from_event_id=transition.origin_index,
                    started_at=event.timestamp,
                ),
            )
        )
        self._schedules.register(event.event_id, index)
        self._bridge.link_wait_until(
            execution_id, index, transition.options, transition.input
        )

    def _schedule_execute(self, event: PrimitiveEvent) -> None:
        request = decode_task_input(event).request
        state_id = request.workflow_state_id
        execution_id = request.context.state_execution_id

        # 同一激活的 waitUntil 已登记时不消费 registry
        transition = self._bridge.get(execution_id)
        if transition is None:
            transition = self._registry.pop(state_id, event.event_id)

        index = self._append(
            HistoryEvent(
                event_type=HistoryEventType.STATE_EXECUTE,
                state_execute=StateExecuteDetails(
                    state_id=state_id,
                    state_execution_id=execution_id,
                    input=transition.input,
                    state_locals=request.state_locals,
                    command_results=request.command_results,
                    from_event_id=transition.origin_index,
                    state_options=transition.options,
                    task_id=event.task_scheduled.task_id,
                    started_at=event.timestamp,
                ),
            )
        )
        self._schedules.register(event.event_id, index)

    def _schedule_rpc(self, event: PrimitiveEvent) -> None:
        request = decode_task_input(event).request
        index = self._append(
            HistoryEvent(
                event_type=HistoryEventType.RPC_EXECUTED,
                rpc_executed=RpcExecutedDetails(
                    rpc_name=request.rpc_name,
                    input=request.input,
                    task_id=event.task_scheduled.task_id,
                    started_at=event.timestamp,
                ),
            )
        )
        self._schedules.register(event.event_id, index)

    # ------------------------------------------------------------------
    # 任务完成 / 失败
    # ------------------------------------------------------------------

    def _on_task_completed(self, event: PrimitiveEvent) -> None:
        attrs = event.task_completed
        if attrs is None:
            raise MalformedHistoryError(
                "TASK_COMPLETED event without attributes", event_id=event.event_id
            )

        index = self._schedules.resolve(attrs.scheduled_event_id, event.event_id)
        if index is None:
            # unlinked 任务
            return

        target = self._events[index]
        response = first_value(attrs.result)

        if target.state_wait_until is not None:
            target.state_wait_until.response = response
            target.state_wait_until.completed_at = event.timestamp
        elif target.state_execute is not None:
            target.state_execute.response = response
            target.state_execute.completed_at = event.timestamp
            self._fan_out(index, response, event.event_id)
        elif target.rpc_executed is not None:
            # RPC 的决策暂不展开
            target.rpc_executed.response = response
            target.rpc_executed.completed_at = event.timestamp

    def _fan_out(self, index: int, response: Any, event_id: int) -> None:
        decision = decode_decide_response(response, event_id).state_decision
        if decision is None:
            return
        for movement in decision.next_states:
            self._registry.push(
                movement.state_id,
                PendingTransition.from_movement(index, movement),
            )

    def _on_task_failed(self, event: PrimitiveEvent) -> None:
        attrs = event.task_failed
        if attrs is None:
            raise MalformedHistoryError(
                "TASK_FAILED event without attributes", event_id=event.event_id
            )
        # TODO: 按 stateApiFailurePolicy 将失败接入因果图
        self._failures[attrs.scheduled_event_id] = attrs.failure_message
        log.debug(
            "task_failure_recorded",
            event_id=event.event_id,
            scheduled_event_id=attrs.scheduled_event_id,
        )

    # ------------------------------------------------------------------
    # 信号 / 执行开始 / 执行关闭
    # ------------------------------------------------------------------

    def _on_signal_received(self, event: PrimitiveEvent) -> None:
        attrs = event.signal_received
        if attrs is None:
            raise MalformedHistoryError(
                "SIGNAL_RECEIVED event without attributes", event_id=event.event_id
            )
        self._append(
            HistoryEvent(
                event_type=HistoryEventType.SIGNAL_RECEIVED,
                signal_received=SignalReceivedDetails(
                    signal_name=attrs.signal_name,
                    input=first_value(attrs.inputs),
                    received_at=event.timestamp,
                ),
            )
        )

    def _on_execution_started(self, event: PrimitiveEvent) -> None:
        self._append(
            HistoryEvent(
                event_type=HistoryEventType.WORKFLOW_STARTED,
                workflow_started=WorkflowStartedDetails(
                    workflow_type=self._input.iwf_workflow_type,
                    started_at=event.timestamp,
                    input=self._input,
                    resume_snapshot=self._snapshot,
                ),
            )
        )

    def _on_execution_closed(self, event: PrimitiveEvent) -> None:
        attrs = event.execution_closed
        if attrs is None:
            raise MalformedHistoryError(
                "EXECUTION_CLOSED event without attributes", event_id=event.event_id
            )
        self._append(
            HistoryEvent(
                event_type=HistoryEventType.WORKFLOW_CLOSED,
                workflow_closed=WorkflowClosedDetails(
                    closed_at=event.timestamp,
                    closed_type=CLOSE_KIND_STATUS[attrs.close_kind],
                    output=first_value(attrs.result),
                ),
            )
        )


def reconstruct(
    initial_input: Any,
    events: Sequence[PrimitiveEvent],
) -> HistoryReconstruction:
    """重建一次执行的逻辑历史

    Args:
        initial_input: 执行启动输入（已解码的 JSON 值）
        events: 有序的原始事件日志

    Returns:
        HistoryReconstruction

    Raises:
        UnsupportedExecutionError: 初始输入缺少 iWF 标记
        MalformedHistoryError: 日志违反结构不变量
    """
    return HistoryReconstructor(initial_input).run(events)


def initial_input_of(events: Sequence[PrimitiveEvent]) -> Any:
    """取日志首个 EXECUTION_STARTED 事件的第一个输入值

    Raises:
        MalformedHistoryError: 日志不以 EXECUTION_STARTED 开头
    """
    if not events or events[0].type != PrimitiveEventType.EXECUTION_STARTED:
        raise MalformedHistoryError("History does not start with an execution started event")
    started = events[0].execution_started
    return first_value(started.inputs) if started else None
