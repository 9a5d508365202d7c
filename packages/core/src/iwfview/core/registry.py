"""重建过程中的查找结构

- PendingTransitionRegistry: state_id -> 待消费转移上下文的 FIFO 队列
- ScheduleTable: schedule id -> 逻辑事件下标（completion 回查 schedule）
- ExecutionIdBridge: state_execution_id -> 同一状态激活的转移上下文（execute 回查 waitUntil）

三者都只属于一次重建，不跨执行、不跨请求共享。
"""

from collections import deque

from pydantic import BaseModel, Field

from .exceptions import MalformedHistoryError
from .models.history import FROM_INITIAL_INPUT
from .models.iwf import EncodedObject, StateMovement, StateOptions


class PendingTransition(BaseModel):
    """待消费的转移上下文"""

    origin_index: int = Field(description="因果来源的逻辑事件下标，-1 表示初始输入")
    options: StateOptions | None = None
    input: EncodedObject | None = None

    @classmethod
    def from_movement(cls, origin_index: int, movement: StateMovement) -> "PendingTransition":
        """由状态决策中的一次跳转创建"""
        return cls(
            origin_index=origin_index,
            options=movement.state_options,
            input=movement.state_input,
        )


class PendingTransitionRegistry:
    """按 state_id 分组的 FIFO 队列

    同一 state_id 可能同时有多个待消费上下文（fan-out 重复目标、多个来源），
    先入队者先被调度消费。
    """

    def __init__(self) -> None:
        self._queues: dict[str, deque[PendingTransition]] = {}

    def push(self, state_id: str, transition: PendingTransition) -> None:
        """入队"""
        self._queues.setdefault(state_id, deque()).append(transition)

    def pop(self, state_id: str, event_id: int | None = None) -> PendingTransition:
        """按 FIFO 取出最早入队的上下文

        Raises:
            MalformedHistoryError: 该 state_id 没有待消费的上下文
        """
        queue = self._queues.get(state_id)
        if not queue:
            raise MalformedHistoryError(
                "No pending transition for scheduled state",
                event_id=event_id,
                state_id=state_id,
            )
        transition = queue.popleft()
        if not queue:
            del self._queues[state_id]
        return transition

    def pending_count(self, state_id: str) -> int:
        return len(self._queues.get(state_id, ()))

    def snapshot(self) -> dict[str, list[PendingTransition]]:
        """未消费的上下文（运行中的执行在日志末尾留有未消费项是合法的）"""
        return {state_id: list(queue) for state_id, queue in self._queues.items()}


class ScheduleTable:
    """schedule id -> 逻辑事件下标

    每个 schedule id 只登记一次、只解析一次。
    不产生逻辑事件的任务（续跑 dump、未知类型）登记为 unlinked，
    其首次 completion 被跳过而不是报错，重复 completion 同样报错。
    """

    def __init__(self) -> None:
        self._indexes: dict[int, int] = {}
        self._unlinked: set[int] = set()
        self._resolved: set[int] = set()

    def _check_new(self, schedule_id: int) -> None:
        if schedule_id in self._indexes or schedule_id in self._unlinked:
            raise MalformedHistoryError(
                "Schedule id registered twice", event_id=schedule_id
            )

    def register(self, schedule_id: int, event_index: int) -> None:
        self._check_new(schedule_id)
        self._indexes[schedule_id] = event_index

    def register_unlinked(self, schedule_id: int) -> None:
        self._check_new(schedule_id)
        self._unlinked.add(schedule_id)

    def resolve(self, schedule_id: int, event_id: int | None = None) -> int | None:
        """解析 completion 对应的逻辑事件下标

        Returns:
            逻辑事件下标；unlinked 任务返回 None

        Raises:
            MalformedHistoryError: schedule id 未登记，或已被解析过
        """
        if schedule_id not in self._indexes and schedule_id not in self._unlinked:
            raise MalformedHistoryError(
                f"Completion references unknown schedule id {schedule_id}",
                event_id=event_id,
            )
        if schedule_id in self._resolved:
            raise MalformedHistoryError(
                f"Schedule id {schedule_id} completed more than once",
                event_id=event_id,
            )
        self._resolved.add(schedule_id)
        return self._indexes.get(schedule_id)


class ExecutionIdBridge:
    """state_execution_id -> 同一状态激活的转移上下文

    waitUntil 登记时上下文的来源即 waitUntil 事件本身；
    续跑快照中待恢复的状态执行以 -1 为来源。
    """

    def __init__(self) -> None:
        self._links: dict[str, PendingTransition] = {}

    def link(self, state_execution_id: str, transition: PendingTransition) -> None:
        self._links[state_execution_id] = transition

    def link_wait_until(
        self,
        state_execution_id: str,
        event_index: int,
        options: StateOptions | None,
        input: EncodedObject | None,
    ) -> None:
        self.link(
            state_execution_id,
            PendingTransition(origin_index=event_index, options=options, input=input),
        )

    def link_resumed(self, state_execution_id: str, movement: StateMovement | None) -> None:
        if movement is None:
            self.link(state_execution_id, PendingTransition(origin_index=FROM_INITIAL_INPUT))
        else:
            self.link(
                state_execution_id,
                PendingTransition.from_movement(FROM_INITIAL_INPUT, movement),
            )

    def get(self, state_execution_id: str) -> PendingTransition | None:
        return self._links.get(state_execution_id)
