"""续跑快照组装

从续跑（continue-as-new）执行中恢复时，日志开头是一串 DumpWorkflowInternal 任务，
每个任务返回快照的一页 jsonData。按出现顺序拼接各页，checksum 变化时重新开始，
直到遇到第一个非 dump 的任务调度为止。
"""

from collections.abc import Sequence

import structlog

from .decoding import decode_continue_as_new_snapshot, decode_dump_response, first_value
from .models.enums import PrimitiveEventType, TaskType
from .models.iwf import ContinueAsNewDumpResponse
from .models.primitive import PrimitiveEvent

log = structlog.get_logger()


def collect_resume_snapshot(events: Sequence[PrimitiveEvent]) -> ContinueAsNewDumpResponse:
    """拼接并解析续跑快照

    Args:
        events: 完整的原始事件日志

    Returns:
        解析后的续跑快照

    Raises:
        MalformedHistoryError: 没有已完成的 dump 页，或拼接结果无法解析
    """
    dump_schedule_ids: set[int] = set()
    checksum = ""
    chunks: list[str] = []
    page_count = 0

    for event in events:
        if event.type == PrimitiveEventType.TASK_SCHEDULED and event.task_scheduled:
            if event.task_scheduled.task_type != TaskType.DUMP_WORKFLOW:
                break
            dump_schedule_ids.add(event.event_id)
        elif event.type == PrimitiveEventType.TASK_COMPLETED and event.task_completed:
            if event.task_completed.scheduled_event_id not in dump_schedule_ids:
                continue
            page = decode_dump_response(
                first_value(event.task_completed.result), event.event_id
            )
            if page.checksum != checksum:
                # checksum 变化说明快照已重新生成，之前的分页作废
                checksum = page.checksum
                chunks = []
            chunks.append(page.json_data)
            page_count += 1

    log.debug(
        "resume_snapshot_collected",
        dump_task_count=len(dump_schedule_ids),
        page_count=page_count,
        checksum=checksum,
    )
    return decode_continue_as_new_snapshot("".join(chunks))
