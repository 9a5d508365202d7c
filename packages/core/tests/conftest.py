"""packages/core 测试配置 -- 续跑快照 fixture"""

import json

import pytest


@pytest.fixture
def resume_snapshot_json() -> str:
    """续跑快照：状态 b 从头开始，状态 a 的一次执行待恢复"""
    return json.dumps(
        {
            "StatesToStartFromBeginning": [
                {
                    "stateId": "b",
                    "stateInput": {"encoding": "json", "data": '"carry"'},
                    "stateOptions": {"executeApiTimeoutSeconds": 30},
                }
            ],
            "StateExecutionsToResume": {
                "a-1": {
                    "StateExecutionId": "a-1",
                    "State": {
                        "stateId": "a",
                        "stateInput": {"encoding": "json", "data": '"resumed"'},
                    },
                }
            },
        }
    )


@pytest.fixture
def resume_input(history_builder) -> dict:
    """续跑执行的启动输入"""
    return history_builder.iwf_input(
        start_state_id=None,
        isResumeFromContinueAsNew=True,
        continueAsNewInput={"previousInternalRunId": "run-0"},
    )
