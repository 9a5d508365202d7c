"""执行状态映射测试"""

import pytest
from iwfview.core import UnknownStatusError, map_workflow_status
from iwfview.core.models import WorkflowStatus


class TestMapWorkflowStatus:
    def test_numeric_and_prefixed_timeout_agree(self):
        """数字码 7 与带前缀的 TIMED_OUT 映射到同一个 TIMEOUT"""
        assert map_workflow_status("7") == WorkflowStatus.TIMEOUT
        assert map_workflow_status("WORKFLOW_EXECUTION_STATUS_TIMED_OUT") == WorkflowStatus.TIMEOUT

    def test_unknown_code_raises(self):
        with pytest.raises(UnknownStatusError) as exc_info:
            map_workflow_status("99")
        assert exc_info.value.value == "99"
        assert "99" in str(exc_info.value)

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            (1, WorkflowStatus.RUNNING),
            ("2", WorkflowStatus.COMPLETED),
            ("failed", WorkflowStatus.FAILED),
            ("  WORKFLOW_EXECUTION_STATUS_CANCELED ", WorkflowStatus.CANCELED),
            ("Terminated", WorkflowStatus.TERMINATED),
            (6, WorkflowStatus.CONTINUED_AS_NEW),
        ],
    )
    def test_table_driven_mapping(self, value, expected):
        assert map_workflow_status(value) == expected

    @pytest.mark.parametrize("value", ["", "0", "UNSPECIFIED", "WORKFLOW_EXECUTION_STATUS_"])
    def test_never_defaults(self, value):
        """无法识别的值不会静默降级"""
        with pytest.raises(UnknownStatusError):
            map_workflow_status(value)
