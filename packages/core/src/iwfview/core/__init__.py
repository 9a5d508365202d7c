"""iwfview Core -- iWF 执行历史重建

packages/core 的公开接口导出。
"""

from .exceptions import (
    MalformedHistoryError,
    ReconstructionError,
    UnknownStatusError,
    UnsupportedExecutionError,
)
from .reconstruction import (
    HistoryReconstruction,
    HistoryReconstructor,
    check_causal_order,
    initial_input_of,
    reconstruct,
)
from .status import map_workflow_status

__all__ = [
    "HistoryReconstruction",
    "HistoryReconstructor",
    "reconstruct",
    "initial_input_of",
    "check_causal_order",
    "map_workflow_status",
    "ReconstructionError",
    "MalformedHistoryError",
    "UnsupportedExecutionError",
    "UnknownStatusError",
]
