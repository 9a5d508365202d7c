"""CLI 入口模块 -- python -m iwfview.core <command>

支持的命令：
  reconstruct <history.json>  从保存的原始事件日志离线重建逻辑历史
"""

import json
import sys
from pathlib import Path

import structlog
from pydantic import ValidationError

from .exceptions import ReconstructionError


def main() -> None:
    """CLI 主入口"""
    if len(sys.argv) < 2:
        print("用法: python -m iwfview.core <command>")
        print("命令:")
        print("  reconstruct <history.json>  从原始事件日志重建逻辑历史")
        sys.exit(1)

    # stdout 只输出重建结果
    structlog.configure(logger_factory=structlog.PrintLoggerFactory(sys.stderr))

    command = sys.argv[1]

    if command == "reconstruct":
        if len(sys.argv) < 3:
            print("用法: python -m iwfview.core reconstruct <history.json>")
            sys.exit(1)
        sys.exit(reconstruct_file(Path(sys.argv[2])))
    else:
        print(f"未知命令: {command}")
        print("可用命令: reconstruct")
        sys.exit(1)


def reconstruct_file(path: Path) -> int:
    """重建并打印逻辑历史，返回进程退出码"""
    from .models.primitive import load_primitive_log
    from .reconstruction import initial_input_of, reconstruct

    try:
        events = load_primitive_log(path.read_bytes())
    except OSError as e:
        print(f"无法读取文件: {e}", file=sys.stderr)
        return 1
    except ValidationError as e:
        print(f"原始事件日志格式错误: {e.error_count()} 处校验失败", file=sys.stderr)
        return 1

    try:
        result = reconstruct(initial_input_of(events), events)
    except ReconstructionError as e:
        print(f"重建失败: {e}", file=sys.stderr)
        return 1

    print(
        json.dumps(
            {
                "workflowType": result.workflow_type,
                "historyEvents": [e.to_api() for e in result.events],
            },
            ensure_ascii=False,
            indent=2,
        )
    )
    return 0


if __name__ == "__main__":
    main()
