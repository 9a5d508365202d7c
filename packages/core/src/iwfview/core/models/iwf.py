"""iWF Payload 模型

活动输入/输出以及 workflow 输入中承载的 iWF 结构化 payload。
IDL 类型字段为 camelCase；iWF 服务端内部结构（Go struct，无 json tag）为 PascalCase，
这类字段使用显式 alias。未知字段一律保留，展示层原样透传。
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

# WorkflowStateOptions 字段众多且随 iWF 版本演进，这里只做透传
StateOptions = dict[str, Any]


class IwfModel(BaseModel):
    """iWF payload 基类 -- camelCase 别名，允许未知字段"""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
    )


class EncodedObject(IwfModel):
    """编码后的用户数据"""

    encoding: str | None = None
    data: str | None = None


class StateMovement(IwfModel):
    """状态决策中的一次跳转"""

    state_id: str
    state_input: EncodedObject | None = None
    state_options: StateOptions | None = None
    wait_for_key: str | None = None


class StateDecision(IwfModel):
    """Execute 的决策：下一批要激活的状态"""

    next_states: list[StateMovement] = Field(default_factory=list)


class ContinueAsNewInput(IwfModel):
    """续跑标记，仅用于展示上一次执行"""

    previous_internal_run_id: str | None = None


class InterpreterWorkflowInput(IwfModel):
    """iWF 解释器 workflow 的启动输入

    iwf_workflow_type 非空是判定 "这是一个 iWF 执行" 的标记。
    """

    iwf_workflow_type: str = ""
    iwf_worker_url: str | None = None
    start_state_id: str | None = None
    state_input: EncodedObject | None = None
    state_options: StateOptions | None = None
    is_resume_from_continue_as_new: bool = False
    continue_as_new_input: ContinueAsNewInput | None = None


class WorkflowContext(IwfModel):
    """worker 请求上下文"""

    workflow_id: str | None = None
    workflow_run_id: str | None = None


class StateContext(WorkflowContext):
    """状态 API 请求上下文，state_execution_id 标识一次状态激活"""

    state_execution_id: str = Field(min_length=1)


class WorkflowStateStartRequest(IwfModel):
    """waitUntil 请求"""

    context: StateContext
    workflow_type: str | None = None
    workflow_state_id: str
    state_input: EncodedObject | None = None


class WorkflowStateDecideRequest(IwfModel):
    """execute 请求"""

    context: StateContext
    workflow_type: str | None = None
    workflow_state_id: str
    state_input: EncodedObject | None = None
    state_locals: list[dict[str, Any]] | None = None
    command_results: dict[str, Any] | None = None


class WorkflowStateDecideResponse(IwfModel):
    """execute 响应"""

    state_decision: StateDecision | None = None


class WorkflowWorkerRpcRequest(IwfModel):
    """RPC 请求"""

    context: WorkflowContext | None = None
    workflow_type: str | None = None
    rpc_name: str = ""
    input: EncodedObject | None = None


class StateStartActivityInput(IwfModel):
    """StateApiWaitUntil 活动的第二个入参"""

    iwf_worker_url: str | None = Field(default=None, alias="IwfWorkerUrl")
    request: WorkflowStateStartRequest = Field(alias="Request")


class StateDecideActivityInput(IwfModel):
    """StateApiExecute 活动的第二个入参"""

    iwf_worker_url: str | None = Field(default=None, alias="IwfWorkerUrl")
    request: WorkflowStateDecideRequest = Field(alias="Request")


class InvokeRpcActivityInput(IwfModel):
    """InvokeWorkerRpc 活动的第二个入参"""

    iwf_worker_url: str | None = Field(default=None, alias="IwfWorkerUrl")
    request: WorkflowWorkerRpcRequest = Field(alias="Request")


class WorkflowDumpResponse(IwfModel):
    """DumpWorkflowInternal 活动返回的一页快照"""

    checksum: str = ""
    total_pages: int | None = None
    json_data: str = ""


class StateExecutionResumeInfo(IwfModel):
    """续跑时需要恢复的状态执行"""

    state_execution_id: str | None = Field(default=None, alias="StateExecutionId")
    state: StateMovement | None = Field(default=None, alias="State")


class ContinueAsNewDumpResponse(IwfModel):
    """续跑快照（由多页 jsonData 拼接后解析）"""

    # Go 端 nil 切片/映射序列化为 null
    states_to_start_from_beginning: list[StateMovement] | None = Field(
        default=None,
        alias="StatesToStartFromBeginning",
    )
    state_executions_to_resume: dict[str, StateExecutionResumeInfo] | None = Field(
        default=None,
        alias="StateExecutionsToResume",
    )
