"""
MCP 工具与 Gemini 函数调用之间的编排逻辑

两种执行方式：
- run_single_call: 发送提示词，若模型首个回复部分是函数调用，则调用一次对应的MCP工具，把结果交回模型，返回最终回答；
- run_agent_loop: 循环处理函数调用，直到模型不再调用函数，或达到最大调用轮次（默认5轮）。
"""
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Protocol

import mcp.types
from google.genai import types

from common import logger
from common.json_parse import decode_arguments
from mcp_bridge.mcp_stdio_client import ToolInvocationResult
from mcp_bridge.mcp_to_gemini_tools import mcp_to_gemini_tools

logger = logger.configure_logging(__name__)

# 控制最大的模型调用轮次，防止无限调用工具
MAX_FUNCTION_CALLS = 5


class ChatModel(Protocol):
    def generate(self, contents: List[types.Content]) -> types.GenerateContentResponse:
        ...


class ToolClient(Protocol):
    async def list_tools(self) -> List[mcp.types.Tool]:
        ...

    async def call_tool(self, name: str, arguments: Optional[Dict[str, Any]] = None) -> ToolInvocationResult:
        ...


class ConversationState:
    """一次会话的对话历史，按顺序记录用户提示、模型回复、函数调用及函数结果"""

    def __init__(self) -> None:
        self._contents: List[types.Content] = []

    @property
    def contents(self) -> List[types.Content]:
        return list(self._contents)

    def __len__(self) -> int:
        return len(self._contents)

    def add_user_text(self, text: str) -> None:
        self._contents.append(types.Content(role="user", parts=[types.Part(text=text)]))

    def add_model_content(self, content: types.Content) -> None:
        self._contents.append(content)

    def add_function_responses(self, responses: List[types.Part]) -> None:
        self._contents.append(types.Content(role="user", parts=responses))


@dataclass(frozen=True)
class AgentLoopResult:
    text: str
    iterations: int
    exhausted: bool  # 达到最大轮次时模型仍在调用函数


def _reply_content(response: types.GenerateContentResponse) -> Optional[types.Content]:
    if not response.candidates:
        return None
    return response.candidates[0].content


def function_calls(response: types.GenerateContentResponse) -> List[types.FunctionCall]:
    """取出首个候选回复中的全部函数调用"""
    content = _reply_content(response)
    if content is None or not content.parts:
        return []
    return [part.function_call for part in content.parts if part.function_call]


def first_function_call(response: types.GenerateContentResponse) -> Optional[types.FunctionCall]:
    """只检查首个候选回复的第一个部分，是函数调用则返回"""
    content = _reply_content(response)
    if content is None or not content.parts:
        return None
    return content.parts[0].function_call


def response_text(response: types.GenerateContentResponse) -> str:
    """拼接首个候选回复中的文本部分"""
    content = _reply_content(response)
    if content is None or not content.parts:
        return ""
    return "".join(part.text for part in content.parts if part.text and not part.thought)


async def register_tools(mcp_client: ToolClient) -> List[types.Tool]:
    """获取 MCP 工具列表并转换为 Gemini 工具，转换失败的工具被排除"""
    mcp_tools = await mcp_client.list_tools()
    gemini_tools = mcp_to_gemini_tools(mcp_tools)
    logger.info(f"成功加载 {len(gemini_tools)}/{len(mcp_tools)} 个MCP工具")
    return gemini_tools


async def resolve_function_call(mcp_client: ToolClient, function_call: types.FunctionCall) -> types.Part:
    """
    通过MCP客户端执行一次函数调用，并把结果包装为 function response

    工具调用失败时返回 {"error": ...}，不会中断会话。
    """
    logger.info(f"gemini funcall: {function_call.name} {function_call.args}")
    try:
        arguments = decode_arguments(function_call.args)
    except (TypeError, ValueError) as e:
        result = ToolInvocationResult.failure(f"invalid arguments: {e}")
    else:
        result = await mcp_client.call_tool(function_call.name, arguments)

    return types.Part.from_function_response(
        name=function_call.name,
        response=result.to_function_response(),
    )


async def run_single_call(
        model: ChatModel,
        mcp_client: ToolClient,
        prompt: str,
        state: Optional[ConversationState] = None
) -> str:
    """
    发送提示词并最多处理一次函数调用

    Args:
        model: Gemini 模型封装（已携带函数声明）
        mcp_client: MCP 客户端
        prompt: 用户提示词
        state: 对话历史，不传则新建

    Returns:
        模型的最终回答文本
    """
    state = state if state is not None else ConversationState()
    state.add_user_text(prompt)

    response = model.generate(state.contents)
    content = _reply_content(response)
    function_call = first_function_call(response)
    if function_call is None:
        logger.warning("模型没有返回函数调用，直接使用模型回答")
        if content is not None:
            state.add_model_content(content)
        return response_text(response)

    # 记录模型的函数调用，再记录工具执行结果
    state.add_model_content(content)
    state.add_function_responses([await resolve_function_call(mcp_client, function_call)])

    final_response = model.generate(state.contents)
    final_content = _reply_content(final_response)
    if final_content is not None:
        state.add_model_content(final_content)
    return response_text(final_response)


async def run_agent_loop(
        model: ChatModel,
        mcp_client: ToolClient,
        prompt: str,
        max_iterations: int = MAX_FUNCTION_CALLS,
        state: Optional[ConversationState] = None
) -> AgentLoopResult:
    """
    循环执行函数调用，直到模型不再调用函数或达到最大轮次

    每一轮调用一次模型；回复中的每个函数调用各执行一次工具调用。

    Args:
        model: Gemini 模型封装（已携带函数声明）
        mcp_client: MCP 客户端
        prompt: 用户提示词
        max_iterations: 最大模型调用轮次
        state: 对话历史，不传则新建

    Returns:
        最终回答、实际轮次、是否因达到上限而结束
    """
    state = state if state is not None else ConversationState()
    state.add_user_text(prompt)

    for iteration in range(1, max_iterations + 1):
        response = model.generate(state.contents)
        content = _reply_content(response)
        if content is not None:
            state.add_model_content(content)

        calls = function_calls(response)
        if not calls:
            return AgentLoopResult(text=response_text(response), iterations=iteration, exhausted=False)

        logger.info(f"第 {iteration} 轮，共 {len(calls)} 个函数调用")
        state.add_function_responses([await resolve_function_call(mcp_client, call) for call in calls])

    logger.warning(f"已达到最大工具调用次数（{max_iterations}次），对话结束")
    return AgentLoopResult(text="", iterations=max_iterations, exhausted=True)
