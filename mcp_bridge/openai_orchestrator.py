import json
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Protocol

from openai.types.chat import ChatCompletionMessage

from common import logger
from common.json_parse import decode_arguments
from mcp_bridge.mcp_stdio_client import ToolInvocationResult
from mcp_bridge.mcp_to_openai_tools import fastmcp_to_openai_tools
from mcp_bridge.orchestrator import MAX_FUNCTION_CALLS, AgentLoopResult, ToolClient

logger = logger.configure_logging(__name__)

DEFAULT_SYSTEM_PROMPT = "你是一个智能助手，能够使用提供的工具解决用户问题。"


class OpenAIModel(Protocol):
    def get_model_response(self, messages: List[Dict[str, Any]]) -> ChatCompletionMessage:
        ...


@dataclass(frozen=True)
class ParsedToolCall:
    id: str
    name: str
    arguments: Optional[Dict[str, Any]]
    error: Optional[str] = None


async def register_openai_tools(mcp_client: ToolClient) -> List[Dict[str, Any]]:
    """获取 MCP 工具列表并转换为 OpenAI 工具调用格式"""
    mcp_tools = await mcp_client.list_tools()
    openai_tools = fastmcp_to_openai_tools(mcp_tools)
    logger.info(f"成功加载 {len(openai_tools)}/{len(mcp_tools)} 个MCP工具")
    return openai_tools


def parse_tool_calls(message: ChatCompletionMessage) -> List[ParsedToolCall]:
    """
    解析LLM响应中的工具调用（符合OpenAI Function Calling规范）

    参数解析失败的调用同样保留，错误信息会作为该调用的结果交回模型。
    """
    tool_calls = []
    for tool_call in message.tool_calls or []:
        function = tool_call.function
        try:
            arguments = decode_arguments(function.arguments)
        except (TypeError, ValueError) as e:
            logger.error(f"解析工具调用参数失败: {str(e)}")
            tool_calls.append(ParsedToolCall(id=tool_call.id, name=function.name, arguments=None,
                                             error=f"invalid arguments: {e}"))
            continue
        tool_calls.append(ParsedToolCall(id=tool_call.id, name=function.name, arguments=arguments))
    return tool_calls


async def run_openai_agent_loop(
        model: OpenAIModel,
        mcp_client: ToolClient,
        prompt: str,
        system_prompt: str = DEFAULT_SYSTEM_PROMPT,
        max_iterations: int = MAX_FUNCTION_CALLS,
        messages: Optional[List[Dict[str, Any]]] = None
) -> AgentLoopResult:
    """
    OpenAI SDK 格式模型的工具调用循环，直到模型不再调用工具或达到最大轮次

    Args:
        model: 模型封装（已携带工具定义）
        mcp_client: MCP 客户端
        prompt: 用户提示词
        system_prompt: 系统提示词
        max_iterations: 最大模型调用轮次
        messages: 对话历史，不传则新建

    Returns:
        最终回答、实际轮次、是否因达到上限而结束
    """
    messages = messages if messages is not None else []
    if not messages:
        messages.append({"role": "system", "content": system_prompt})
    messages.append({"role": "user", "content": prompt})

    for iteration in range(1, max_iterations + 1):
        message = model.get_model_response(messages)
        tool_calls = parse_tool_calls(message)

        if not tool_calls:
            # 无工具调用，记录最终回答
            messages.append({"role": "assistant", "content": message.content})
            return AgentLoopResult(text=message.content or "", iterations=iteration, exhausted=False)

        logger.info(f"第 {iteration} 次工具调用，共 {len(tool_calls)} 个工具需要调用")
        # 记录助手的工具调用意图
        messages.append({
            "role": "assistant",
            "content": message.content,
            "tool_calls": [tool_call.model_dump(exclude_none=True) for tool_call in message.tool_calls]
        })

        for tool_call in tool_calls:
            if tool_call.error is not None:
                result = ToolInvocationResult.failure(tool_call.error)
            else:
                result = await mcp_client.call_tool(tool_call.name, tool_call.arguments)

            # 添加工具调用结果到对话历史
            messages.append({
                "role": "tool",
                "name": tool_call.name,
                "tool_call_id": tool_call.id,
                "content": json.dumps(result.to_function_response(), ensure_ascii=False)
            })

    logger.warning(f"已达到最大工具调用次数（{max_iterations}次），对话结束")
    return AgentLoopResult(text="", iterations=max_iterations, exhausted=True)
