from typing import List

import mcp.types
from google.genai import types

from common import logger
from mcp_bridge.schema_translator import SchemaTranslationError, translate_schema

logger = logger.configure_logging(__name__)


def mcp_tool_to_function_declaration(tool: mcp.types.Tool) -> types.FunctionDeclaration:
    """
    将单个 MCP 工具转换为 Gemini 函数声明

    Raises:
        SchemaTranslationError: 工具的 inputSchema 包含不支持的类型标签，或结构无法解析
    """
    return types.FunctionDeclaration(
        name=tool.name,
        description=tool.description or "",
        parameters=translate_schema(tool.inputSchema),
    )


def mcp_to_gemini_tools(mcp_tools: List[mcp.types.Tool]) -> List[types.Tool]:
    """
    将 MCP Server 返回的工具列表转换为 Gemini 函数调用格式

    每个 MCP 工具对应一个 types.Tool（内含一个函数声明）。
    Schema 转换失败的工具只记录日志并跳过，不影响其余工具。

    参数：
        mcp_tools: MCP工具列表，每个元素需包含name, description, inputSchema字段

    返回：
        Gemini 工具列表
    """
    gemini_tools = []

    for tool in mcp_tools:
        logger.info(f"工具: {tool.name} | 描述: {tool.description} | Schema: {tool.inputSchema}")
        try:
            declaration = mcp_tool_to_function_declaration(tool)
        except SchemaTranslationError as e:
            logger.warning(f"工具 {tool.name} 的Schema转换失败，已跳过: {e}")
            continue
        gemini_tools.append(types.Tool(function_declarations=[declaration]))

    return gemini_tools
