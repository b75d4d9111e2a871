from typing import Any, Dict, List

import mcp.types

from common import logger
from mcp_bridge.schema_translator import SchemaNode, SchemaTranslationError, check_schema_types, parse_schema_node

logger = logger.configure_logging(__name__)


def _to_openai_parameters(node: SchemaNode, additionalProperties: bool) -> Dict[str, Any]:
    """将 SchemaNode 转换为 OpenAI 函数参数（同样只保留一层属性）"""
    properties = {}
    for name, prop in node.properties.items():
        description = prop.description or ""
        # 如果参数有固定的可选值，把可选值写进描述里，让AI更容易理解
        if prop.enum:
            description = description + f",可选值: {', '.join(str(value) for value in prop.enum)}"
        properties[name] = {"type": prop.type, "description": description}

    return {
        "type": node.type,  # 参数类型，通常是"object"（对象）
        "properties": properties,  # 具体的参数定义
        "required": list(node.required),  # 哪些参数是必须的
        "additionalProperties": additionalProperties
    }


def fastmcp_to_openai_tools(mcp_tools: list[mcp.types.Tool], additionalProperties: bool = False) -> list:
    """
    将 MCP Server返回的工具列表转换为OpenAI 工具调用格式。
    类型标签的校验规则与 Gemini 转换一致，不受支持的工具会被跳过。

    参数：
        mcp_tools: MCP工具列表，每个元素需包含name, description, inputSchema字段
        additionalProperties: 决定是否允许对象包含除了已定义属性之外的其他属性,False:不允许额外属性,True:允许

    返回：
        符合OpenAI函数调用规范的JSON对象列表
    """

    openai_tools = []  # 用来存放转换后的工具列表

    for tool in mcp_tools:  # 遍历每一个MCP工具
        try:
            node = parse_schema_node(tool.inputSchema)
            check_schema_types(node)
        except SchemaTranslationError as e:
            logger.warning(f"工具 {tool.name} 的Schema转换失败，已跳过: {e}")
            continue

        openai_tools.append({
            "type": "function",  # 告诉OpenAI这是一个函数工具
            "function": {
                "name": tool.name,
                "description": tool.description or "",
                "parameters": _to_openai_parameters(node, additionalProperties)
            }
        })

    logger.debug(f"转换后的OpenAI工具: {openai_tools}")
    return openai_tools
