import os
import sys
from contextlib import AsyncExitStack
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import mcp.types
from mcp import ClientSession, StdioServerParameters
from mcp.client.stdio import stdio_client
from mcp.shared.exceptions import McpError

from common import logger

logger = logger.configure_logging(__name__)

# 项目根目录，子进程以 `python -m` 方式启动服务器时作为工作目录
PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))

ASSISTANT_SERVER_MODULE = "mcp_bridge.server.assistant_stdio_server"
HELLO_SERVER_MODULE = "mcp_bridge.server.hello_stdio_server"


def server_params_for(module: str) -> StdioServerParameters:
    """
    创建以当前 Python 解释器运行指定服务器模块的 STDIO 连接参数

    Args:
        module: 服务器模块路径，如 "mcp_bridge.server.hello_stdio_server"
    """
    return StdioServerParameters(
        command=sys.executable,  # 使用当前Python解释器
        args=["-m", module],
        cwd=PROJECT_ROOT,
        encoding="utf-8",
    )


class MCPConnectionError(RuntimeError):
    """启动MCP服务器子进程或初始化会话失败"""


@dataclass(frozen=True)
class ToolInvocationResult:
    """工具调用结果：成功时带文本内容，失败时带错误描述"""
    text: Optional[str] = None
    error: Optional[str] = None

    @classmethod
    def success(cls, text: str) -> "ToolInvocationResult":
        return cls(text=text)

    @classmethod
    def failure(cls, error: str) -> "ToolInvocationResult":
        return cls(error=error)

    @property
    def is_error(self) -> bool:
        return self.error is not None

    def to_function_response(self) -> Dict[str, Any]:
        """包装为模型 function response 的内容"""
        if self.is_error:
            return {"error": self.error}
        return {"response": self.text}


def _content_text(content: List[Any]) -> str:
    """拼接工具结果中的全部文本内容"""
    return "\n".join(item.text for item in content if isinstance(item, mcp.types.TextContent))


class MCPStdioClient:
    """
    MCP 客户端封装类，通过标准输入输出与子进程中的 MCP 服务器交互

    用法：
        async with MCPStdioClient() as client:
            tools = await client.list_tools()
            result = await client.call_tool("hello", {"name": "World!"})

    进入上下文时启动服务器子进程并完成初始化握手；退出上下文时关闭会话并终止子进程。
    """

    def __init__(self, server_params: Optional[StdioServerParameters] = None):
        """
        初始化 MCP 客户端

        Args:
            server_params: 服务器启动参数，如果为 None 则启动 assistant 服务器
        """
        self.server_params = server_params or server_params_for(ASSISTANT_SERVER_MODULE)
        self.session: Optional[ClientSession] = None
        self._exit_stack: Optional[AsyncExitStack] = None

    async def __aenter__(self) -> "MCPStdioClient":
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def connect(self) -> None:
        """
        启动服务器子进程并初始化会话

        Raises:
            MCPConnectionError: 子进程启动或初始化握手失败
        """
        logger.info(f"启动MCP服务器: {self.server_params.command} {' '.join(self.server_params.args)}")
        exit_stack = AsyncExitStack()
        try:
            read, write = await exit_stack.enter_async_context(stdio_client(self.server_params))
            session = await exit_stack.enter_async_context(ClientSession(read, write))
            # 初始化会话，建立协议版本与能力协商
            init_result = await session.initialize()
        except Exception as e:
            await exit_stack.aclose()
            raise MCPConnectionError(f"Failed to initialize client: {e}") from e

        logger.info(f"已连接MCP服务器: {init_result.serverInfo.name}")
        self.session = session
        self._exit_stack = exit_stack

    async def close(self) -> None:
        """关闭会话并终止服务器子进程"""
        if self._exit_stack is not None:
            await self._exit_stack.aclose()
        self._exit_stack = None
        self.session = None

    def _require_session(self) -> ClientSession:
        if self.session is None:
            raise MCPConnectionError("MCP客户端尚未连接")
        return self.session

    async def list_tools(self) -> List[mcp.types.Tool]:
        """
        获取 MCP Server 注册的全部工具（单次请求，不使用分页游标）

        Returns:
            工具列表
        """
        result = await self._require_session().list_tools()
        logger.info(f"可用工具: {[tool.name for tool in result.tools]}")
        return result.tools

    async def call_tool(self, name: str, arguments: Optional[Dict[str, Any]] = None) -> ToolInvocationResult:
        """
        调用服务端注册的工具，每次调用只请求一次

        工具返回的错误结果和协议层错误都会转换为失败结果，不会抛出异常。

        Args:
            name: 工具名称
            arguments: 工具调用参数（可选）

        Returns:
            工具调用结果
        """
        logger.info(f"调用工具: {name}, 参数: {arguments}")
        try:
            result = await self._require_session().call_tool(name, arguments or {})
        except McpError as e:
            logger.error(f"failed to call tool {name}: {e}")
            return ToolInvocationResult.failure(str(e))

        text = _content_text(result.content)
        if result.isError:
            logger.error(f"工具 {name} 返回错误: {text}")
            return ToolInvocationResult.failure(text or f"tool {name} failed")

        logger.info(f"工具 {name} 执行结果: {text}")
        return ToolInvocationResult.success(text)

    async def get_prompt(self, name: str, arguments: Optional[Dict[str, str]] = None) -> List[str]:
        """
        获取服务端注册的提示词模板

        Args:
            name: 提示词名称
            arguments: 模板参数

        Returns:
            提示词消息的文本列表
        """
        result = await self._require_session().get_prompt(name, arguments or {})
        return [message.content.text for message in result.messages
                if isinstance(message.content, mcp.types.TextContent)]
