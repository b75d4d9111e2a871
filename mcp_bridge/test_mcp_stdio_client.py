import sys

import pytest
from mcp import StdioServerParameters

from mcp_bridge.mcp_stdio_client import (
    HELLO_SERVER_MODULE,
    MCPConnectionError,
    MCPStdioClient,
    ToolInvocationResult,
    server_params_for,
)


def test_tool_invocation_result_variants():
    ok = ToolInvocationResult.success("Hello World!")
    failed = ToolInvocationResult.failure("unsupported currency: XYZ")

    assert not ok.is_error
    assert ok.to_function_response() == {"response": "Hello World!"}
    assert failed.is_error
    assert failed.to_function_response() == {"error": "unsupported currency: XYZ"}


def test_server_params_use_current_interpreter():
    params = server_params_for(HELLO_SERVER_MODULE)
    assert params.command == sys.executable
    assert params.args == ["-m", HELLO_SERVER_MODULE]


@pytest.mark.asyncio
async def test_hello_server_end_to_end():
    """启动真实的 hello 服务器子进程，列出工具并调用"""
    async with MCPStdioClient(server_params_for(HELLO_SERVER_MODULE)) as client:
        tools = await client.list_tools()
        result = await client.call_tool("hello", {"name": "World!"})
        unknown = await client.call_tool("goodbye", {"name": "World!"})

    assert [tool.name for tool in tools] == ["hello"]
    assert result == ToolInvocationResult.success("Hello World!")
    assert unknown.is_error


@pytest.mark.asyncio
async def test_spawn_failure_is_connection_error():
    params = StdioServerParameters(command="definitely-not-an-mcp-server-binary", args=[])

    with pytest.raises(MCPConnectionError):
        async with MCPStdioClient(params):
            pass


@pytest.mark.asyncio
async def test_calls_require_connection():
    client = MCPStdioClient()
    with pytest.raises(MCPConnectionError):
        await client.list_tools()
