import asyncio
import sys

from common import logger
from mcp_bridge.mcp_stdio_client import HELLO_SERVER_MODULE, MCPStdioClient, server_params_for

logger = logger.configure_logging(__name__)


async def main():
    # 启动只注册了 hello 工具的服务器子进程
    async with MCPStdioClient(server_params_for(HELLO_SERVER_MODULE)) as client:
        # 获取服务器端可用的工具列表
        tools = await client.list_tools()
        logger.info("可用工具列表:")
        for idx, tool in enumerate(tools, 1):
            logger.info(f"  {idx}. 工具名：{tool.name} | {tool.description}")

        logger.info("调用工具 hello ...")
        result = await client.call_tool("hello", {"name": "World!"})
        if result.is_error:
            logger.error(f"Failed to call hello tool: {result.error}")
        else:
            logger.info(f"Hello response: {result.text}")


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except Exception as e:
        logger.critical(f"程序运行失败: {str(e)}")
        sys.exit(1)
