import asyncio
import sys

from common import logger
from llm.call_llm import GeminiChatModel, get_model_name, init_gemini_client
from mcp_bridge.mcp_stdio_client import MCPStdioClient
from mcp_bridge.orchestrator import register_tools, run_agent_loop

logger = logger.configure_logging(__name__)

PROMPT = "What's the current Bitcoin price in RUB? Only provide your answer in a natural language response."


async def main():
    client = init_gemini_client()

    async with MCPStdioClient() as mcp_client:
        gemini_tools = await register_tools(mcp_client)
        model = GeminiChatModel(client, get_model_name("gemini"), tools=gemini_tools, temperature=0.0)

        result = await run_agent_loop(model, mcp_client, PROMPT)
        print(f"用户: {PROMPT}")
        if result.exhausted:
            print(f"助手: 已达到最大工具调用次数（{result.iterations}次），无法继续处理。")
        else:
            print(f"助手: {result.text}")


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except Exception as e:
        logger.critical(f"程序运行失败: {str(e)}")
        sys.exit(1)
