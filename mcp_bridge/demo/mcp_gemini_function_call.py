import asyncio
import sys

from common import logger
from llm.call_llm import GeminiChatModel, get_model_name, init_gemini_client
from mcp_bridge.mcp_stdio_client import MCPStdioClient
from mcp_bridge.orchestrator import register_tools, run_single_call

logger = logger.configure_logging(__name__)

PROMPT = "What's the current Bitcoin price in RUB?"


async def main():
    # 先读取配置，缺少API密钥时直接结束
    client = init_gemini_client()

    async with MCPStdioClient() as mcp_client:
        # 获取MCP工具并转换为Gemini函数声明
        gemini_tools = await register_tools(mcp_client)
        model = GeminiChatModel(client, get_model_name("gemini"), tools=gemini_tools, temperature=0.1)

        answer = await run_single_call(model, mcp_client, PROMPT)
        print(f"用户: {PROMPT}")
        print(f"助手: {answer}")

        # 测试提示词模板的获取
        messages = await mcp_client.get_prompt("prompt_test", {"Title": "Hello MCP"})
        logger.info(f"Prompt resp: {messages[0] if messages else ''}")


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except Exception as e:
        logger.critical(f"程序运行失败: {str(e)}")
        sys.exit(1)
