import asyncio
import os
import sys

from common import logger
from llm.call_llm import OpenAIChatModel, get_model_name, init_model_client
from mcp_bridge.mcp_stdio_client import MCPStdioClient
from mcp_bridge.openai_orchestrator import register_openai_tools, run_openai_agent_loop

logger = logger.configure_logging(__name__)

"""
使用 OpenAI SDK 格式的模型服务调用 MCP 工具：
   - LLM_PROVIDER: 模型类型，支持 "qwen"(默认), "openai", "deepseek", "zhipu"
   - 对应的 *_API_KEY / *_BASE_URL 环境变量见 llm/call_llm.py
"""

PROMPT = "比特币现在的人民币价格是多少？"


async def main():
    provider = os.getenv("LLM_PROVIDER", "qwen")
    client = init_model_client(provider)

    async with MCPStdioClient() as mcp_client:
        openai_tools = await register_openai_tools(mcp_client)
        model = OpenAIChatModel(client, get_model_name(provider), tools=openai_tools, temperature=0)

        result = await run_openai_agent_loop(model, mcp_client, PROMPT)
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
