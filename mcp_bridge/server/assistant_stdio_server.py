from mcp_bridge.server.mcp_tools import ASSISTANT_PROMPTS, ASSISTANT_TOOLS, create_server

# 注册 hello、bitcoin_price 工具及 prompt_test 提示词的 MCP 服务器
mcp = create_server("mcp_assistant_stdio_server", ASSISTANT_TOOLS, ASSISTANT_PROMPTS)

if __name__ == "__main__":
    # 启动MCP服务器，使用stdio（标准输入输出）作为通信方式，直到进程被外部终止
    mcp.run(transport="stdio")
