from mcp_bridge.server.mcp_tools import HELLO_TOOLS, create_server

# 只注册 hello 工具的最小 MCP 服务器
mcp = create_server("mcp_hello_stdio_server", HELLO_TOOLS)

if __name__ == "__main__":
    # 启动MCP服务器，使用stdio（标准输入输出）作为通信方式，直到进程被外部终止
    mcp.run(transport="stdio")
