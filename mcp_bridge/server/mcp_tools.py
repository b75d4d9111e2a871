import datetime
from dataclasses import dataclass
from types import MappingProxyType
from typing import Annotated, Callable, Mapping, Optional

from fastmcp import FastMCP
from fastmcp.exceptions import ToolError
from pydantic import Field

from common import logger
from mcp_bridge.server.bitcoin_price import DEFAULT_CURRENCY, PriceLookupError, get_bitcoin_price

logger = logger.configure_logging(__name__)


@dataclass(frozen=True)
class ToolSpec:
    """工具注册项：名称、描述及处理函数（参数类型即工具的 inputSchema）"""
    name: str
    description: str
    handler: Callable[..., str]


@dataclass(frozen=True)
class PromptSpec:
    """提示词模板注册项"""
    name: str
    description: str
    handler: Callable[..., str]


# ==============================================
# 工具函数1：打招呼
# ==============================================
def hello(name: Annotated[str, Field(description="The name to say hello to")]) -> str:
    """返回对指定名字的问候语"""
    return f"Hello {name}"


# ==============================================
# 工具函数2：查询比特币最新价格
# ==============================================
def bitcoin_price(
        currency: Annotated[str, Field(
            description="The currency to get the Bitcoin price in (USD, EUR, GBP, JPY, AUD, CAD, CHF, CNY, KRW, RUB etc)"
        )]
) -> str:
    """
    查询比特币最新价格，币种为空时默认使用 USD

    Raises:
        ToolError: 币种不受支持或价格查询失败，错误信息会作为工具错误结果返回给客户端
    """
    logger.info(f"received request for bitcoin_price tool with currency: {currency}")
    currency = currency or DEFAULT_CURRENCY

    try:
        price = get_bitcoin_price(currency)
    except PriceLookupError as e:
        logger.error(f"获取比特币价格失败: {e}")
        raise ToolError(f"Error fetching Bitcoin price: {e}") from e

    now = datetime.datetime.now().astimezone()
    return (f"The current Bitcoin price in {currency} is {price:.2f} "
            f"(as of {now.strftime('%a, %d %b %Y %H:%M:%S %Z')})")


# ==============================================
# 提示词模板：测试用问候
# ==============================================
def prompt_test(
        Title: Annotated[str, Field(description="The title to submit")],
        description: Annotated[Optional[str], Field(description="The description to submit")] = None,
) -> str:
    """返回一条用户角色的问候消息"""
    logger.info("Received request for prompt_test")
    return f"Hello, {Title}!"


HELLO_TOOL = ToolSpec(name="hello", description="Say hello to a person", handler=hello)
BITCOIN_PRICE_TOOL = ToolSpec(
    name="bitcoin_price",
    description="Get the latest Bitcoin price in various currencies",
    handler=bitcoin_price,
)
TEST_PROMPT = PromptSpec(name="prompt_test", description="This is a test prompt", handler=prompt_test)

# 工具注册表：启动时构建，只读
HELLO_TOOLS: Mapping[str, ToolSpec] = MappingProxyType({HELLO_TOOL.name: HELLO_TOOL})
ASSISTANT_TOOLS: Mapping[str, ToolSpec] = MappingProxyType({
    HELLO_TOOL.name: HELLO_TOOL,
    BITCOIN_PRICE_TOOL.name: BITCOIN_PRICE_TOOL,
})
ASSISTANT_PROMPTS: Mapping[str, PromptSpec] = MappingProxyType({TEST_PROMPT.name: TEST_PROMPT})


def create_server(
        name: str,
        tools: Mapping[str, ToolSpec],
        prompts: Mapping[str, PromptSpec] = MappingProxyType({}),
) -> FastMCP:
    """
    根据注册表创建 MCP 服务器实例

    Args:
        name: 服务器名称（自定义标识，用于区分不同MCP服务器）
        tools: 工具注册表
        prompts: 提示词模板注册表

    Returns:
        注册好全部工具和提示词的 FastMCP 实例
    """
    mcp = FastMCP(name)

    for spec in tools.values():
        mcp.tool(name=spec.name, description=spec.description)(spec.handler)
        logger.debug(f"注册工具: {spec.name}")

    for spec in prompts.values():
        mcp.prompt(name=spec.name, description=spec.description)(spec.handler)
        logger.debug(f"注册提示词: {spec.name}")

    return mcp
