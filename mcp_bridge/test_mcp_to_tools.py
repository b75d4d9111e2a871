import mcp.types
from google.genai import types

from mcp_bridge.mcp_to_gemini_tools import mcp_to_gemini_tools
from mcp_bridge.mcp_to_openai_tools import fastmcp_to_openai_tools

HELLO_TOOL = mcp.types.Tool(
    name="hello",
    description="Say hello to a person",
    inputSchema={
        "type": "object",
        "properties": {"name": {"type": "string", "description": "The name to say hello to"}},
        "required": ["name"],
    },
)

BROKEN_TOOL = mcp.types.Tool(
    name="broken",
    description="Uses a union type",
    inputSchema={
        "type": "object",
        "properties": {"value": {"type": ["string", "null"]}},
    },
)

UNIT_TOOL = mcp.types.Tool(
    name="convert",
    description=None,
    inputSchema={
        "type": "object",
        "properties": {"unit": {"type": "string", "description": "单位", "enum": ["c", "f"]}},
        "required": [],
    },
)


def test_mcp_to_gemini_tools_skips_broken_tool():
    tools = mcp_to_gemini_tools([HELLO_TOOL, BROKEN_TOOL, UNIT_TOOL])

    names = [tool.function_declarations[0].name for tool in tools]
    assert names == ["hello", "convert"]

    hello = tools[0].function_declarations[0]
    assert hello.description == "Say hello to a person"
    assert hello.parameters.type == types.Type.OBJECT
    assert hello.parameters.properties["name"].type == types.Type.STRING
    assert tools[1].function_declarations[0].description == ""


def test_mcp_to_gemini_tools_empty_listing():
    assert mcp_to_gemini_tools([]) == []


def test_fastmcp_to_openai_tools():
    tools = fastmcp_to_openai_tools([HELLO_TOOL, BROKEN_TOOL, UNIT_TOOL])

    assert [tool["function"]["name"] for tool in tools] == ["hello", "convert"]
    assert tools[0] == {
        "type": "function",
        "function": {
            "name": "hello",
            "description": "Say hello to a person",
            "parameters": {
                "type": "object",
                "properties": {"name": {"type": "string", "description": "The name to say hello to"}},
                "required": ["name"],
                "additionalProperties": False,
            },
        },
    }
    unit = tools[1]["function"]["parameters"]["properties"]["unit"]
    assert unit["description"] == "单位,可选值: c, f"


def test_fastmcp_to_openai_tools_does_not_mutate_input():
    fastmcp_to_openai_tools([UNIT_TOOL], additionalProperties=True)
    assert UNIT_TOOL.inputSchema["properties"]["unit"]["description"] == "单位"


# 合法的 JSON Schema，但属性子Schema是布尔值，无法解析为属性定义
BOOLEAN_PROPERTY_TOOL = mcp.types.Tool(
    name="anything",
    description="Accepts any value for x",
    inputSchema={"type": "object", "properties": {"x": True}},
)

NULL_PROPERTIES_TOOL = mcp.types.Tool(
    name="nothing",
    inputSchema={"type": "object", "properties": None, "required": "x"},
)

STRING_ROOT_TOOL = mcp.types.Tool(name="scalar", inputSchema={"type": "string"})


def test_mcp_to_gemini_tools_skips_malformed_schemas():
    tools = mcp_to_gemini_tools([HELLO_TOOL, BOOLEAN_PROPERTY_TOOL, NULL_PROPERTIES_TOOL, STRING_ROOT_TOOL])
    assert [tool.function_declarations[0].name for tool in tools] == ["hello"]


def test_fastmcp_to_openai_tools_skips_malformed_schemas():
    tools = fastmcp_to_openai_tools([HELLO_TOOL, BOOLEAN_PROPERTY_TOOL, NULL_PROPERTIES_TOOL, STRING_ROOT_TOOL])
    assert [tool["function"]["name"] for tool in tools] == ["hello"]
