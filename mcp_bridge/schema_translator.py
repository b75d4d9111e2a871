from typing import Any, Dict, List, Mapping, Optional

from google.genai import types
from pydantic import BaseModel, ConfigDict, Field, ValidationError

# JSON Schema 类型标签 -> Gemini 函数声明类型，所有调用方共用这一张表
TYPE_MAP: Mapping[str, types.Type] = {
    "object": types.Type.OBJECT,
    "array": types.Type.ARRAY,
    "string": types.Type.STRING,
    "number": types.Type.NUMBER,
    "integer": types.Type.INTEGER,
    "boolean": types.Type.BOOLEAN,
}


class SchemaTranslationError(ValueError):
    """工具 inputSchema 无法转换，调用方应跳过该工具"""


class UnsupportedTypeError(SchemaTranslationError):
    """类型标签不在支持范围内（object/array/string/number/integer/boolean）"""

    def __init__(self, type_tag: Any):
        self.type_tag = type_tag
        super().__init__(f"type not found in gemini Type: {type_tag!r}")


class InvalidSchemaError(SchemaTranslationError):
    """inputSchema 结构不符合预期，例如属性子Schema不是对象、顶层不是 object 类型"""


class PropertySchema(BaseModel):
    """对象类型Schema中的单个属性（只保留类型与描述）"""
    model_config = ConfigDict(extra="ignore")

    type: Any = ""
    description: Optional[str] = None
    enum: Optional[List[Any]] = None


class SchemaNode(BaseModel):
    """MCP 工具 inputSchema 的内部表示"""
    model_config = ConfigDict(extra="ignore")

    type: Any = ""
    properties: Dict[str, PropertySchema] = Field(default_factory=dict)
    required: List[str] = Field(default_factory=list)


def map_type(type_tag: str) -> types.Type:
    """
    将 JSON Schema 类型标签映射为 Gemini 类型

    Raises:
        UnsupportedTypeError: 类型标签不在六种支持的类型中
    """
    if not isinstance(type_tag, str) or type_tag not in TYPE_MAP:
        raise UnsupportedTypeError(type_tag)
    return TYPE_MAP[type_tag]


def parse_schema_node(input_schema: Mapping[str, Any]) -> SchemaNode:
    """
    将 MCP 工具的 inputSchema 字典解析为 SchemaNode，多余字段（$schema、title 等）忽略

    Raises:
        InvalidSchemaError: 结构无法解析，如 {"properties": {"x": true}}、properties 为 null、required 不是列表
    """
    try:
        return SchemaNode.model_validate(dict(input_schema or {}))
    except ValidationError as e:
        raise InvalidSchemaError(f"invalid inputSchema: {e.error_count()} validation error(s), "
                                 f"first at {e.errors()[0]['loc']}") from e


def _map_root_type(node: SchemaNode) -> types.Type:
    # 函数参数的顶层必须是 object
    schema_type = map_type(node.type)
    if schema_type != types.Type.OBJECT:
        raise InvalidSchemaError(f"inputSchema root must be an object, got {node.type!r}")
    return schema_type


def check_schema_types(node: SchemaNode) -> None:
    """只校验类型标签，不生成结果。OpenAI 格式的转换用它保持与 Gemini 相同的拒绝规则"""
    _map_root_type(node)
    for prop in node.properties.values():
        map_type(prop.type)


def translate_schema(input_schema: Mapping[str, Any]) -> types.Schema:
    """
    将 MCP 工具的 JSON Schema 转换为 Gemini 函数声明的参数 Schema

    只处理一层 对象->属性 的嵌套：属性下更深的 properties / items 不做递归转换，
    转换后的属性只保留类型和描述。

    Args:
        input_schema: MCP 工具的 inputSchema

    Returns:
        Gemini Schema

    Raises:
        UnsupportedTypeError: 顶层或任一属性的类型标签不受支持；此时不会返回任何部分结果
        InvalidSchemaError: 结构无法解析，或顶层类型不是 object
    """
    node = parse_schema_node(input_schema)
    schema_type = _map_root_type(node)

    # 先在局部字典中完成全部属性的转换，全部成功后才构建结果
    properties: Dict[str, types.Schema] = {}
    for name, prop in node.properties.items():
        properties[name] = types.Schema(
            type=map_type(prop.type),
            description=prop.description or None,
        )

    return types.Schema(
        type=schema_type,
        required=list(node.required),
        properties=properties,
    )
