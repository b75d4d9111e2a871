import json
from typing import Any, Dict, List, Mapping, Union

# 协议边界上的参数值：字符串 | 数字 | 布尔 | 空值 | 列表 | 字典
JsonValue = Union[str, int, float, bool, None, List["JsonValue"], Dict[str, "JsonValue"]]


def is_json(myjson) -> bool:
    try:
        json.JSONDecoder().decode(myjson)
        return True
    except (json.JSONDecodeError, TypeError):
        return False


def to_json_value(value: Any) -> JsonValue:
    """
    将模型SDK返回的任意参数值递归转换为标准的 JSON 值

    Args:
        value: 待转换的值（如 Gemini FunctionCall.args 中的值）

    Returns:
        只由 str/int/float/bool/None/list/dict 组成的值

    Raises:
        TypeError: 值中包含无法表示为 JSON 的类型
    """
    if value is None or isinstance(value, (str, bool, int, float)):
        return value
    if isinstance(value, Mapping):
        return {str(key): to_json_value(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_json_value(item) for item in value]
    raise TypeError(f"不支持的参数值类型: {type(value).__name__}")


def decode_arguments(raw: Union[str, Mapping[str, Any], None]) -> Dict[str, JsonValue]:
    """
    在协议边界一次性解码工具调用参数

    Args:
        raw: OpenAI 格式的 JSON 字符串参数，或 Gemini 格式的字典参数；None/空字符串 表示无参数

    Returns:
        参数字典

    Raises:
        ValueError: 字符串不是合法的 JSON 对象
        TypeError: 参数中包含无法表示为 JSON 的类型
    """
    if raw is None or raw == "":
        return {}
    if isinstance(raw, str):
        if not is_json(raw):
            raise ValueError(f"工具调用参数不是合法的JSON: {raw}")
        raw = json.loads(raw)
    if not isinstance(raw, Mapping):
        raise ValueError(f"工具调用参数必须是JSON对象: {raw}")
    return to_json_value(raw)
