from unittest.mock import MagicMock

import pytest
from google.genai import types
from openai import OpenAI

from llm.call_llm import (
    GeminiChatModel,
    OpenAIChatModel,
    get_api_key,
    get_model_name,
    init_gemini_client,
    init_model_client,
)


def test_missing_api_key_is_fatal(monkeypatch):
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    with pytest.raises(ValueError, match="GEMINI_API_KEY"):
        init_gemini_client()


def test_unknown_provider(monkeypatch):
    with pytest.raises(ValueError, match="不支持的模型类型"):
        get_api_key("llama")


def test_model_name_env_override(monkeypatch):
    monkeypatch.delenv("GEMINI_MODEL", raising=False)
    assert get_model_name("gemini") == "gemini-2.5-pro"
    monkeypatch.setenv("GEMINI_MODEL", "gemini-2.5-flash")
    assert get_model_name("gemini") == "gemini-2.5-flash"


def test_init_model_client_uses_default_base_url(monkeypatch):
    monkeypatch.setenv("QWEN_API_KEY", "test-key")
    monkeypatch.delenv("QWEN_BASE_URL", raising=False)

    client = init_model_client("qwen")

    assert isinstance(client, OpenAI)
    assert str(client.base_url).startswith("https://dashscope.aliyuncs.com/compatible-mode/v1")


def test_init_model_client_rejects_gemini():
    with pytest.raises(ValueError):
        init_model_client("gemini")


def test_gemini_chat_model_passes_tools_and_temperature():
    client = MagicMock()
    tool = types.Tool(function_declarations=[types.FunctionDeclaration(name="hello", description="Say hello")])
    model = GeminiChatModel(client, "gemini-2.5-pro", tools=[tool], temperature=0.1)
    contents = [types.Content(role="user", parts=[types.Part(text="hi")])]

    model.generate(contents)

    kwargs = client.models.generate_content.call_args.kwargs
    assert kwargs["model"] == "gemini-2.5-pro"
    assert kwargs["contents"] == contents
    assert kwargs["config"].temperature == 0.1
    assert kwargs["config"].tools == [tool]


def test_openai_chat_model_without_tools():
    client = MagicMock()
    model = OpenAIChatModel(client, "qwen-plus-latest")

    model.get_model_response([{"role": "user", "content": "hi"}])

    kwargs = client.chat.completions.create.call_args.kwargs
    assert "tools" not in kwargs
    assert kwargs["temperature"] == 0.0
