import os
from typing import Any, Dict, List, Optional

from dotenv import load_dotenv
from google import genai
from google.genai import types
from openai import Client, OpenAI
from openai.types.chat import ChatCompletionMessage

from common import logger

# 加载环境变量,读取.env文件配置信息
load_dotenv()

logger = logger.configure_logging(__name__)

"""
模型调用配置说明：
1. 默认使用 Gemini（google-genai SDK），需配置环境变量 GEMINI_API_KEY，可选 GEMINI_MODEL 指定模型。
2. 也可接入任何 OpenAI SDK 格式的模型服务（千问、GPT系列、智谱清言、deepseek等），
   通过 LLM_PROVIDER 选择，并配置对应的 *_API_KEY / *_BASE_URL 环境变量。
"""

# 模型配置映射表，包含各模型所需的环境变量和默认参数
MODEL_CONFIG: Dict[str, Dict[str, Optional[str]]] = {
    # Gemini模型配置
    # 如何获取API Key：https://aistudio.google.com/apikey
    "gemini": {
        "api_key_env": "GEMINI_API_KEY",  # 配置获取模型API KEY 的环境变量
        "model_env": "GEMINI_MODEL",  # 配置模型名称的环境变量
        "base_url_env": None,
        "default_base_url": None,
        "default_model": "gemini-2.5-pro"  # 默认调用模型名称
    },
    # 千问模型配置
    # 如何获取API Key：https://help.aliyun.com/zh/model-studio/developer-reference/get-api-key
    "qwen": {
        "api_key_env": "QWEN_API_KEY",
        "model_env": "QWEN_MODEL",
        "base_url_env": "QWEN_BASE_URL",  # 配置获取模型API URL 的环境变量
        "default_base_url": "https://dashscope.aliyuncs.com/compatible-mode/v1",  # 默认调用地址
        "default_model": "qwen-plus-latest"
    },
    # zhipu模型配置
    "zhipu": {
        "api_key_env": "ZHIPU_API_KEY",
        "model_env": "ZHIPU_MODEL",
        "base_url_env": "ZHIPU_BASE_URL",
        "default_base_url": None,
        "default_model": "GLM-4.5-Air"
    },
    # deepseek模型配置
    "deepseek": {
        "api_key_env": "DEEPSEEK_API_KEY",
        "model_env": "DEEPSEEK_MODEL",
        "base_url_env": "DEEPSEEK_BASE_URL",
        "default_base_url": None,
        "default_model": "deepseek-chat"
    },
    # openai模型配置
    "openai": {
        "api_key_env": "OPENAI_API_KEY",
        "model_env": "OPENAI_MODEL",
        "base_url_env": "OPENAI_BASE_URL",
        "default_base_url": None,
        "default_model": "gpt-4-turbo"
    },
}


def _get_provider_config(provider: str) -> Dict[str, Optional[str]]:
    if provider not in MODEL_CONFIG:
        raise ValueError(f"不支持的模型类型: {provider}，支持的类型有: {list(MODEL_CONFIG.keys())}")
    return MODEL_CONFIG[provider]


def get_api_key(provider: str) -> str:
    """
    读取模型API密钥，缺失时报错

    Raises:
        ValueError: 不支持的模型类型或缺少API密钥环境变量
    """
    config = _get_provider_config(provider)
    api_key = os.getenv(config["api_key_env"])
    if not api_key:
        raise ValueError(f"缺少{config['api_key_env']}环境变量")
    return api_key


def get_model_name(provider: str) -> str:
    """获取模型名称，环境变量优先，否则使用默认模型"""
    config = _get_provider_config(provider)
    return os.getenv(config["model_env"]) or config["default_model"]


def init_model_client(provider: str = "qwen") -> Client:
    """
     根据模型类型获取对应的openai客户端,默认使用千问模型

     Args:
         provider: 模型类型，当前支持 "qwen", "openai", "deepseek","zhipu"

     Returns:
         OpenAI客户端实例
     """
    if provider == "gemini":
        raise ValueError("gemini 请使用 init_gemini_client() 创建客户端")

    config = _get_provider_config(provider)
    api_key = get_api_key(provider)

    # 获取请求端口URL
    base_url = os.getenv(config["base_url_env"]) or config["default_base_url"]

    # 初始化并返回客户端
    return OpenAI(
        api_key=api_key,
        base_url=base_url
    )


def init_gemini_client() -> genai.Client:
    """
    实例化 Gemini 模型客户端

    Raises:
        ValueError: 缺少 GEMINI_API_KEY 环境变量
    """
    return genai.Client(api_key=get_api_key("gemini"))


class GeminiChatModel:
    """Gemini 模型封装，负责携带函数声明发起生成请求"""

    def __init__(
            self,
            client: genai.Client,
            model_name: str,
            tools: Optional[List[types.Tool]] = None,
            temperature: float = 0.0
    ) -> None:
        """
        Args:
            client: Gemini客户端
            model_name: 模型名称（如gemini-2.5-pro）
            tools: Gemini格式的工具列表
            temperature: 控制模型输出随机性，示例中取 0.0 ~ 0.1
        """
        self.client = client
        self.model_name = model_name
        self.tools = tools or []
        self.temperature = temperature

    def generate(self, contents: List[types.Content]) -> types.GenerateContentResponse:
        """
        发送完整的对话历史给模型并获取响应

        Args:
            contents: 对话历史

        Returns:
            模型响应
        """
        logger.info(f"请求模型: {self.model_name}，历史消息数: {len(contents)}")
        response = self.client.models.generate_content(
            model=self.model_name,
            contents=contents,
            config=types.GenerateContentConfig(
                temperature=self.temperature,
                tools=self.tools or None,
            ),
        )
        logger.debug(f"模型响应: {response}")
        return response


class OpenAIChatModel:
    """OpenAI SDK 格式的模型封装（千问、GPT系列、智谱清言、deepseek等）"""

    def __init__(self, client: Client, model_name: str, tools: Optional[List[Dict[str, Any]]] = None,
                 temperature: float = 0.0) -> None:
        self.client = client
        self.model_name = model_name
        self.tools = tools or []
        self.temperature = temperature

    def get_model_response(self, messages: List[Dict[str, Any]]) -> ChatCompletionMessage:
        """
        发送消息给LLM并获取响应

        Args:
            messages: 对话消息列表

        Returns:
            LLM响应消息
        """
        logger.info(f"请求模型消息：\n{messages}")
        kwargs: Dict[str, Any] = {}
        if self.tools:
            kwargs["tools"] = self.tools
            kwargs["tool_choice"] = "auto"  # 让模型自动决定是否调用工具
        response = self.client.chat.completions.create(
            model=self.model_name,
            messages=messages,
            temperature=self.temperature,
            **kwargs
        )
        return response.choices[0].message
