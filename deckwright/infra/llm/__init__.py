"""LLM infrastructure package."""

from .langchain_client import LangChainClient, translate_openai_error
from .mock_client import MockLLMClient

__all__ = [
    "LangChainClient",
    "MockLLMClient",
    "translate_openai_error",
]
