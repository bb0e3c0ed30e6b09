"""
LLM Provider abstraction layer.

Supports OpenAI and Anthropic behind a unified interface.
"""

from .base import LLMProvider, LLMResponse
from .anthropic import AnthropicProvider
from .openai import OpenAIProvider
from .factory import create_provider, get_provider_from_env, ProviderType

__all__ = [
    "LLMProvider",
    "LLMResponse",
    "AnthropicProvider",
    "OpenAIProvider",
    "create_provider",
    "get_provider_from_env",
    "ProviderType",
]
