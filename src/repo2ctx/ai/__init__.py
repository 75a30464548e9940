"""Question answering over context documents."""

from .llm import LLMClient, MessageManager, get_llm_config_from_env
from .prompts import build_system_prompt
from .session import ChatSession, ask

__all__ = [
    "LLMClient",
    "MessageManager",
    "get_llm_config_from_env",
    "build_system_prompt",
    "ChatSession",
    "ask",
]
