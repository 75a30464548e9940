"""LLM interaction and streaming management.

This module handles the chat-completions API: client setup from the
environment, streamed responses and conversation history.
"""

import os
from typing import Any, Callable, Dict, Iterator, List, Optional

from dotenv import load_dotenv
from openai import OpenAI

DEFAULT_MODEL = "gpt-4o-mini"
DEFAULT_MAX_TOKENS = 4096


class LLMClient:
    """Manages LLM interactions and streaming."""

    def __init__(self, api_key: str, model: str, base_url: Optional[str] = None,
                 max_tokens: int = DEFAULT_MAX_TOKENS):
        """Initialize LLM client.

        Args:
            api_key: API key for the LLM service
            model: Model name to use
            base_url: Optional base URL for the API
            max_tokens: Upper bound on the length of each answer
        """
        self.model = model
        self.max_tokens = max_tokens

        client_kwargs = {"api_key": api_key}
        if base_url:
            client_kwargs["base_url"] = base_url
        self.client = OpenAI(**client_kwargs)

    def stream_completion(self, messages: List[Dict[str, Any]]) -> Iterator[str]:
        """Yield text deltas of a streamed chat completion."""
        stream = self.client.chat.completions.create(
            model=self.model,
            messages=messages,
            max_tokens=self.max_tokens,
            stream=True,
        )
        for chunk in stream:
            if not chunk.choices:
                continue
            delta = chunk.choices[0].delta
            if delta.content:
                yield delta.content

    def complete(self, messages: List[Dict[str, Any]],
                 on_delta: Optional[Callable[[str], None]] = None) -> str:
        """Stream a completion, forwarding each delta, and return the full text."""
        buffer = []
        for delta in self.stream_completion(messages):
            buffer.append(delta)
            if on_delta:
                on_delta(delta)
        return "".join(buffer)


class MessageManager:
    """Manages conversation message history."""

    def __init__(self):
        self.messages: List[Dict[str, Any]] = []

    def add_system_message(self, content: str):
        """Add or update the system message."""
        if self.messages and self.messages[0]["role"] == "system":
            self.messages[0]["content"] = content
        else:
            self.messages.insert(0, {"role": "system", "content": content})

    def add_user_message(self, content: str):
        self.messages.append({"role": "user", "content": content})

    def add_assistant_message(self, content: str):
        if content:
            self.messages.append({"role": "assistant", "content": content})

    def get_messages(self) -> List[Dict[str, Any]]:
        return self.messages

    def clear(self):
        """Drop the conversation but keep the system message."""
        self.messages = [m for m in self.messages if m["role"] == "system"]


def get_llm_config_from_env() -> Dict[str, Any]:
    """Get LLM configuration from environment variables.

    Reads ``.env`` first. ``OPENAI_API_KEY`` (or ``LLM_API_KEY``) is required
    unless ``LLM_BASE_URL`` points at a non-OpenAI endpoint.

    Returns:
        Dictionary with model, api_key and base_url

    Raises:
        ValueError: If no API key is configured for the public endpoint
    """
    load_dotenv()

    model = os.getenv("LLM_MODEL") or DEFAULT_MODEL
    api_key = os.getenv("OPENAI_API_KEY") or os.getenv("LLM_API_KEY")
    base_url = os.getenv("LLM_BASE_URL") or os.getenv("OPENAI_BASE_URL")

    if base_url and "openai.com" not in base_url:
        # Local endpoint, a placeholder key is enough
        if not api_key:
            api_key = "dummy-key"
    elif not api_key:
        raise ValueError("OPENAI_API_KEY not found in environment")

    return {
        "model": model,
        "api_key": api_key,
        "base_url": base_url,
    }
