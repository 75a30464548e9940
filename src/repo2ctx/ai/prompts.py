"""System prompt for asking questions against a context document."""

from typing import Optional

BASE_INSTRUCTIONS = [
    "You are an expert software developer assistant.",
    "You have access to the following codebase context which contains types, exports, "
    "tests, and documentation from relevant libraries.",
    "Use this context to provide accurate, working code examples that match the actual APIs.",
    "When writing code, prefer patterns you see in the tests and examples.",
    "If you're unsure about an API, say so rather than guessing.",
]


def build_system_prompt(context: str, extra: Optional[str] = None) -> str:
    """
    Assemble the system prompt.

    Args:
        context: Rendered context document; omitted when empty.
        extra: Additional user-supplied instructions.
    """
    parts = list(BASE_INSTRUCTIONS)

    if extra:
        parts.extend(["", "Additional instructions:", extra])

    if context:
        parts.extend(["", "---", "", "<codebase_context>", context, "</codebase_context>"])

    return "\n".join(parts)
