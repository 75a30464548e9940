"""
One-shot and interactive question answering over a context document.
"""

import logging
from typing import Callable, Optional

from openai import APIError
from rich.prompt import Prompt

from .llm import LLMClient, MessageManager
from .prompts import build_system_prompt
from ..utils.console import ConsoleManager

logger = logging.getLogger(__name__)

EXIT_COMMANDS = {'/exit', '/quit', 'exit', 'quit'}


def ask(client: LLMClient, ui: ConsoleManager, question: str, context: str,
        system: Optional[str] = None, output: Optional[str] = None) -> str:
    """
    Answer a single question, streaming the answer to the console.

    Args:
        client: LLM client.
        ui: Console for streamed output.
        question: The user question.
        context: Rendered context document.
        system: Extra system instructions.
        output: Optional file to save the answer to.

    Returns:
        The full answer text.
    """
    messages = MessageManager()
    messages.add_system_message(build_system_prompt(context, system))
    messages.add_user_message(question)

    answer = client.complete(messages.get_messages(), on_delta=ui.print_streaming_delta)
    ui.print()

    if output:
        with open(output, 'w', encoding='utf-8') as f:
            f.write(answer)
        ui.print_success(f"Saved to {output}")
    return answer


class ChatSession:
    """Interactive chat loop keeping the conversation history."""

    def __init__(self, client: LLMClient, ui: ConsoleManager, context: str,
                 system: Optional[str] = None,
                 read_input: Optional[Callable[[], str]] = None):
        self.client = client
        self.ui = ui
        self.messages = MessageManager()
        self.messages.add_system_message(build_system_prompt(context, system))
        self.read_input = read_input or self._prompt

    def _prompt(self) -> str:
        return Prompt.ask("\n[highlight][>][/highlight]", console=self.ui.console)

    def handle_command(self, command: str) -> bool:
        """Handle a slash command. Returns False when the loop should end."""
        if command in EXIT_COMMANDS:
            return False
        if command == '/clear':
            self.messages.clear()
            self.ui.print_info("Conversation cleared.")
        else:
            self.ui.print_warning(f"Unknown command: {command} (use /clear or /exit)")
        return True

    def turn(self, user_input: str) -> str:
        """
        Send one user message and stream the reply.

        History only records the exchange once the reply has arrived, so a
        failed request leaves it unchanged.
        """
        pending = self.messages.get_messages() + [{"role": "user", "content": user_input}]
        self.ui.print("[dim][<][/dim] ", end="")
        reply = self.client.complete(pending, on_delta=self.ui.print_streaming_delta)
        self.ui.print()
        self.messages.add_user_message(user_input)
        self.messages.add_assistant_message(reply)
        return reply

    def run(self) -> None:
        """Run until the user exits or input ends."""
        self.ui.print_info("Chat started. Type /clear to reset, /exit to quit.")
        while True:
            try:
                user_input = self.read_input().strip()
            except (EOFError, KeyboardInterrupt):
                self.ui.print()
                break

            if not user_input:
                continue
            if user_input.startswith('/') or user_input.lower() in EXIT_COMMANDS:
                if not self.handle_command(user_input.lower()):
                    break
                continue

            try:
                self.turn(user_input)
            except APIError as e:
                self.ui.print_error(f"API error: {e}")
                logger.debug("Chat turn failed", exc_info=True)
