"""Console output for the repo2ctx CLI.

Status lines, panels and streamed text go through a Rich console with a
small theme. Plain output is used when the stream is not a terminal.
"""

import os
import sys
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from rich.console import Console
from rich.panel import Panel
from rich.text import Text
from rich.theme import Theme


class StatusType(Enum):
    """Standard status types with associated symbols."""
    SUCCESS = ("[✓]", "success")
    ERROR = ("[x]", "error")
    WARNING = ("[!]", "warning")
    INFO = ("[i]", "info")
    RUNNING = ("[~]", "running")


@dataclass
class ThemeColors:
    """Color definitions for a theme."""
    info: str
    warning: str
    error: str
    success: str
    running: str
    highlight: str
    panel_border: str
    path: str
    number: str
    dim: str


THEMES = {
    'manhattan': ThemeColors(
        info='cyan',
        warning='yellow',
        error='red',
        success='green',
        running='blue',
        highlight='bright_cyan',
        panel_border='bright_cyan',
        path='white',
        number='bright_blue',
        dim='bright_black',
    ),
    'sunset': ThemeColors(
        info='orange3',
        warning='yellow',
        error='red3',
        success='green',
        running='orange1',
        highlight='bold orange1',
        panel_border='orange3',
        path='wheat1',
        number='orange1',
        dim='grey50',
    ),
}


class ConsoleManager:
    """Themed console wrapper used by the CLI commands."""

    def __init__(self, theme: str = "manhattan", file: Optional[Any] = None,
                 force_plain: bool = False):
        """Initialize console manager.

        Args:
            theme: Theme name from THEMES
            file: Output file (defaults to sys.stdout)
            force_plain: Disable colors and markup styling
        """
        self.theme_name = theme
        self.theme_colors = THEMES.get(theme, THEMES['manhattan'])
        self.file = file or sys.stdout

        no_color = force_plain or bool(os.environ.get('NO_COLOR'))
        self.console = Console(
            theme=self._create_rich_theme(),
            file=self.file,
            no_color=no_color,
            highlight=False,
        )

    def _create_rich_theme(self) -> Theme:
        c = self.theme_colors
        return Theme({
            'info': c.info,
            'warning': c.warning,
            'error': c.error,
            'success': c.success,
            'running': c.running,
            'highlight': c.highlight,
            'panel.border': c.panel_border,
            'path': c.path,
            'number': c.number,
            'dim': c.dim,
        })

    def print(self, *args, **kwargs):
        """Print with Rich markup."""
        self.console.print(*args, **kwargs)

    def print_status(self, status: StatusType, message: str):
        """Print a status line with icon."""
        icon, style = status.value
        text = Text()
        text.append(f"{icon} ", style=style)
        text.append(message)
        self.console.print(text)

    def print_error(self, message: str):
        self.print_status(StatusType.ERROR, message)

    def print_success(self, message: str):
        self.print_status(StatusType.SUCCESS, message)

    def print_info(self, message: str):
        self.print_status(StatusType.INFO, message)

    def print_warning(self, message: str):
        self.print_status(StatusType.WARNING, message)

    def print_running(self, message: str):
        self.print_status(StatusType.RUNNING, message)

    def print_panel(self, body: str, title: Optional[str] = None):
        """Print a bordered summary box."""
        self.console.print(Panel(Text(body), title=title, border_style="panel.border", expand=False))

    def print_streaming_delta(self, delta: str):
        """Write streamed model output without a trailing newline."""
        self.console.print(delta, end="", markup=False, soft_wrap=True)

    def print_exception(self):
        """Print the active exception traceback."""
        self.console.print_exception()


def get_console(theme: str = "manhattan") -> ConsoleManager:
    """Create a console writing to stdout."""
    return ConsoleManager(theme=theme)
