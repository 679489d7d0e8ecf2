"""
Console output, logging and input helpers shared by the CLI.
"""

import logging
import select
import shutil
import sys
from typing import Optional, TextIO

import pyfiglet
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.text import Text
from rich.theme import Theme
from rich import box

# ------------------------------
# Nord-Themed Rich Console Setup
# ------------------------------
NORD_THEME = Theme(
    {
        "info": "#88C0D0",
        "warning": "#EBCB8B",
        "danger": "bold #BF616A",
        "success": "#A3BE8C",
        "primary": "#5E81AC",
        "banner": "#81A1C1",
        "header": "bold #EBCB8B",
        "index": "bold #A3BE8C",
        "name": "#81A1C1",
        "frost1": "#8FBCBB",
        "frost2": "#88C0D0",
        "frost3": "#81A1C1",
        "frost4": "#5E81AC",
    }
)
console = Console(theme=NORD_THEME)

LOGGER_NAME = "shconn"


def configure_console(colored: bool = True) -> Console:
    """Recreate the shared console, without colors when ``colored`` is false."""
    global console
    console = Console(theme=NORD_THEME, no_color=not colored)
    return console


def terminal_width() -> int:
    return shutil.get_terminal_size((80, 24)).columns


# ------------------------------
# Printing helpers
# ------------------------------
def print_step(text: str) -> None:
    console.print(f"[info]{escape(text)}[/info]")


def print_success(text: str) -> None:
    console.print(f"[success]{escape(text)}[/success]")


def print_warning(text: str) -> None:
    console.print(f"[warning]{escape(text)}[/warning]")


def print_error(text: str) -> None:
    console.print(f"[danger]{escape(text)}[/danger]")


def print_banner(title: str, version: str) -> None:
    """
    Render an ASCII banner with pyfiglet, one frost color per line.
    The font is chosen based on terminal width.
    """
    width = terminal_width()
    font = "slant" if width >= 80 else "small"
    fig = pyfiglet.Figlet(font=font, width=max(width - 10, 20))
    frost_colors = ["frost1", "frost2", "frost3", "frost4"]
    styled_lines = [
        Text(line, style=frost_colors[i % len(frost_colors)])
        for i, line in enumerate(fig.renderText(title).splitlines())
    ]
    console.print(
        Panel(
            Text("\n").join(styled_lines),
            border_style="banner",
            box=box.ROUNDED,
            padding=(1, 2),
            title=Text(f"v{version}", style="primary"),
            title_align="right",
        )
    )


# ------------------------------
# Logger Setup
# ------------------------------
def setup_logging(debug: bool = False) -> logging.Logger:
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(logging.DEBUG if debug else logging.WARNING)
    for h in logger.handlers[:]:
        logger.removeHandler(h)
    handler = RichHandler(console=console, rich_tracebacks=True, show_path=False)
    handler.setLevel(logging.DEBUG)
    logger.addHandler(handler)
    logger.propagate = False
    return logger


# ------------------------------
# Input
# ------------------------------
def timed_input(prompt: str, timeout: float, stream: Optional[TextIO] = None) -> Optional[str]:
    """
    Read one line, giving up after ``timeout`` seconds.

    Args:
        prompt: Markup printed before waiting.
        timeout: Seconds to wait.
        stream: Input stream, stdin by default.

    Returns:
        The line without its newline, or None if nothing arrived in time.
    """
    stream = stream or sys.stdin
    console.print(prompt, end="")
    ready, _, _ = select.select([stream], [], [], timeout)
    if not ready:
        console.print()
        return None
    line = stream.readline()
    if not line:
        return None
    return line.rstrip("\n")
