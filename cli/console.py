"""Console output and keyboard input for the CLI."""

import asyncio
import sys
import threading
from contextlib import contextmanager
from typing import Iterator, Optional, TextIO

from prompt_toolkit import print_formatted_text
from prompt_toolkit.formatted_text import FormattedText
from prompt_toolkit.input import Input, create_input
from prompt_toolkit.keys import Keys

from cli.constants import APP_NAME, BANNER_TEMPLATE, GREEN, RESET, STYLE
from common.logging_config import get_logger

logger = get_logger(__name__)


class Console:
    """Writes the banner, errors and a single rewritable status line."""

    def __init__(self, stream: Optional[TextIO] = None):
        self.stream = stream or sys.stdout
        self._prefix = ""
        self._last_message_length = 0

    @property
    def supports_color(self) -> bool:
        """True when the output stream is a terminal."""
        try:
            return self.stream.isatty()
        except (AttributeError, ValueError):
            return False

    def write(self, text: str) -> None:
        self.stream.write(text)
        self.stream.flush()

    def display_banner(self) -> None:
        """Display the application banner."""
        self._print_styled("class:banner", BANNER_TEMPLATE.format(app=APP_NAME), end="")

    def display_error(self, message: str) -> None:
        """Display an error message in red."""
        self._print_styled("class:error", message)

    def start_status(self, description: str) -> None:
        """
        Begin a status line; later updates are written after this text.

        Args:
            description: Operation description (e.g., 'Writing to out.bin...')
        """
        self._prefix = description
        self._last_message_length = 0
        self.write(description)

    def update_status(self, message: str) -> None:
        """Replace the text after the status description with message."""
        padding = " " * max(self._last_message_length - len(message), 0)
        self._last_message_length = len(message)
        self.write(f"\r{self._prefix}{message}{padding}")

    def end_status(self) -> None:
        """Terminate the status line."""
        self.write("\n")

    def _print_styled(self, style_class: str, text: str, end: str = "\n") -> None:
        print_formatted_text(FormattedText([(style_class, text)]), style=STYLE, end=end, file=self.stream, flush=True)


def format_progress(fraction: float, color: bool = False) -> str:
    """
    Format a progress fraction as a whole percentage.

    Args:
        fraction: Value in [0, 1]
        color: Wrap the value in ANSI green

    Returns:
        Percentage string (e.g., '05%', '42%')
    """
    text = f"{fraction * 100:02.0f}%"
    if color:
        return f"{GREEN}{text}{RESET}"
    return text


class KeyboardMonitor:
    """
    Reads raw key presses from a terminal with prompt_toolkit.

    When stdin is not a terminal nothing is read: escape_pressed() stays
    False and wait_for_any_key() returns immediately.
    """

    def __init__(self, stdin: Optional[TextIO] = None):
        self._stdin = stdin or sys.stdin
        self._escape_pressed = threading.Event()
        self._input: Optional[Input] = create_input(self._stdin) if self.interactive else None

    @property
    def interactive(self) -> bool:
        """True when stdin is a terminal."""
        try:
            return self._stdin.isatty()
        except (AttributeError, ValueError):
            return False

    def escape_pressed(self) -> bool:
        """Cancel condition: True once ESC was pressed while watching."""
        return self._escape_pressed.is_set()

    @contextmanager
    def watching_for_escape(self) -> Iterator[None]:
        """Record ESC presses for the duration of the block (needs a running event loop)."""
        self._escape_pressed.clear()
        if self._input is None:
            yield
            return

        with self._input.raw_mode(), self._input.attach(self._on_keys_ready):
            yield

    async def wait_for_any_key(self) -> None:
        """Wait until any key is pressed."""
        if self._input is None:
            return

        pressed = asyncio.Event()

        def keys_ready() -> None:
            if self._read_keys():
                pressed.set()

        with self._input.raw_mode(), self._input.attach(keys_ready):
            await pressed.wait()

    def close(self) -> None:
        if self._input is not None:
            self._input.close()

    def _on_keys_ready(self) -> None:
        if any(key_press.key == Keys.Escape for key_press in self._read_keys()):
            logger.debug("Escape key pressed")
            self._escape_pressed.set()

    def _read_keys(self) -> list:
        # a lone ESC stays buffered in the parser until flushed
        return self._input.read_keys() + self._input.flush_keys()
