"""
Terminal spinner shown while a long operation runs.

The spinner is an asyncio task that redraws one status line until it is
stopped. It is purely cosmetic: write failures end it quietly and never reach
the caller.
"""

import asyncio
import contextlib
import logging
from typing import Optional, Sequence

from rich.console import Console
from rich.control import Control, ControlType
from rich.text import Text

logger = logging.getLogger(__name__)

SPINNER_INTERVAL = 0.15  # seconds between frames

CLOCK_FRAMES = (
    "\U0001f55b", "\U0001f550", "\U0001f551", "\U0001f552",
    "\U0001f553", "\U0001f554", "\U0001f555", "\U0001f556",
    "\U0001f557", "\U0001f558", "\U0001f559", "\U0001f55a",
)
ASCII_FRAMES = ("/", "-", "\\", "|")

# Errors that mean the terminal is gone
_WRITE_ERRORS = (OSError, ValueError)


def pick_frames(console: Console) -> Sequence[str]:
    """Use clock glyphs when the console can render them, ASCII otherwise."""
    if console.encoding.lower().startswith("utf") and not console.legacy_windows:
        return CLOCK_FRAMES
    return ASCII_FRAMES


def clear_line(console: Console) -> None:
    """Erase the current line and return the cursor to column 0."""
    console.control(Control((ControlType.ERASE_IN_LINE, 2)), Control.move_to_column(0))


class Spinner:
    """Cancellable status line animation.

    Args:
        console: Console to draw on
        label: Fixed text after the frame, e.g. "Asking AI"
        detail: Optional text shown quoted after the label
        enabled: When False the spinner never writes anything; it is also
            silent when the console is not a terminal
        interval: Seconds between frames
        frames: Animation frames; chosen from the console when omitted
    """

    def __init__(
        self,
        console: Console,
        label: str,
        detail: Optional[str] = None,
        enabled: bool = True,
        interval: float = SPINNER_INTERVAL,
        frames: Optional[Sequence[str]] = None,
    ):
        self.console = console
        self.label = label
        self.detail = detail
        self.enabled = enabled
        self.interval = interval
        self.frames = tuple(frames) if frames else tuple(pick_frames(console))
        self._task: Optional[asyncio.Task] = None
        self._failed = False

    @property
    def active(self) -> bool:
        """Whether frames are drawn at all."""
        return self.enabled and self.console.is_terminal

    def render(self, frame: str) -> Text:
        """Build the status line for one frame."""
        text = Text.assemble((frame, "yellow"), (f" {self.label}", "bright_black"))
        if self.detail is not None:
            text.append(" '", style="bright_black")
            text.append(self.detail, style="magenta")
            text.append("'", style="bright_black")
        return text

    def start(self) -> "Spinner":
        """Schedule the animation on the running event loop."""
        if self._task is None:
            self._task = asyncio.get_running_loop().create_task(self._animate())
        return self

    async def stop(self) -> None:
        """Cancel the animation and erase its line.

        Safe to call when the task has already finished on its own.
        """
        task, self._task = self._task, None
        if task is None:
            return
        if not task.done():
            task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task

        if self.active and not self._failed:
            try:
                clear_line(self.console)
            except _WRITE_ERRORS as e:
                logger.debug("Could not clear spinner line: %s", e)

    async def _animate(self) -> None:
        if not self.active:
            return
        current = 0
        while True:
            current = (current + 1) % len(self.frames)
            try:
                clear_line(self.console)
                self.console.print(self.render(self.frames[current]), end="", soft_wrap=True)
            except _WRITE_ERRORS as e:
                logger.debug("Spinner stopped after write failure: %s", e)
                self._failed = True
                return
            await asyncio.sleep(self.interval)

    async def __aenter__(self) -> "Spinner":
        return self.start()

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.stop()
