"""
cancel.py

Responsibility: Explicit cancellation for every blocking step of a run.

A `CancelToken` is created once per invocation and passed to each step that
can block (download, extraction, connectivity probe, install, prompt). Steps
call `token.raise_if_cancelled()` at their boundaries. Interrupt signals are
routed into the token by `handle_signals()`, which also raises `Cancelled`
right away so a step blocked inside a system call is interrupted too.
"""

from __future__ import annotations

import logging
import signal
from collections.abc import Iterator
from contextlib import contextmanager
from types import FrameType

from rich.console import Console

logger = logging.getLogger(__name__)


class Cancelled(Exception):
    """Raised when the user interrupts the run."""


class CancelToken:
    def __init__(self) -> None:
        self._cancelled = False
        self.reason: str | None = None

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self, reason: str = "cancelled") -> None:
        self._cancelled = True
        self.reason = reason

    def raise_if_cancelled(self) -> None:
        if self._cancelled:
            raise Cancelled(self.reason or "cancelled")


@contextmanager
def handle_signals(token: CancelToken) -> Iterator[CancelToken]:
    """
    Route SIGINT/SIGTERM into `token` for the duration of the block.

    Previous handlers are restored on exit.
    """

    def _handler(signum: int, _frame: FrameType | None) -> None:
        name = signal.Signals(signum).name
        logger.debug("received %s", name)
        token.cancel(name)
        raise Cancelled(name)

    previous: dict[int, object] = {}
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            previous[sig] = signal.signal(sig, _handler)
        except ValueError:
            # Not the main thread; rely on KeyboardInterrupt instead.
            logger.debug("cannot install handler for %s outside the main thread", sig)
    try:
        yield token
    finally:
        for sig, handler in previous.items():
            signal.signal(sig, handler)  # type: ignore[arg-type]


def restore_terminal(console: Console) -> None:
    """
    Make the cursor visible again. Rendering (prompts, spinners) may have
    hidden it and an interrupted process would otherwise leave it hidden.
    """
    # Written unconditionally: console.show_cursor() is a no-op off a terminal.
    console.file.write("\x1b[?25h")
    console.file.write("\n")
    console.file.flush()
