"""
prompt.py

Responsibility: Ask for the project directory when none was given.

Answers are validated as they are submitted; an invalid answer is rejected
inline and asked again. Cancelling (Ctrl-C, EOF or a cancelled token) makes
the cursor visible again and exits with status 1.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, TextIO

from rich.console import Console
from rich.prompt import InvalidResponse, Prompt

from create_devx.cancel import Cancelled, CancelToken, restore_terminal
from create_devx.validate import validate_project_name

logger = logging.getLogger(__name__)

DEFAULT_PROJECT_NAME = "backend"


class ProjectNamePrompt(Prompt):
    """Text prompt that re-asks until the answer is a valid project name."""

    def __init__(
        self,
        *args: Any,
        cwd: Path,
        fallback: str = DEFAULT_PROJECT_NAME,
        **kwargs: Any,
    ) -> None:
        super().__init__(*args, **kwargs)
        self.cwd = cwd
        # Used for a blank answer read from a stream (which still carries "\n").
        self.fallback = fallback

    def process_response(self, value: str) -> str:
        answer = super().process_response(value) or self.fallback
        validation = validate_project_name((self.cwd / answer).resolve().name)
        if not validation.valid:
            raise InvalidResponse(f"[prompt.invalid]Invalid project name: {validation.problems[0]}")
        return answer


def ask_project_path(
    console: Console,
    *,
    cwd: Path | None = None,
    default: str = DEFAULT_PROJECT_NAME,
    stream: TextIO | None = None,
    cancel: CancelToken | None = None,
) -> str:
    """
    Ask for the project directory, relative to `cwd`.
    """
    prompt = ProjectNamePrompt(
        "What is your project named?",
        console=console,
        cwd=cwd or Path.cwd(),
        fallback=default,
    )
    try:
        if cancel is not None:
            cancel.raise_if_cancelled()
        answer = prompt(default=default, stream=stream)
    except (KeyboardInterrupt, EOFError, Cancelled):
        logger.debug("prompt cancelled")
        restore_terminal(console)
        raise SystemExit(1) from None
    return answer.strip()
