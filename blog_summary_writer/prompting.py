"""Terminal confirmation used by the ``ask`` overwrite policy."""
from __future__ import annotations

import sys
from typing import Callable

from prompt_toolkit import prompt as toolkit_prompt


def is_interactive_session() -> bool:
    return sys.stdin.isatty() and sys.stdout.isatty()


def ask_yes_no(question: str, default_yes: bool = False) -> bool:
    """Ask a yes/no question; an empty answer or closed input returns ``default_yes``."""
    suffix = " [Y/n] " if default_yes else " [y/N] "
    try:
        answer = toolkit_prompt(question + suffix)
    except EOFError:
        return default_yes
    value = answer.strip().lower()
    if not value:
        return default_yes
    return value in ("y", "yes")


def make_overwrite_confirmer(display_path: str) -> Callable[[str], bool]:
    def confirm(existing_preview: str) -> bool:
        question = (
            f"{display_path} already has a summary. Overwrite it?\n"
            f"Current summary: {existing_preview}\n>"
        )
        return ask_yes_no(question, default_yes=False)

    return confirm
