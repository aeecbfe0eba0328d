"""Operator interaction contract used by the pipeline."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Protocol

__all__ = ["CUSTOM_CHOICE", "Prompter", "ScriptedPrompter"]

CUSTOM_CHOICE = "custom"


class Prompter(Protocol):
    def select(self, message: str, choices: Sequence[str]) -> str:
        """Return one of ``choices``."""
        ...

    def text(self, message: str, *, default: str) -> str: ...

    def confirm(self, message: str) -> bool: ...


def _empty_log() -> list[str]:
    return []


@dataclass
class ScriptedPrompter:
    """Prompter with canned answers, for tests and non-interactive runs.

    ``selection`` matches a choice exactly or by its leading word (``"patch"``
    picks ``"patch (1.0.1)"``); None picks the first choice.
    """

    selection: str | None = None
    text_answer: str | None = None
    confirm_answer: bool = True
    asked: list[str] = field(default_factory=_empty_log)

    def select(self, message: str, choices: Sequence[str]) -> str:
        self.asked.append(message)
        if self.selection is None:
            return choices[0]
        for choice in choices:
            if choice == self.selection or choice.split(" ", 1)[0] == self.selection:
                return choice
        raise ValueError(f"no choice matches {self.selection!r}: {list(choices)}")

    def text(self, message: str, *, default: str) -> str:
        self.asked.append(message)
        return default if self.text_answer is None else self.text_answer

    def confirm(self, message: str) -> bool:
        self.asked.append(message)
        return self.confirm_answer
