"""Interactive prompts backed by typer."""

from __future__ import annotations

from collections.abc import Sequence

import typer

from mrel.output.console import ConsoleProtocol, Style


class TyperPrompter:
    def __init__(self, console: ConsoleProtocol) -> None:
        self._console = console

    def select(self, message: str, choices: Sequence[str]) -> str:
        if not choices:
            raise ValueError("select() needs at least one choice")

        self._console.print(message, Style.BOLD)
        for i, choice in enumerate(choices, start=1):
            self._console.print(f"{i:2}. {choice}", Style.DIM)

        while True:
            raw = typer.prompt("Pick number", default="1")
            try:
                idx = int(raw)
            except ValueError:
                self._console.error("invalid number")
                continue
            if idx < 1 or idx > len(choices):
                self._console.error("out of range")
                continue
            return choices[idx - 1]

    def text(self, message: str, *, default: str) -> str:
        value: str = typer.prompt(message, default=default)
        return value.strip()

    def confirm(self, message: str) -> bool:
        return typer.confirm(message, default=False)
