"""Indented progress output."""

from __future__ import annotations

import sys
from typing import TextIO


class Logger:
    """Writes progress messages at increasing indentation levels."""

    def __init__(self, stream: TextIO | None = None) -> None:
        self._stream = stream

    def _emit(self, level: int, message: str, args: tuple) -> None:
        text = message % args if args else message
        out = self._stream if self._stream is not None else sys.stdout
        indent = "  " * level
        for line in text.splitlines() or [""]:
            out.write(f"{indent}{line}\n" if line else "\n")

    def process(self, message: str, *args: object) -> None:
        """Write a top-level step."""
        self._emit(1, message, args)

    def subprocess(self, message: str, *args: object) -> None:
        """Write a step within a process."""
        self._emit(2, message, args)

    def action(self, message: str, *args: object) -> None:
        """Write an action within a subprocess."""
        self._emit(3, message, args)

    def break_line(self) -> None:
        """Write an empty line."""
        out = self._stream if self._stream is not None else sys.stdout
        out.write("\n")