"""Console output abstraction.

The release workflow writes to two sinks: a primary channel for progress
lines or the JSON report, and an error channel for one-line diagnostics.
Both are ``ConsoleProtocol`` implementations so the workflow never depends
on Rich directly and tests can capture everything with ``MockConsole``.

Messages carry user data (branch templates, paths, versions), so they are
never interpreted as Rich markup and never wrapped.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Protocol

__all__ = [
    "Style",
    "ConsoleProtocol",
    "RichConsole",
    "MockConsole",
    "OutputRecord",
]


class Style(Enum):
    """Text styles for console output."""

    DEFAULT = auto()
    ERROR = auto()

    def __str__(self) -> str:
        return self.name.lower()


class ConsoleProtocol(Protocol):
    """Protocol for console output."""

    def print(self, message: str, style: Style = Style.DEFAULT) -> None:
        """Print a message verbatim (no markup interpretation).

        Args:
            message: The text to print
            style: The style to apply
        """
        ...

    def error(self, message: str) -> None:
        """Print a one-line error diagnostic."""
        ...


class RichConsole:
    """Console implementation using Rich library.

    Args:
        stderr: Write to standard error instead of standard output.
    """

    def __init__(self, *, stderr: bool = False) -> None:
        # Import Rich lazily to avoid import-time dependency
        from rich.console import Console

        self._console = Console(stderr=stderr)
        self._style_map = {
            Style.DEFAULT: "",
            Style.ERROR: "red bold",
        }

    def print(self, message: str, style: Style = Style.DEFAULT) -> None:
        self._console.print(
            message,
            style=self._style_map.get(style) or None,
            markup=False,
            highlight=False,
            soft_wrap=True,
        )

    def error(self, message: str) -> None:
        from rich.text import Text

        line = Text.assemble(("error:", self._style_map[Style.ERROR]), " ", message)
        self._console.print(line, highlight=False, soft_wrap=True)


@dataclass
class OutputRecord:
    """A single output record for MockConsole."""

    message: str
    style: Style


def _empty_outputs() -> list[OutputRecord]:
    return []


@dataclass
class MockConsole:
    """Console implementation that captures output for testing."""

    outputs: list[OutputRecord] = field(default_factory=_empty_outputs)

    def print(self, message: str, style: Style = Style.DEFAULT) -> None:
        self.outputs.append(OutputRecord(message, style))

    def error(self, message: str) -> None:
        self.outputs.append(OutputRecord(f"error: {message}", Style.ERROR))

    # Test helper methods

    @property
    def messages(self) -> list[str]:
        return [o.message for o in self.outputs]

    @property
    def text(self) -> str:
        """All output as a single newline-separated string."""
        return "\n".join(self.messages)

    def has_error(self) -> bool:
        return any(o.style == Style.ERROR for o in self.outputs)
