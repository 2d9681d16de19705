"""Terminal output helpers for the CLI."""

import sys
from typing import Any, TextIO

GREEN = "\033[32m"
YELLOW = "\033[33m"
BLUE = "\033[34m"
RED = "\033[31m"
RESET = "\033[0m"
CHECK = "✓"
BULLET = "•"
CROSS = "✗"


def _supports_color(stream: TextIO) -> bool:
    """Color only when writing to a TTY."""
    return hasattr(stream, "isatty") and stream.isatty()


def _colorize(text: str, color: str, stream: TextIO) -> str:
    if _supports_color(stream):
        return f"{color}{text}{RESET}"
    return text


def success(message: str) -> None:
    """Print success message with green checkmark."""
    print(f"{_colorize(CHECK, GREEN, sys.stdout)} {message}")


def info(message: str) -> None:
    """Print info message with yellow bullet."""
    print(f"{_colorize(BULLET, YELLOW, sys.stdout)} {message}")


def header(message: str) -> None:
    """Print header message in blue."""
    print(_colorize(message, BLUE, sys.stdout))


def error(message: str) -> None:
    """Print error message with red cross to stderr."""
    print(f"{_colorize(CROSS, RED, sys.stderr)} {message}", file=sys.stderr)


class OutputCollector:
    """Action output sink that records and prints ``key: value`` pairs."""

    def __init__(self) -> None:
        self.values: dict[str, Any] = {}

    def __call__(self, key: str, value: Any) -> None:
        self.values[key] = value
        print(f"{key}: {value}")
