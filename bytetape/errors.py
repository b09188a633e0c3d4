from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


class BrainfuckError(Exception):
    """Base class for every error raised by the interpreter and its glue."""


class ConfigError(BrainfuckError):
    pass


@dataclass(eq=False)
class SourceUnavailable(BrainfuckError):
    path: str
    reason: str

    def __str__(self) -> str:
        return f"{self.reason}: {self.path}"


class ValidationError(BrainfuckError):
    pass


@dataclass(eq=False)
class UnmatchedClose(ValidationError):
    line: int
    column: int
    position: int

    def __str__(self) -> str:
        return (
            f"Program validation error (Line {self.line} Character {self.column}) :: "
            "Closing bracket found with no opening bracket!"
        )


@dataclass(eq=False)
class UnmatchedOpen(ValidationError):
    count: int

    def __str__(self) -> str:
        return (
            f"Program validation error :: Found {self.count} opening brackets "
            "without closing brackets!"
        )


@dataclass(eq=False)
class TapeBoundsError(BrainfuckError):
    pc: int
    pointer: int

    def __str__(self) -> str:
        return f"Pointer moved outside the tape at pc={self.pc} (pointer={self.pointer})"


class TapeOverflow(TapeBoundsError):
    def __str__(self) -> str:
        return f"Pointer moved beyond the tape length at pc={self.pc} (pointer={self.pointer})"


class TapeUnderflow(TapeBoundsError):
    def __str__(self) -> str:
        return f"Pointer moved before start of tape at pc={self.pc}"


class IoError(BrainfuckError):
    pass


@dataclass(eq=False)
class InternalError(BrainfuckError):
    pc: int
    detail: Optional[str] = None

    def __str__(self) -> str:
        message = f"No matching bracket for pc={self.pc} in a validated program"
        if self.detail:
            message = f"{message} ({self.detail})"
        return message


class StepLimitExceeded(BrainfuckError):
    """Raised when Brainfuck execution exceeds the configured step budget."""


__all__ = [
    "BrainfuckError",
    "ConfigError",
    "SourceUnavailable",
    "ValidationError",
    "UnmatchedClose",
    "UnmatchedOpen",
    "TapeBoundsError",
    "TapeOverflow",
    "TapeUnderflow",
    "IoError",
    "InternalError",
    "StepLimitExceeded",
]
