from __future__ import annotations

import sys
from dataclasses import dataclass
from typing import Optional

from .bf_interpreter import DEFAULT_TAPE_LENGTH, BrainfuckInterpreter, PointerPolicy
from .errors import ConfigError


def parse_tape_length(text: str) -> int:
    try:
        value = int(text.strip(), 10)
    except ValueError as exc:
        raise ConfigError(f"Tape size must be a positive integer, got {text!r}") from exc
    if value == 0:
        raise ConfigError("Cannot allocate 0 bytes of tape!")
    if value < 0:
        raise ConfigError(f"Tape size must be a positive integer, got {value}")
    if value > sys.maxsize:
        raise ConfigError(f"Tape size out of range, must be at most {sys.maxsize}")
    return value


@dataclass
class RunConfig:
    tape_length: int = DEFAULT_TAPE_LENGTH
    pointer_policy: PointerPolicy = PointerPolicy.ERROR
    strict_cell_arithmetic: bool = False
    max_steps: Optional[int] = None
    record_events: bool = True

    def __post_init__(self) -> None:
        if self.tape_length <= 0:
            raise ConfigError(f"Cannot allocate {self.tape_length} bytes of tape!")
        if self.max_steps is not None and self.max_steps <= 0:
            raise ConfigError(f"Step budget must be positive, got {self.max_steps}")
        try:
            self.pointer_policy = PointerPolicy(self.pointer_policy)
        except ValueError as exc:
            raise ConfigError(f"Unknown pointer policy: {self.pointer_policy!r}") from exc

    def create_interpreter(self) -> BrainfuckInterpreter:
        return BrainfuckInterpreter(
            tape_length=self.tape_length,
            pointer_policy=self.pointer_policy,
            strict_cell_arithmetic=self.strict_cell_arithmetic,
            record_events=self.record_events,
        )


__all__ = ["RunConfig", "parse_tape_length"]
