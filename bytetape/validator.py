from __future__ import annotations

import logging
from typing import Dict, List, Union

from .errors import UnmatchedClose, UnmatchedOpen

logger = logging.getLogger(__name__)

OPEN_BRACKET = ord("[")
CLOSE_BRACKET = ord("]")
NEWLINE = ord("\n")

ProgramSource = Union[bytes, bytearray, str]


def as_program(code: ProgramSource) -> bytes:
    if isinstance(code, str):
        return code.encode("utf-8")
    return bytes(code)


def _unmatched_close(position: int, newlines: int, last_newline: int) -> UnmatchedClose:
    error = UnmatchedClose(
        line=newlines + 1,
        column=position - last_newline,
        position=position,
    )
    logger.debug("validation failed: %s", error)
    return error


def validate(code: ProgramSource) -> None:
    """Check that every bracket in ``code`` is balanced.

    Stops at the first ``]`` without an open ``[`` and raises
    :class:`UnmatchedClose` with its 1-based line and column. When the scan
    finishes with open brackets left, raises :class:`UnmatchedOpen` carrying
    how many are left. Nothing else about the program is inspected.
    """
    program = as_program(code)
    depth = 0
    newlines = 0
    last_newline = -1
    for index, symbol in enumerate(program):
        if symbol == OPEN_BRACKET:
            depth += 1
        elif symbol == CLOSE_BRACKET:
            if depth == 0:
                raise _unmatched_close(index, newlines, last_newline)
            depth -= 1
        elif symbol == NEWLINE:
            newlines += 1
            last_newline = index

    if depth != 0:
        error = UnmatchedOpen(count=depth)
        logger.debug("validation failed: %s", error)
        raise error


def build_jump_map(code: ProgramSource) -> Dict[int, int]:
    """Validate ``code`` and return the bracket-match table in the same pass."""
    program = as_program(code)
    jump_map: Dict[int, int] = {}
    stack: List[int] = []
    newlines = 0
    last_newline = -1
    for index, symbol in enumerate(program):
        if symbol == OPEN_BRACKET:
            stack.append(index)
        elif symbol == CLOSE_BRACKET:
            if not stack:
                raise _unmatched_close(index, newlines, last_newline)
            start = stack.pop()
            jump_map[start] = index
            jump_map[index] = start
        elif symbol == NEWLINE:
            newlines += 1
            last_newline = index

    if stack:
        error = UnmatchedOpen(count=len(stack))
        logger.debug("validation failed: %s", error)
        raise error
    return jump_map


__all__ = ["as_program", "build_jump_map", "validate"]
