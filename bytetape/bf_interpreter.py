from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterator, List, Optional, Tuple

from .channels import BufferChannel, InputData, IoChannel
from .errors import (
    ConfigError,
    InternalError,
    IoError,
    StepLimitExceeded,
    TapeOverflow,
    TapeUnderflow,
)
from .validator import CLOSE_BRACKET, OPEN_BRACKET, ProgramSource, as_program, build_jump_map, validate

logger = logging.getLogger(__name__)

DEFAULT_TAPE_LENGTH = 30000
CELL_MAX = 255

INCREMENT_POINTER = ord(">")
DECREMENT_POINTER = ord("<")
INCREMENT_CELL = ord("+")
DECREMENT_CELL = ord("-")
READ_BYTE = ord(",")
WRITE_BYTE = ord(".")


class PointerPolicy(str, Enum):
    ERROR = "error"
    WRAP = "wrap"


@dataclass
class ArithmeticEvent:
    pc: int
    pointer: int
    kind: str


@dataclass
class ExecutionState:
    step: int
    pc: int
    command: Optional[str]
    pointer: int
    tape_start: int
    tape: List[int]
    output: bytes
    code_length: int


@dataclass
class BrainfuckInterpreter:
    tape_length: int = DEFAULT_TAPE_LENGTH
    pointer_policy: PointerPolicy = PointerPolicy.ERROR
    strict_cell_arithmetic: bool = False
    jump_table: bool = True
    record_events: bool = True

    tape: bytearray = field(init=False, repr=False)
    pointer: int = field(init=False, repr=False)
    events: List[ArithmeticEvent] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        if self.tape_length <= 0:
            raise ConfigError(f"Cannot allocate {self.tape_length} bytes of tape!")
        self.pointer_policy = PointerPolicy(self.pointer_policy)
        self.reset()

    def reset(self) -> None:
        self.tape = bytearray(self.tape_length)
        self.pointer = 0
        self.events = []

    def run(
        self,
        code: ProgramSource,
        input_data: Optional[InputData] = None,
        max_steps: Optional[int] = None,
    ) -> bytes:
        channel = BufferChannel(input_data)
        self.execute(code, channel, max_steps=max_steps)
        return channel.output

    def execute(
        self,
        code: ProgramSource,
        channel: IoChannel,
        max_steps: Optional[int] = None,
    ) -> None:
        for _ in self._dispatch(as_program(code), channel, max_steps):
            pass

    def step(
        self,
        code: ProgramSource,
        input_data: Optional[InputData] = None,
        max_steps: Optional[int] = None,
        tape_window: int = 10,
    ) -> Iterator[ExecutionState]:
        program = as_program(code)
        channel = BufferChannel(input_data)
        code_length = len(program)
        steps = 0
        pc = 0
        for pc, command in self._dispatch(program, channel, max_steps):
            steps += 1
            yield self._snapshot(pc, chr(command), steps, code_length, tape_window, channel.output)

        # Emit final snapshot indicating completion
        yield self._snapshot(pc, None, steps, code_length, tape_window, channel.output)

    def _dispatch(
        self,
        program: bytes,
        channel: IoChannel,
        max_steps: Optional[int],
    ) -> Iterator[Tuple[int, int]]:
        jump_map: Optional[Dict[int, int]] = None
        if self.jump_table:
            jump_map = build_jump_map(program)
        else:
            validate(program)

        self.reset()
        pc = 0
        steps = 0
        code_length = len(program)
        logger.debug(
            "executing %d bytes on a %d cell tape (pointer policy: %s)",
            code_length,
            self.tape_length,
            self.pointer_policy.value,
        )
        try:
            while pc < code_length:
                if max_steps is not None and steps >= max_steps:
                    raise StepLimitExceeded("Brainfuck program exceeded allowed step count")

                command = program[pc]
                pc = self._execute_instruction(command, pc, program, jump_map, channel)
                steps += 1
                yield pc, command
        finally:
            channel.flush()
        logger.debug("execution finished after %d steps", steps)

    def _execute_instruction(
        self,
        command: int,
        pc: int,
        program: bytes,
        jump_map: Optional[Dict[int, int]],
        channel: IoChannel,
    ) -> int:
        new_pc = pc + 1
        if command == INCREMENT_POINTER:
            if self.pointer == self.tape_length - 1:
                if self.pointer_policy is PointerPolicy.ERROR:
                    raise TapeOverflow(pc=pc, pointer=self.pointer)
                self.pointer = 0
            else:
                self.pointer += 1
        elif command == DECREMENT_POINTER:
            if self.pointer == 0:
                if self.pointer_policy is PointerPolicy.ERROR:
                    raise TapeUnderflow(pc=pc, pointer=self.pointer)
                self.pointer = self.tape_length - 1
            else:
                self.pointer -= 1
        elif command == INCREMENT_CELL:
            if self.tape[self.pointer] == CELL_MAX:
                self.tape[self.pointer] = 0
                if self.strict_cell_arithmetic:
                    self._report_wraparound(pc, "overflow")
            else:
                self.tape[self.pointer] += 1
        elif command == DECREMENT_CELL:
            if self.tape[self.pointer] == 0:
                self.tape[self.pointer] = CELL_MAX
                if self.strict_cell_arithmetic:
                    self._report_wraparound(pc, "underflow")
            else:
                self.tape[self.pointer] -= 1
        elif command == WRITE_BYTE:
            try:
                channel.write_byte(self.tape[self.pointer])
            except OSError as exc:
                raise IoError(f"Failed to write output: {exc}") from exc
        elif command == READ_BYTE:
            try:
                value = channel.read_byte()
            except OSError as exc:
                raise IoError(f"Failed to read input: {exc}") from exc
            # End of input stores zero
            self.tape[self.pointer] = 0 if value is None else value
        elif command == OPEN_BRACKET:
            if self.tape[self.pointer] == 0:
                new_pc = self._matching_bracket(pc, program, jump_map) + 1
        elif command == CLOSE_BRACKET:
            if self.tape[self.pointer] != 0:
                new_pc = self._matching_bracket(pc, program, jump_map) + 1
        return new_pc

    def _report_wraparound(self, pc: int, kind: str) -> None:
        logger.warning("Runtime integer %s at pc=%d (cell %d)", kind, pc, self.pointer)
        if self.record_events:
            self.events.append(ArithmeticEvent(pc=pc, pointer=self.pointer, kind=kind))

    def _matching_bracket(
        self,
        pc: int,
        program: bytes,
        jump_map: Optional[Dict[int, int]],
    ) -> int:
        if jump_map is not None:
            try:
                return jump_map[pc]
            except KeyError as exc:
                raise InternalError(pc=pc, detail="missing from jump table") from exc
        if program[pc] == OPEN_BRACKET:
            return scan_forward(program, pc)
        return scan_backward(program, pc)

    def _snapshot(
        self,
        pc: int,
        command: Optional[str],
        step: int,
        code_length: int,
        tape_window: int,
        output: bytes,
    ) -> ExecutionState:
        start = max(0, self.pointer - tape_window)
        end = min(self.tape_length, self.pointer + tape_window + 1)
        return ExecutionState(
            step=step,
            pc=pc,
            command=command,
            pointer=self.pointer,
            tape_start=start,
            tape=list(self.tape[start:end]),
            output=output,
            code_length=code_length,
        )


def scan_forward(program: bytes, pc: int) -> int:
    """Return the index of the ``]`` matching the ``[`` at ``pc``."""
    depth = 1
    index = pc
    while depth:
        index += 1
        if index >= len(program):
            raise InternalError(pc=pc, detail="forward scan ran past the end of the program")
        symbol = program[index]
        if symbol == OPEN_BRACKET:
            depth += 1
        elif symbol == CLOSE_BRACKET:
            depth -= 1
    return index


def scan_backward(program: bytes, pc: int) -> int:
    """Return the index of the ``[`` matching the ``]`` at ``pc``."""
    depth = 1
    index = pc
    while depth:
        index -= 1
        if index < 0:
            raise InternalError(pc=pc, detail="backward scan ran past the start of the program")
        symbol = program[index]
        if symbol == CLOSE_BRACKET:
            depth += 1
        elif symbol == OPEN_BRACKET:
            depth -= 1
    return index


__all__ = [
    "ArithmeticEvent",
    "BrainfuckInterpreter",
    "DEFAULT_TAPE_LENGTH",
    "ExecutionState",
    "PointerPolicy",
    "scan_backward",
    "scan_forward",
]
