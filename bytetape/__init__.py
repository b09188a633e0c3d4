from .bf_interpreter import ArithmeticEvent, BrainfuckInterpreter, ExecutionState, PointerPolicy
from .channels import BufferChannel, IoChannel, StreamChannel
from .config import RunConfig, parse_tape_length
from .errors import (
    BrainfuckError,
    ConfigError,
    InternalError,
    IoError,
    SourceUnavailable,
    StepLimitExceeded,
    TapeBoundsError,
    TapeOverflow,
    TapeUnderflow,
    UnmatchedClose,
    UnmatchedOpen,
    ValidationError,
)
from .source import read_source
from .validator import build_jump_map, validate

__all__ = [
    "ArithmeticEvent",
    "BrainfuckError",
    "BrainfuckInterpreter",
    "BufferChannel",
    "ConfigError",
    "ExecutionState",
    "InternalError",
    "IoChannel",
    "IoError",
    "PointerPolicy",
    "RunConfig",
    "SourceUnavailable",
    "StepLimitExceeded",
    "StreamChannel",
    "TapeBoundsError",
    "TapeOverflow",
    "TapeUnderflow",
    "UnmatchedClose",
    "UnmatchedOpen",
    "ValidationError",
    "build_jump_map",
    "parse_tape_length",
    "read_source",
    "validate",
]
