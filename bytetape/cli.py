from __future__ import annotations

import argparse
import io
import logging
import sys
from typing import Optional, TextIO

from .bf_interpreter import DEFAULT_TAPE_LENGTH, PointerPolicy
from .channels import StreamChannel
from .config import RunConfig, parse_tape_length
from .errors import (
    ConfigError,
    InternalError,
    IoError,
    SourceUnavailable,
    StepLimitExceeded,
    TapeBoundsError,
    ValidationError,
)
from .source import read_source

# sysexits.h
EX_OK = 0
EX_USAGE = 64
EX_DATAERR = 65
EX_SOFTWARE = 70
EX_IOERR = 74
EX_RUNTIME = 1

RED = "\x1b[31m"
YELLOW = "\x1b[33m"
RESET = "\x1b[0m"


def _use_color(stream: TextIO) -> bool:
    isatty = getattr(stream, "isatty", None)
    return bool(isatty and isatty())


class _ColorFormatter(logging.Formatter):
    def __init__(self, color: bool) -> None:
        super().__init__("%(levelname)s :: %(message)s")
        self.color = color

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        if not self.color:
            return message
        if record.levelno >= logging.ERROR:
            return f"{RED}{message}{RESET}"
        if record.levelno >= logging.WARNING:
            return f"{YELLOW}{message}{RESET}"
        return message


def _configure_logging(verbose: bool) -> None:
    package_logger = logging.getLogger("bytetape")
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(_ColorFormatter(_use_color(sys.stderr)))
    package_logger.addHandler(handler)
    package_logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    package_logger.propagate = False


def _report(message: str) -> None:
    if _use_color(sys.stderr):
        message = f"{RED}{message}{RESET}"
    print(message, file=sys.stderr)


def _binary(stream: TextIO):
    return getattr(stream, "buffer", stream)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Byte-tape Brainfuck interpreter")
    parser.add_argument("source", help="Path to the Brainfuck source file")
    parser.add_argument(
        "tape_size",
        nargs="?",
        default=str(DEFAULT_TAPE_LENGTH),
        help=f"Number of tape cells (default: {DEFAULT_TAPE_LENGTH})",
    )
    parser.add_argument(
        "--wrap-pointer",
        action="store_true",
        help="Wrap the pointer around the tape ends instead of failing",
    )
    parser.add_argument(
        "--strict-arithmetic",
        action="store_true",
        help="Warn whenever a cell wraps around 255/0",
    )
    parser.add_argument(
        "--max-steps",
        type=int,
        default=None,
        help="Abort after this many executed bytes",
    )
    parser.add_argument(
        "--input",
        default=None,
        help="Input supplied to the program instead of standard input",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    return parser


def main(argv: Optional[list[str]] = None) -> int:
    args = _build_parser().parse_args(argv)
    _configure_logging(args.verbose)

    try:
        config = RunConfig(
            tape_length=parse_tape_length(args.tape_size),
            pointer_policy=PointerPolicy.WRAP if args.wrap_pointer else PointerPolicy.ERROR,
            strict_cell_arithmetic=args.strict_arithmetic,
            max_steps=args.max_steps,
            record_events=False,
        )
    except ConfigError as exc:
        _report(f"Error :: {exc}")
        return EX_USAGE

    try:
        program = read_source(args.source)
    except SourceUnavailable as exc:
        _report(f"Error :: {exc}")
        return EX_IOERR

    try:
        interpreter = config.create_interpreter()
    except (MemoryError, OverflowError):
        _report(f"Error :: Failed to allocate {config.tape_length} bytes of tape")
        return EX_SOFTWARE

    reader = io.BytesIO(args.input.encode("utf-8")) if args.input is not None else _binary(sys.stdin)
    channel = StreamChannel(reader=reader, writer=_binary(sys.stdout))

    try:
        interpreter.execute(program, channel, max_steps=config.max_steps)
    except ValidationError as exc:
        _report(str(exc))
        return EX_DATAERR
    except TapeBoundsError as exc:
        _report(f"Runtime error :: {exc}")
        return EX_RUNTIME
    except IoError as exc:
        _report(f"I/O error :: {exc}")
        return EX_IOERR
    except StepLimitExceeded as exc:
        _report(f"Error :: {exc}")
        return EX_SOFTWARE
    except InternalError as exc:
        _report(f"Internal error :: {exc}")
        return EX_SOFTWARE

    return EX_OK


if __name__ == "__main__":
    raise SystemExit(main())
