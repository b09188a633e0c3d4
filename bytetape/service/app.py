from __future__ import annotations

import logging
from typing import List, Optional

from fastapi import FastAPI, HTTPException, status
from pydantic import BaseModel, Field

from bytetape.bf_interpreter import DEFAULT_TAPE_LENGTH, ArithmeticEvent, PointerPolicy
from bytetape.channels import BufferChannel
from bytetape.config import RunConfig
from bytetape.errors import (
    BrainfuckError,
    StepLimitExceeded,
    UnmatchedClose,
    UnmatchedOpen,
    ValidationError,
)
from bytetape.validator import build_jump_map

logger = logging.getLogger(__name__)

DEFAULT_MAX_STEPS = 1_000_000
DEFAULT_MAX_TAPE_LENGTH = 1_000_000


def _validation_detail(exc: ValidationError) -> dict:
    detail = {
        "error": type(exc).__name__,
        "message": str(exc),
        "line": None,
        "column": None,
        "count": None,
    }
    if isinstance(exc, UnmatchedClose):
        detail["line"] = exc.line
        detail["column"] = exc.column
    elif isinstance(exc, UnmatchedOpen):
        detail["count"] = exc.count
    return detail


def _event_to_dict(event: ArithmeticEvent) -> dict:
    return {"pc": event.pc, "pointer": event.pointer, "kind": event.kind}


class ValidateRequest(BaseModel):
    code: str = ""


class ValidateResponse(BaseModel):
    valid: bool
    jump_count: int


class RunRequest(BaseModel):
    code: str = ""
    input: str = ""
    tape_length: Optional[int] = Field(default=None, ge=1)
    wrap_pointer: bool = False
    strict_arithmetic: bool = False
    max_steps: int = Field(default=DEFAULT_MAX_STEPS, ge=1)


class ArithmeticWarning(BaseModel):
    pc: int
    pointer: int
    kind: str


class RunResponse(BaseModel):
    output: List[int]
    text: str
    warnings: List[ArithmeticWarning]


def create_app(*, max_tape_length: Optional[int] = DEFAULT_MAX_TAPE_LENGTH) -> FastAPI:
    app = FastAPI(title="bytetape execution API", version="0.1.0")

    @app.post("/api/validate", response_model=ValidateResponse)
    def validate_program(payload: ValidateRequest) -> ValidateResponse:
        try:
            jump_map = build_jump_map(payload.code)
        except ValidationError as exc:
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                detail=_validation_detail(exc),
            ) from exc
        return ValidateResponse(valid=True, jump_count=len(jump_map) // 2)

    @app.post("/api/run", response_model=RunResponse)
    def run_program(payload: RunRequest) -> RunResponse:
        tape_length = payload.tape_length
        if tape_length is None:
            tape_length = DEFAULT_TAPE_LENGTH
            if max_tape_length is not None:
                tape_length = min(tape_length, max_tape_length)
        elif max_tape_length is not None and tape_length > max_tape_length:
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                detail=f"tape_length must not exceed {max_tape_length}",
            )
        try:
            config = RunConfig(
                tape_length=tape_length,
                pointer_policy=PointerPolicy.WRAP if payload.wrap_pointer else PointerPolicy.ERROR,
                strict_cell_arithmetic=payload.strict_arithmetic,
                max_steps=payload.max_steps,
            )
            interpreter = config.create_interpreter()
        except (MemoryError, OverflowError) as exc:
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                detail=f"Cannot allocate {tape_length} bytes of tape",
            ) from exc

        channel = BufferChannel(payload.input.encode("utf-8"))
        try:
            interpreter.execute(payload.code, channel, max_steps=config.max_steps)
        except ValidationError as exc:
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                detail=_validation_detail(exc),
            ) from exc
        except StepLimitExceeded as exc:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail=str(exc),
            ) from exc
        except BrainfuckError as exc:
            logger.info("program aborted: %s", exc)
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail={
                    "error": type(exc).__name__,
                    "message": str(exc),
                    "output": list(channel.output),
                },
            ) from exc

        output = channel.output
        return RunResponse(
            output=list(output),
            text=output.decode("utf-8", errors="replace"),
            warnings=[ArithmeticWarning(**_event_to_dict(event)) for event in interpreter.events],
        )

    return app


__all__ = ["create_app"]
