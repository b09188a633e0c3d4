from __future__ import annotations

import argparse
from typing import Optional

import uvicorn

from .app import DEFAULT_MAX_TAPE_LENGTH, create_app


def main(argv: Optional[list[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Run the bytetape execution API server")
    parser.add_argument("--host", default="127.0.0.1", help="Bind address (default: 127.0.0.1)")
    parser.add_argument("--port", type=int, default=8000, help="Port to listen on (default: 8000)")
    parser.add_argument(
        "--max-tape-length",
        type=int,
        default=DEFAULT_MAX_TAPE_LENGTH,
        help=f"Reject run requests asking for a longer tape (default: {DEFAULT_MAX_TAPE_LENGTH})",
    )
    args = parser.parse_args(argv)

    app = create_app(max_tape_length=args.max_tape_length)
    uvicorn.run(app, host=args.host, port=args.port)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
