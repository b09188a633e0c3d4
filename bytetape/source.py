from __future__ import annotations

import os
from pathlib import Path
from typing import Union

from .errors import SourceUnavailable


def read_source(path: Union[str, "os.PathLike[str]"]) -> bytes:
    source_path = Path(path)
    try:
        return source_path.read_bytes()
    except OSError as exc:
        reason = exc.strerror or exc.__class__.__name__
        raise SourceUnavailable(path=str(path), reason=reason) from exc


__all__ = ["read_source"]
