from __future__ import annotations

import os
from pathlib import Path

from .models import CreateFailedError, WriteFailedError


def display_path(path: Path | str) -> str:
    """Printable form of ``path``; bytes that are not valid UTF-8 become U+FFFD."""
    return os.fsencode(path).decode("utf-8", errors="replace")


def write_output(path: Path | str, payload: bytes) -> None:
    """Create or truncate ``path`` and write ``payload`` to it."""
    path = Path(path)
    try:
        fh = path.open("wb")
    except OSError as exc:
        raise CreateFailedError(path, exc) from exc
    try:
        with fh:
            fh.write(payload)
    except OSError as exc:
        raise WriteFailedError(path, exc) from exc
