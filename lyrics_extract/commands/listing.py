from __future__ import annotations

import sys
from pathlib import Path
from typing import Optional, TextIO

from ..fs_utils import display_path
from ..scanner import find_mp3_files


def run(input_path: Path, *, recursive: bool = False, out: Optional[TextIO] = None) -> int:
    stream = out or sys.stdout
    mp3_files = find_mp3_files(input_path, recursive=recursive)
    for path in mp3_files:
        print(display_path(path), file=stream)
    return len(mp3_files)
