from __future__ import annotations

import logging
import os
from collections.abc import Iterator
from pathlib import Path

from .models import NotAnMp3Error, PathNotFoundError

logger = logging.getLogger(__name__)

MP3_SUFFIX = ".mp3"


def is_mp3(path: Path) -> bool:
    """Literal, case-sensitive extension match: ``song.mp3`` yes, ``song.MP3`` no."""
    return path.suffix == MP3_SUFFIX


class Mp3Scanner:
    """Resolves a user supplied path into the ordered list of MP3 files to process."""

    def __init__(self, recursive: bool = False) -> None:
        self.recursive = recursive

    def find(self, input_path: Path | str) -> list[Path]:
        path = Path(input_path)
        if path.is_file():
            if not is_mp3(path):
                raise NotAnMp3Error(path)
            return [path]
        if path.is_dir():
            return list(self.iter_directory(path))
        raise PathNotFoundError(path)

    def iter_directory(self, directory: Path) -> Iterator[Path]:
        walker = self._walk_recursive if self.recursive else self._walk_children
        seen: set[Path] = set()
        for file_path in walker(directory):
            if file_path in seen:
                continue
            seen.add(file_path)
            logger.debug("Found MP3: %s", file_path)
            yield file_path

    def _walk_children(self, directory: Path) -> Iterator[Path]:
        try:
            with os.scandir(directory) as it:
                entries = sorted(it, key=lambda entry: entry.name)
        except OSError as exc:
            logger.debug("Skipping unreadable directory %s: %s", directory, exc)
            return
        for entry in entries:
            file_path = directory / entry.name
            if self._should_include(file_path):
                yield file_path

    def _walk_recursive(self, directory: Path) -> Iterator[Path]:
        for dirpath, dirnames, filenames in os.walk(directory, onerror=self._on_walk_error):
            dirnames.sort()
            current = Path(dirpath)
            for name in sorted(filenames):
                file_path = current / name
                if self._should_include(file_path):
                    yield file_path

    @staticmethod
    def _should_include(path: Path) -> bool:
        if not is_mp3(path):
            return False
        try:
            return path.is_file()
        except OSError:
            return False

    @staticmethod
    def _on_walk_error(exc: OSError) -> None:
        logger.debug("Skipping unreadable entry %s: %s", exc.filename, exc)


def find_mp3_files(input_path: Path | str, recursive: bool = False) -> list[Path]:
    return Mp3Scanner(recursive=recursive).find(input_path)
