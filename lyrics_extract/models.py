from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List, Optional


@dataclass(frozen=True, slots=True)
class Lyrics:
    lang: str
    description: str
    text: str


@dataclass(frozen=True, slots=True)
class Comment:
    lang: str
    description: str
    text: str


@dataclass(frozen=True, slots=True)
class ExtendedText:
    description: str
    value: str


@dataclass(frozen=True, slots=True)
class FrameView:
    frame_id: str
    text: Optional[str] = None


@dataclass(frozen=True, slots=True)
class LyricResult:
    text: Optional[str] = None
    source: Optional[str] = None

    @property
    def found(self) -> bool:
        return self.text is not None

    @classmethod
    def of(cls, text: str, source: str) -> "LyricResult":
        return cls(text=text, source=source)


ABSENT = LyricResult()


class SectionOutcome(str, Enum):
    FOUND = "found"
    ABSENT = "absent"
    FAILED = "failed"


@dataclass(slots=True)
class DocumentSection:
    path: Path
    outcome: SectionOutcome
    text: str


@dataclass(slots=True)
class AggregatedDocument:
    sections: List[DocumentSection] = field(default_factory=list)

    def append(self, section: DocumentSection) -> None:
        self.sections.append(section)

    def render(self) -> str:
        return "".join(section.text for section in self.sections)

    def encode(self) -> bytes:
        return self.render().encode("utf-8")

    def count(self, outcome: SectionOutcome) -> int:
        return sum(1 for section in self.sections if section.outcome is outcome)

    def __len__(self) -> int:
        return len(self.sections)


class LyricsExtractError(Exception):
    """Base class for every error the extractor reports to the user."""

    message = "lyrics extraction failed"

    def __init__(self, path: Path | str, cause: object | None = None) -> None:
        self.path = Path(path)
        self.cause = cause
        super().__init__(str(self))

    def __str__(self) -> str:
        if self.cause is not None:
            return f"{self.message}: {self.path} ({self.cause})"
        return f"{self.message}: {self.path}"


class PathNotFoundError(LyricsExtractError):
    message = "the specified path does not exist"


class NotAnMp3Error(LyricsExtractError):
    message = "the specified file is not an MP3 file"


class NoFilesFoundError(LyricsExtractError):
    message = "no MP3 files found"


class TagReadError(LyricsExtractError):
    """Raised per file when the ID3 tag cannot be read; the batch keeps going."""

    message = "failed to read ID3 tag"


class SinkError(LyricsExtractError):
    message = "failed to write output"


class CreateFailedError(SinkError):
    message = "failed to create output file"


class WriteFailedError(SinkError):
    message = "failed to write to output file"
