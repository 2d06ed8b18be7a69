from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, Iterator, Optional

from mutagen import MutagenError
from mutagen.id3 import ID3, SYLT, USLT, Frame, TextFrame

from .models import Comment, ExtendedText, FrameView, Lyrics, TagReadError

logger = logging.getLogger(__name__)

# ID3v2.4 separates multiple values of a text frame with a null character.
VALUE_SEPARATOR = "\x00"


class FirstFrameID3(ID3):
    """
    ID3 container that keeps the first of several frames sharing a hash key.

    Stock mutagen replaces an earlier USLT with a later one of the same language
    and description, and merges same-key text frames into one multi-value frame.
    """

    def _add(self, frame: Frame, strict: bool) -> None:
        if not strict:
            upgraded = frame._upgrade_frame()
            if upgraded is not None and upgraded.HashKey in self:
                logger.debug("Ignoring duplicate %s frame", upgraded.HashKey)
                return
        super()._add(frame, strict)


class Id3Tag:
    """Adapts a parsed ``mutagen.id3.ID3`` container to the selector's ``Tag`` protocol."""

    def __init__(self, tags: ID3) -> None:
        self._tags = tags

    def lyrics(self) -> Iterator[Lyrics]:
        for frame in self._tags.getall("USLT"):
            yield Lyrics(lang=frame.lang, description=frame.desc, text=frame.text)

    def comments(self) -> Iterator[Comment]:
        for frame in self._tags.getall("COMM"):
            yield Comment(
                lang=frame.lang,
                description=frame.desc,
                text=_join_values(frame.text),
            )

    def extended_texts(self) -> Iterator[ExtendedText]:
        for frame in self._tags.getall("TXXX"):
            yield ExtendedText(description=frame.desc, value=_join_values(frame.text))

    def get(self, frame_id: str) -> Optional[FrameView]:
        frames = self._tags.getall(frame_id)
        if not frames:
            return None
        frame = frames[0]
        return FrameView(frame_id=frame.FrameID, text=frame_text(frame))


def read_tag(path: Path | str) -> Id3Tag:
    path = Path(path)
    try:
        tags = FirstFrameID3(path)
    except (MutagenError, OSError) as exc:
        raise TagReadError(path, exc) from exc
    logger.debug(
        "Read ID3v2.%d tag with %d frame(s) from %s",
        tags.version[1],
        len(tags),
        path,
    )
    return Id3Tag(tags)


def frame_text(frame: Frame) -> Optional[str]:
    """Plain-text view of a frame, or ``None`` when the frame carries no text."""
    if isinstance(frame, USLT):
        return frame.text
    if isinstance(frame, SYLT):
        # Timestamps are dropped; the segments already carry their own line breaks.
        return "".join(text for text, _time in frame.text)
    if isinstance(frame, TextFrame):
        return _join_values(frame.text)
    return None


def _join_values(values: Iterable[object]) -> str:
    return VALUE_SEPARATOR.join(str(value) for value in values)
