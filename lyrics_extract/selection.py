from __future__ import annotations

import logging
from typing import Iterable, Optional, Sequence

from .models import ABSENT, LyricResult
from .protocols import LyricsProbe, Tag

logger = logging.getLogger(__name__)

LYRICS_DESCRIPTION = "LYRICS"

# Non-standard or legacy identifiers some taggers use for lyrics.
DEFAULT_FALLBACK_FRAME_IDS: tuple[str, ...] = ("LYRICS", "SYLT", "LYRW", "UNSYNCEDLYRICS")


class UnsyncedLyricsProbe(LyricsProbe):
    name = "USLT"

    def probe(self, tag: Tag) -> Optional[str]:
        for frame in tag.lyrics():
            return frame.text
        return None


class LyricsCommentProbe(LyricsProbe):
    name = f"COMM:{LYRICS_DESCRIPTION}"

    def probe(self, tag: Tag) -> Optional[str]:
        for comment in tag.comments():
            if comment.description == LYRICS_DESCRIPTION:
                return comment.text
        return None


class LyricsExtendedTextProbe(LyricsProbe):
    name = f"TXXX:{LYRICS_DESCRIPTION}"

    def probe(self, tag: Tag) -> Optional[str]:
        for extended in tag.extended_texts():
            if extended.description == LYRICS_DESCRIPTION:
                return extended.value
        return None


class FrameIdProbe(LyricsProbe):
    def __init__(self, frame_id: str) -> None:
        self.name = frame_id

    def probe(self, tag: Tag) -> Optional[str]:
        frame = tag.get(self.name)
        if frame is None:
            return None
        if frame.text is None:
            logger.debug("Frame %s has no textual content; ignoring", self.name)
        return frame.text


class LyricsSelector:
    """
    Picks the displayable lyrics out of an ID3v2 tag.

    Probes run in precedence order and the first one that yields text wins:

      1. the first unsynchronized-lyrics (``USLT``) frame
      2. the first comment (``COMM``) described ``LYRICS``
      3. the first user-defined text (``TXXX``) described ``LYRICS``
      4. frames looked up by identifier, in ``fallback_frame_ids`` order

    An empty string is still a result; only ``None`` moves on to the next probe.
    """

    def __init__(self, fallback_frame_ids: Iterable[str] = DEFAULT_FALLBACK_FRAME_IDS) -> None:
        self.probes: Sequence[LyricsProbe] = (
            UnsyncedLyricsProbe(),
            LyricsCommentProbe(),
            LyricsExtendedTextProbe(),
            *(FrameIdProbe(frame_id) for frame_id in fallback_frame_ids),
        )

    def select(self, tag: Tag) -> LyricResult:
        for probe in self.probes:
            text = probe.probe(tag)
            if text is not None:
                logger.debug("Lyrics selected from %s", probe.name)
                return LyricResult.of(text, probe.name)
        return ABSENT


_DEFAULT_SELECTOR = LyricsSelector()


def select_lyrics(tag: Tag) -> LyricResult:
    return _DEFAULT_SELECTOR.select(tag)
