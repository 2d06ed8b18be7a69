from __future__ import annotations

from typing import Iterator, Optional, Protocol

from .models import Comment, ExtendedText, FrameView, Lyrics


class Tag(Protocol):
    """Read-only view over an ID3v2 container, as consumed by the lyrics selector."""

    def lyrics(self) -> Iterator[Lyrics]: ...

    def comments(self) -> Iterator[Comment]: ...

    def extended_texts(self) -> Iterator[ExtendedText]: ...

    def get(self, frame_id: str) -> Optional[FrameView]: ...


class LyricsProbe(Protocol):
    name: str

    def probe(self, tag: Tag) -> Optional[str]: ...
