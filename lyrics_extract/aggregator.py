from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Iterable, Optional

from .fs_utils import display_path
from .models import AggregatedDocument, DocumentSection, SectionOutcome, TagReadError
from .protocols import Tag
from .selection import LyricsSelector
from .tagging import read_tag

logger = logging.getLogger(__name__)

NO_LYRICS_MARKER = "[No lyrics found]"
FAILED_MARKER = "[Failed to extract lyrics]"
DEFAULT_SEPARATOR_TEXT = "---"


class LyricsAggregator:
    """Builds one document out of the lyrics of many files, in the order given."""

    def __init__(
        self,
        *,
        include_names: bool = False,
        add_separator: bool = False,
        separator_text: str = DEFAULT_SEPARATOR_TEXT,
        selector: Optional[LyricsSelector] = None,
        reader: Callable[[Path], Tag] = read_tag,
    ) -> None:
        self.include_names = include_names
        self.add_separator = add_separator
        self.separator_text = separator_text
        self.selector = selector or LyricsSelector()
        self.reader = reader

    def aggregate(self, files: Iterable[Path]) -> AggregatedDocument:
        document = AggregatedDocument()
        for index, file_path in enumerate(files):
            document.append(self._section(index, Path(file_path)))
        return document

    def _section(self, index: int, file_path: Path) -> DocumentSection:
        shown = display_path(file_path)
        parts: list[str] = []
        if index > 0 and self.add_separator:
            parts.append(f"\n{self.separator_text}\n")
        if self.include_names:
            parts.append(f"File: {shown}\n\n")

        try:
            result = self.selector.select(self.reader(file_path))
        except TagReadError as exc:
            logger.error("Failed to extract lyrics from %s: %s", shown, exc.cause or exc)
            if self.include_names:
                parts.append(f"{FAILED_MARKER}\n")
            return DocumentSection(file_path, SectionOutcome.FAILED, "".join(parts))

        if result.text is None:
            logger.warning("No lyrics found in %s", shown)
            if self.include_names:
                parts.append(f"{NO_LYRICS_MARKER}\n")
            return DocumentSection(file_path, SectionOutcome.ABSENT, "".join(parts))

        parts.append(f"{result.text}\n")
        logger.info("Extracted lyrics from %s", shown)
        return DocumentSection(file_path, SectionOutcome.FOUND, "".join(parts))
