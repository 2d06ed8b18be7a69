from __future__ import annotations

import logging
from pathlib import Path

from ..aggregator import LyricsAggregator
from ..config import Settings
from ..fs_utils import write_output
from ..models import AggregatedDocument, NoFilesFoundError, SectionOutcome
from ..scanner import find_mp3_files
from ..selection import LyricsSelector

logger = logging.getLogger(__name__)


def run(settings: Settings, input_path: Path) -> AggregatedDocument:
    mp3_files = find_mp3_files(input_path, recursive=settings.scan.recursive)
    if not mp3_files:
        raise NoFilesFoundError(input_path)
    logger.info("Found %d MP3 file(s)", len(mp3_files))

    aggregator = LyricsAggregator(
        include_names=settings.output.include_names,
        add_separator=settings.output.separator,
        separator_text=settings.output.separator_text,
        selector=LyricsSelector(settings.selection.fallback_frame_ids),
    )
    document = aggregator.aggregate(mp3_files)
    write_output(settings.output.path, document.encode())

    logger.info("Lyrics written to %s", settings.output.path)
    logger.info(
        "Summary: %d file(s), %d with lyrics, %d without, %d failed",
        len(document),
        document.count(SectionOutcome.FOUND),
        document.count(SectionOutcome.ABSENT),
        document.count(SectionOutcome.FAILED),
    )
    return document
