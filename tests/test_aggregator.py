import os
import sys
import tempfile
import unittest
from pathlib import Path

from mutagen.id3 import COMM, ID3, SYLT, TIT2, USLT

from lyrics_extract.aggregator import LyricsAggregator
from lyrics_extract.models import SectionOutcome, TagReadError
from lyrics_extract.scanner import find_mp3_files
from lyrics_extract.tagging import read_tag


def write_mp3(path: Path, *frames) -> Path:
    path.write_bytes(b"")
    tags = ID3()
    tags.add(TIT2(encoding=3, text=path.stem))
    for frame in frames:
        tags.add(frame)
    tags.save(path)
    with path.open("ab") as fh:
        fh.write(b"\xff\xfb\x90\x44\x00")
    return path


def lyrics_frame(text: str) -> USLT:
    return USLT(encoding=3, lang="eng", desc="", text=text)


class TestLyricsAggregator(unittest.TestCase):
    def _album(self, tmp: Path) -> list[Path]:
        write_mp3(tmp / "a.mp3", lyrics_frame("hello"))
        write_mp3(tmp / "b.mp3", lyrics_frame("world"))
        return find_mp3_files(tmp)

    def test_names_and_separator(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            files = self._album(Path(tmpdir))
            a, b = files
            document = LyricsAggregator(include_names=True, add_separator=True).aggregate(files)
            self.assertEqual(
                document.render(),
                f"File: {a}\n\nhello\n\n---\nFile: {b}\n\nworld\n",
            )

    def test_plain_concatenation(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            files = self._album(Path(tmpdir))
            document = LyricsAggregator().aggregate(files)
            self.assertEqual(document.render(), "hello\nworld\n")
            self.assertEqual(document.count(SectionOutcome.FOUND), 2)
            self.assertEqual(len(document), 2)

    def test_separator_only_between_sections(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            tmp = Path(tmpdir)
            for name in ("one", "two", "three"):
                write_mp3(tmp / f"{name}.mp3", lyrics_frame(name))
            files = find_mp3_files(tmp)
            document = LyricsAggregator(add_separator=True, separator_text="***").aggregate(files)
            self.assertEqual(document.render(), "one\n\n***\nthree\n\n***\ntwo\n")
            self.assertEqual([s.path for s in document.sections], files)

    def test_lyrics_comment_only(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            tmp = Path(tmpdir)
            write_mp3(
                tmp / "c.mp3",
                COMM(encoding=3, lang="eng", desc="LYRICS", text=["only-comment"]),
            )
            document = LyricsAggregator().aggregate(find_mp3_files(tmp))
            self.assertEqual(document.render(), "only-comment\n")

    def test_synced_lyrics_used_as_fallback(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            tmp = Path(tmpdir)
            write_mp3(
                tmp / "e.mp3",
                SYLT(encoding=3, lang="eng", format=2, type=1, desc="", text=[("la la", 0)]),
            )
            document = LyricsAggregator().aggregate(find_mp3_files(tmp))
            self.assertEqual(document.render(), "la la\n")

    def test_unreadable_tag_without_names_contributes_nothing(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            tmp = Path(tmpdir)
            (tmp / "d.mp3").write_bytes(b"garbage")
            document = LyricsAggregator().aggregate(find_mp3_files(tmp))
            self.assertEqual(document.render(), "")
            self.assertEqual(document.count(SectionOutcome.FAILED), 1)

    def test_unreadable_tag_with_names_gets_marker(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            tmp = Path(tmpdir)
            broken = tmp / "d.mp3"
            broken.write_bytes(b"garbage")
            with self.assertLogs("lyrics_extract.aggregator", level="ERROR"):
                document = LyricsAggregator(include_names=True).aggregate([broken])
            self.assertEqual(
                document.render(), f"File: {broken}\n\n[Failed to extract lyrics]\n"
            )

    def test_missing_lyrics_marker_only_with_names(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            tmp = Path(tmpdir)
            song = write_mp3(tmp / "instrumental.mp3")
            with self.assertLogs("lyrics_extract.aggregator", level="WARNING"):
                plain = LyricsAggregator().aggregate([song])
            self.assertEqual(plain.render(), "")
            self.assertEqual(plain.count(SectionOutcome.ABSENT), 1)
            named = LyricsAggregator(include_names=True).aggregate([song])
            self.assertEqual(named.render(), f"File: {song}\n\n[No lyrics found]\n")

    def test_one_failure_does_not_abort_batch(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            tmp = Path(tmpdir)
            write_mp3(tmp / "a.mp3", lyrics_frame("first"))
            (tmp / "b.mp3").write_bytes(b"garbage")
            write_mp3(tmp / "c.mp3", lyrics_frame("third"))
            document = LyricsAggregator(add_separator=True).aggregate(find_mp3_files(tmp))
            self.assertEqual(document.render(), "first\n\n---\n\n---\nthird\n")
            self.assertEqual(
                [s.outcome for s in document.sections],
                [SectionOutcome.FOUND, SectionOutcome.FAILED, SectionOutcome.FOUND],
            )

    def test_uses_injected_reader(self) -> None:
        calls: list[Path] = []

        def reader(path: Path):
            calls.append(path)
            raise TagReadError(path, "no tag")

        files = [Path("x.mp3"), Path("y.mp3")]
        document = LyricsAggregator(reader=reader).aggregate(files)
        self.assertEqual(calls, files)
        self.assertEqual(document.count(SectionOutcome.FAILED), 2)

    @unittest.skipUnless(sys.platform.startswith("linux"), "needs byte-transparent filenames")
    def test_non_utf8_filename_is_shown_lossily(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            tmp = Path(tmpdir)
            song = write_mp3(tmp / os.fsdecode(b"caf\xe9.mp3"), lyrics_frame("hello"))
            write_mp3(tmp / "z.mp3", lyrics_frame("world"))
            document = LyricsAggregator(include_names=True).aggregate(find_mp3_files(tmp))
            shown = f"{tmpdir}/caf�.mp3"
            self.assertEqual(
                document.encode(),
                f"File: {shown}\n\nhello\nFile: {tmp / 'z.mp3'}\n\nworld\n".encode("utf-8"),
            )
            self.assertEqual(document.sections[0].path, song)

    def test_encode_is_utf8_without_bom(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            tmp = Path(tmpdir)
            song = write_mp3(tmp / "s.mp3", lyrics_frame("naïve café ♪"))
            document = LyricsAggregator(reader=read_tag).aggregate([song])
            self.assertEqual(document.encode(), "naïve café ♪\n".encode("utf-8"))


if __name__ == "__main__":
    unittest.main()
