"""SRT subtitle parser."""

import re
from pathlib import Path
from typing import Iterable

from phraseclip.models import SubtitleEntry
from phraseclip.timecode import Timecode

TIME_LINE_RE = re.compile(r"(\d+:\d+:\d+,\d+) --> (\d+:\d+:\d+,\d+)")


def parse_subtitles(lines: Iterable[str]) -> list[SubtitleEntry]:
    """Parse SRT lines into subtitle entries, in file order.

    A ``start --> end`` line opens an entry, following non-blank lines are
    appended to its text (each with one trailing space), and a blank line or
    end of input closes it.  Opening a new entry while one is still open
    replaces it without emitting it.  Lines seen while no entry is open, such
    as the numeric block indexes, are ignored.  Anything that is not a
    well-formed time line is treated as text.
    """
    entries: list[SubtitleEntry] = []

    # None while no entry is open
    current: tuple[Timecode, Timecode] | None = None
    text = ""

    for line in lines:
        if not line.strip():
            if current is not None:
                entries.append(SubtitleEntry(start=current[0], end=current[1], text=text))
                current = None
                text = ""
            continue

        m = TIME_LINE_RE.search(line)
        if m:
            current = (Timecode.parse(m.group(1)), Timecode.parse(m.group(2)))
            text = ""
        elif current is not None:
            text += line + " "

    if current is not None:
        entries.append(SubtitleEntry(start=current[0], end=current[1], text=text))

    return entries


def read_subtitle_file(path: Path) -> list[SubtitleEntry]:
    """Read an SRT file from disk and parse it."""
    content = Path(path).read_text(encoding="utf-8-sig", errors="replace")
    return parse_subtitles(content.splitlines())
