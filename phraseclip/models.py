"""Shared data types used across PhraseClip."""

from dataclasses import dataclass
from pathlib import Path

from phraseclip.timecode import Timecode


@dataclass(frozen=True)
class VideoInfo:
    """Metadata extracted from a media file via ffmpeg."""

    path: Path
    name: str
    duration: Timecode
    fps: float


@dataclass(frozen=True)
class SubtitleEntry:
    """One subtitle block: its time span and accumulated text."""

    start: Timecode
    end: Timecode
    text: str = ""


@dataclass(frozen=True)
class PhraseMatch:
    """The time span of a subtitle entry that contains a phrase variant."""

    start: Timecode
    end: Timecode
    phrase: str = ""


@dataclass(frozen=True)
class ClipRange:
    """Final trim boundaries for one output clip."""

    index: int
    start: Timecode
    end: Timecode

    @property
    def duration(self) -> Timecode:
        return self.end - self.start
