"""Millisecond-resolution timecodes shared by subtitle parsing and trimming."""

import re
from dataclasses import dataclass

_TIMECODE_RE = re.compile(r"^(\d+):(\d{1,2}):(\d{1,2})[.,](\d+)$")

_MS_PER_SECOND = 1000
_MS_PER_MINUTE = 60 * _MS_PER_SECOND
_MS_PER_HOUR = 60 * _MS_PER_MINUTE


class FormatError(ValueError):
    """Raised when a timestamp string cannot be parsed."""
    pass


@dataclass(frozen=True, order=True)
class Timecode:
    """A non-negative instant or duration, stored as whole milliseconds.

    Two text forms are recognised: ``HH:MM:SS,mmm`` as written in SRT files
    and ``HH:MM:SS.mmm`` as printed by ffmpeg.  The fractional part is a
    decimal fraction of a second, so ffmpeg's centisecond ``00:23:40.05``
    reads as 50 ms.  Digits beyond the third are truncated.
    """

    ms: int = 0

    def __post_init__(self) -> None:
        if self.ms < 0:
            raise ValueError(f"Timecode cannot be negative ({self.ms} ms)")

    @classmethod
    def parse(cls, text: str) -> "Timecode":
        m = _TIMECODE_RE.match(text.strip())
        if m is None:
            raise FormatError(f"Unrecognised timestamp: {text!r}")

        hours, minutes, seconds = int(m.group(1)), int(m.group(2)), int(m.group(3))
        if minutes >= 60 or seconds >= 60:
            raise FormatError(f"Timestamp field out of range: {text!r}")
        millis = int(m.group(4)[:3].ljust(3, "0"))

        return cls(
            hours * _MS_PER_HOUR
            + minutes * _MS_PER_MINUTE
            + seconds * _MS_PER_SECOND
            + millis
        )

    @property
    def total_seconds(self) -> float:
        return self.ms / _MS_PER_SECOND

    def format(self) -> str:
        """Render as ``HH:MM:SS.mmm`` (the form ffmpeg's -ss/-to accept)."""
        hours, rest = divmod(self.ms, _MS_PER_HOUR)
        minutes, rest = divmod(rest, _MS_PER_MINUTE)
        seconds, millis = divmod(rest, _MS_PER_SECOND)
        return f"{hours:02d}:{minutes:02d}:{seconds:02d}.{millis:03d}"

    def add_seconds(self, seconds: float) -> "Timecode":
        """Return a new Timecode shifted by *seconds* (rounded to the millisecond)."""
        return Timecode(self.ms + round(seconds * _MS_PER_SECOND))

    def __sub__(self, other: "Timecode") -> "Timecode":
        if not isinstance(other, Timecode):
            return NotImplemented
        return Timecode(self.ms - other.ms)

    def __str__(self) -> str:
        return self.format()
