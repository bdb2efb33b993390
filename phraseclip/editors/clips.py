"""Clip editor: turns phrase matches into trim ranges and writes the clips."""

from pathlib import Path
from typing import Callable, Sequence

from phraseclip import ffutil
from phraseclip.models import ClipRange, PhraseMatch, VideoInfo


def resolve_clip_ranges(
    matches: Sequence[PhraseMatch], end_offset: float | None = None
) -> list[ClipRange]:
    """Map each match to a clip range, extending the end by *end_offset* seconds.

    Ranges keep the order of *matches*; the position becomes the clip index.
    The end is not clamped to the source duration.
    """
    ranges: list[ClipRange] = []
    for i, match in enumerate(matches):
        end = match.end if end_offset is None else match.end.add_seconds(end_offset)
        ranges.append(ClipRange(index=i, start=match.start, end=end))
    return ranges


def clip_filename(source: Path, label: str, index: int, ext: str = ".mp4") -> str:
    return f"({Path(source).stem})_{label}_{index}{ext}"


def apply_clips(
    video: VideoInfo,
    ranges: Sequence[ClipRange],
    output_dir: Path,
    label: str,
    ext: str = ".mp4",
    on_progress: Callable[[float], None] | None = None,
) -> list[Path]:
    """Trim one clip per range into *output_dir*; returns the written paths."""
    written: list[Path] = []
    total = len(ranges)

    for n, clip in enumerate(ranges):
        output_path = Path(output_dir) / clip_filename(video.path, label, clip.index, ext)

        clip_progress = None
        if on_progress:
            def clip_progress(frac: float, n: int = n) -> None:
                on_progress((n + frac) / total)

        ffutil.trim_clip(
            video.path,
            clip.start,
            clip.end,
            video.fps,
            output_path,
            on_progress=clip_progress,
        )
        written.append(output_path)

    return written
