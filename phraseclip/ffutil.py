"""FFmpeg subprocess helpers."""

import logging
import re
import shutil
import subprocess
from pathlib import Path
from typing import Callable

from phraseclip.models import VideoInfo
from phraseclip.timecode import Timecode

logger = logging.getLogger(__name__)

_DURATION_RE = re.compile(r"Duration:\s*(\d+:\d+:\d+\.\d+)")
_FPS_RE = re.compile(r"(\d+(?:\.\d+)?) fps\b")
_PROGRESS_TIME_RE = re.compile(r"time=\s*(\d+:\d+:\d+\.\d+)")

_NO_STREAM_MARKERS = ("matches no streams", "does not contain any stream")


class FFmpegNotFoundError(RuntimeError):
    pass


class NoSubtitleStreamError(ValueError):
    """Raised when the input file has no subtitle stream to extract."""
    pass


def check_ffmpeg() -> None:
    """Raise FFmpegNotFoundError if ffmpeg is not on PATH."""
    if shutil.which("ffmpeg") is None:
        raise FFmpegNotFoundError("ffmpeg not found on PATH")


def parse_probe_output(stderr: str) -> tuple[Timecode, float]:
    """Pull the duration and frame rate out of ffmpeg's input banner.

    The banner looks like::

        Duration: 00:23:40.05, start: 0.000000, bitrate: 1215 kb/s
          Stream #0:0: Video: h264 (High), yuv420p, 1280x720, 23.98 fps, ...

    The first ``<n> fps`` figure is taken as the video frame rate.
    """
    duration_match = _DURATION_RE.search(stderr)
    if duration_match is None:
        raise ValueError("No duration found in ffmpeg output")

    fps_match = _FPS_RE.search(stderr)
    if fps_match is None:
        raise ValueError("No video frame rate found in ffmpeg output")

    fps = float(fps_match.group(1))
    if fps <= 0:
        raise ValueError(f"Invalid frame rate in ffmpeg output: {fps}")

    return Timecode.parse(duration_match.group(1)), fps


def probe(input_path: Path) -> VideoInfo:
    """Read duration and frame rate for *input_path* via ``ffmpeg -i``."""
    cmd = ["ffmpeg", "-hide_banner", "-i", str(input_path)]
    # ffmpeg exits non-zero here because no output file is given
    result = subprocess.run(cmd, capture_output=True, text=True)

    try:
        duration, fps = parse_probe_output(result.stderr)
    except ValueError as e:
        raise ValueError(f"Could not probe {input_path}: {e}") from e

    return VideoInfo(
        path=input_path,
        name=input_path.name,
        duration=duration,
        fps=fps,
    )


def parse_progress_time(line: str) -> Timecode | None:
    """Return the ``time=`` position of an ffmpeg progress line, if any."""
    m = _PROGRESS_TIME_RE.search(line)
    if m is None:
        return None
    return Timecode.parse(m.group(1))


def _run_ffmpeg(cmd: list[str], on_line: Callable[[str], None] | None = None) -> str:
    """Run ffmpeg, streaming stderr line by line; return the full stderr.

    Raises CalledProcessError (with stderr attached) on a non-zero exit.
    """
    logger.debug("Running: %s", " ".join(cmd))
    lines: list[str] = []

    with subprocess.Popen(
        cmd,
        stdin=subprocess.DEVNULL,
        stdout=subprocess.DEVNULL,
        stderr=subprocess.PIPE,
        text=True,
        errors="replace",
    ) as proc:
        try:
            for raw in proc.stderr:
                line = raw.rstrip()
                if not line:
                    continue
                lines.append(line)
                logger.debug("ffmpeg: %s", line)
                if on_line:
                    on_line(line)
        except BaseException:
            proc.kill()
            raise
        returncode = proc.wait()

    stderr = "\n".join(lines)
    if returncode != 0:
        raise subprocess.CalledProcessError(returncode, cmd, stderr=stderr)
    return stderr


def extract_subtitles(
    input_path: Path,
    output_path: Path,
    stream: int = 0,
    on_progress: Callable[[str], None] | None = None,
) -> Path:
    """Convert the input's subtitle stream *stream* to an SRT file.

    *on_progress* receives ffmpeg's raw ``size=`` status lines; subtitle
    extraction reports no usable position to turn into a fraction.
    """
    cmd = [
        "ffmpeg", "-y",
        "-i", str(input_path),
        "-map", f"0:s:{stream}",
        "-c:s", "srt",
        str(output_path),
    ]

    def on_line(line: str) -> None:
        if on_progress and line.startswith("size="):
            on_progress(line)

    try:
        _run_ffmpeg(cmd, on_line=on_line)
    except subprocess.CalledProcessError as e:
        if any(marker in (e.stderr or "") for marker in _NO_STREAM_MARKERS):
            raise NoSubtitleStreamError(
                f"No subtitle stream #{stream} found in {input_path}"
            ) from e
        raise

    return output_path


def trim_clip(
    input_path: Path,
    start: Timecode,
    end: Timecode,
    fps: float,
    output_path: Path,
    on_progress: Callable[[float], None] | None = None,
) -> Path:
    """Cut [start, end] out of *input_path*, re-encoding at the source fps."""
    cmd = [
        "ffmpeg", "-y",
        "-i", str(input_path),
        "-ss", start.format(),
        "-to", end.format(),
        "-vf", f"fps={fps:g}",
        "-af", "asetpts=PTS-STARTPTS",
        str(output_path),
    ]

    span_ms = max(end.ms - start.ms, 1)

    def on_line(line: str) -> None:
        if not on_progress or not line.startswith("frame="):
            return
        position = parse_progress_time(line)
        if position is not None:
            on_progress(min(max(position.ms / span_ms, 0.0), 1.0))

    _run_ffmpeg(cmd, on_line=on_line)
    return output_path
