"""Orchestrator: runs the clipping pipeline defined by a Manifest."""

import logging
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Sequence

from phraseclip import ffutil
from phraseclip.analyzers.phrases import find_matches, get_phrase_set
from phraseclip.analyzers.subtitles import read_subtitle_file
from phraseclip.editors.clips import apply_clips, resolve_clip_ranges
from phraseclip.manifest import ClipConfig, Manifest, validate_manifest
from phraseclip.models import PhraseMatch, VideoInfo

logger = logging.getLogger(__name__)

TEMP_SUBTITLE_NAME = "subtitles.srt"


@dataclass
class FileResult:
    path: Path
    video: VideoInfo | None = None
    entries: int = 0
    matches: list[PhraseMatch] = field(default_factory=list)
    clips: list[Path] = field(default_factory=list)
    error: str | None = None


@dataclass
class EngineResult:
    output_dir: Path
    files: list[FileResult] = field(default_factory=list)

    @property
    def clip_count(self) -> int:
        return sum(len(f.clips) for f in self.files)

    @property
    def failed(self) -> list[FileResult]:
        return [f for f in self.files if f.error is not None]


def scan_videos(directory: Path, extensions: Sequence[str]) -> list[Path]:
    """Return the files in *directory* with one of *extensions*, sorted."""
    wanted = {ext.lower() for ext in extensions}
    return sorted(
        p for p in Path(directory).iterdir()
        if p.is_file() and p.suffix.lower() in wanted
    )


def process_video(
    input_path: Path,
    config: ClipConfig,
    output_dir: Path,
    on_progress: Callable[[str, float], None] | None = None,
) -> FileResult:
    """Probe one video, find phrase matches in its subtitles and trim the clips."""

    def _progress(stage: str, frac: float) -> None:
        if on_progress:
            on_progress(stage, frac)

    variants = get_phrase_set(config.phrase_set)

    _progress("Probing video metadata", 0.0)
    info = ffutil.probe(input_path)
    logger.info(
        "File Name: %s, Video Duration: %s, FPS: %g", info.name, info.duration, info.fps
    )
    result = FileResult(path=input_path, video=info)

    with tempfile.TemporaryDirectory(prefix="phraseclip_") as tmpdir:
        srt_path = Path(tmpdir) / TEMP_SUBTITLE_NAME

        _progress("Extracting subtitles", 0.05)
        logger.info("[%s] Started extracting subtitles", info.name)
        ffutil.extract_subtitles(
            input_path,
            srt_path,
            stream=config.subtitle_stream,
            on_progress=lambda line: logger.info("[%s] Progress: %s", info.name, line),
        )
        logger.info("[%s] Finished extracting subtitles", info.name)

        _progress("Parsing subtitles", 0.20)
        entries = read_subtitle_file(srt_path)

    result.entries = len(entries)
    logger.info("[%s] Finished parsing subtitles. Final count is %d", info.name, len(entries))

    _progress("Searching for phrases", 0.25)
    result.matches = find_matches(entries, variants)
    logger.info("[%s] Found %d matching lines", info.name, len(result.matches))

    if not result.matches:
        logger.info("[%s] No matching lines, no clip to produce", info.name)
        _progress("No matches", 1.0)
        return result

    ranges = resolve_clip_ranges(result.matches, config.end_offset)
    for clip in ranges:
        logger.info(
            "[%s] Clip %d: %s -> %s (%.3fs)",
            info.name, clip.index, clip.start, clip.end, clip.duration.total_seconds,
        )
        if clip.end > info.duration:
            # Passed through unchanged; ffmpeg stops at end of input
            logger.warning(
                "[%s] Clip %d ends at %s, past the video duration %s",
                info.name, clip.index, clip.end, info.duration,
            )

    _progress(f"Trimming {len(ranges)} clips", 0.30)
    result.clips = apply_clips(
        info,
        ranges,
        output_dir,
        label=config.label,
        ext=config.output_ext,
        on_progress=lambda frac: _progress(f"Trimming {len(ranges)} clips", 0.30 + frac * 0.70),
    )
    for path in result.clips:
        logger.info("[%s] Wrote %s", info.name, path)

    _progress("Done", 1.0)
    return result


def process(
    manifest: Manifest,
    on_progress: Callable[[str, float], None] | None = None,
) -> EngineResult:
    """Execute the clipping pipeline over every video in the input directory.

    Args:
        manifest: Clipping manifest; validated before anything runs.
        on_progress: Optional callback(stage_name, fraction_complete).

    A failure on one file aborts the run unless ``manifest.clips.keep_going``
    is set, in which case the error is logged and recorded on that file's
    result.
    """

    def _progress(stage: str, frac: float) -> None:
        if on_progress:
            on_progress(stage, frac)

    def _sub_progress(prefix: str, base: float, span: float):
        """Return a callback that maps a file's [0,1] to [base, base+span]."""
        def cb(stage: str, frac: float) -> None:
            _progress(f"{prefix}{stage}", base + frac * span)
        return cb

    ffutil.check_ffmpeg()
    validate_manifest(manifest)

    videos = scan_videos(manifest.input_dir, manifest.clips.extensions)
    result = EngineResult(output_dir=manifest.output_dir)

    if not videos:
        logger.warning("No videos found in %s", manifest.input_dir)
        _progress("Done", 1.0)
        return result

    span = 1.0 / len(videos)
    for i, video_path in enumerate(videos):
        cb = _sub_progress(f"[{video_path.name}] ", i * span, span)
        try:
            file_result = process_video(
                video_path, manifest.clips, manifest.output_dir, on_progress=cb
            )
        except Exception as e:
            if not manifest.clips.keep_going:
                raise
            logger.error("[%s] Failed: %s", video_path.name, e)
            file_result = FileResult(path=video_path, error=str(e))
        result.files.append(file_result)

    _progress("Done", 1.0)
    return result
