"""JSON manifest schema: the contract between CLI/API and engine."""

import json
import math
from dataclasses import dataclass, field
from pathlib import Path

from phraseclip.analyzers.phrases import CLIP_LABEL, DEFAULT_PHRASE_SET, get_phrase_set


@dataclass
class ClipConfig:
    """Configuration for phrase matching and clip output."""

    end_offset: float | None = None
    phrase_set: str = DEFAULT_PHRASE_SET
    label: str = CLIP_LABEL
    extensions: list[str] = field(default_factory=lambda: [".mp4", ".mkv"])
    output_ext: str = ".mp4"
    subtitle_stream: int = 0
    keep_going: bool = False


@dataclass
class Manifest:
    """Top-level clipping manifest."""

    input_dir: Path
    output_dir: Path
    version: str = "1"
    clips: ClipConfig = field(default_factory=ClipConfig)


def load_manifest(path: str | Path) -> Manifest:
    """Load a manifest from a JSON file."""
    path = Path(path)
    data = json.loads(path.read_text())

    if "input_dir" not in data or "output_dir" not in data:
        raise ValueError("Manifest must contain 'input_dir' and 'output_dir' fields")

    clips = ClipConfig(**data["clips"]) if "clips" in data else ClipConfig()

    return Manifest(
        version=data.get("version", "1"),
        input_dir=Path(data["input_dir"]),
        output_dir=Path(data["output_dir"]),
        clips=clips,
    )


def check_end_offset(value: float | None) -> None:
    """Raise ValueError unless *value* is None or a finite, non-negative number."""
    if value is None:
        return
    if not math.isfinite(value) or value < 0:
        raise ValueError(f"end_offset must be a finite, non-negative number, got {value}")


def validate_manifest(manifest: Manifest) -> None:
    """Raise ValueError if the manifest cannot be run as-is."""
    for label, directory in (("Input", manifest.input_dir), ("Output", manifest.output_dir)):
        if not directory.exists():
            raise ValueError(f"{label} path does not exist: {directory}")
        if not directory.is_dir():
            raise ValueError(f"{label} path is not a directory: {directory}")

    check_end_offset(manifest.clips.end_offset)
    get_phrase_set(manifest.clips.phrase_set)
