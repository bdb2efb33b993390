"""Shared test fixtures."""

from pathlib import Path

import pytest

from phraseclip.models import VideoInfo
from phraseclip.timecode import Timecode

FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture
def sample_manifest_path() -> Path:
    return FIXTURES_DIR / "sample_manifest.json"


@pytest.fixture
def sample_srt_path() -> Path:
    return FIXTURES_DIR / "sample.srt"


@pytest.fixture
def video_info() -> VideoInfo:
    path = Path("episodes/ep01.mkv")
    return VideoInfo(
        path=path,
        name=path.name,
        duration=Timecode.parse("00:23:40.05"),
        fps=23.98,
    )
