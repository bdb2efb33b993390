"""Tests for manifest loading and validation."""

import json
from pathlib import Path

import pytest

from phraseclip.manifest import (
    ClipConfig,
    Manifest,
    check_end_offset,
    load_manifest,
    validate_manifest,
)


class TestClipConfig:
    def test_defaults(self):
        cfg = ClipConfig()
        assert cfg.end_offset is None
        assert cfg.phrase_set == "ayano"
        assert cfg.label == "TOSHINO_KYOUKO"
        assert cfg.extensions == [".mp4", ".mkv"]
        assert cfg.output_ext == ".mp4"
        assert cfg.subtitle_stream == 0
        assert cfg.keep_going is False

    def test_extensions_not_shared(self):
        a, b = ClipConfig(), ClipConfig()
        a.extensions.append(".avi")
        assert b.extensions == [".mp4", ".mkv"]


class TestManifest:
    def test_minimal(self):
        m = Manifest(input_dir=Path("in"), output_dir=Path("out"))
        assert m.version == "1"
        assert m.clips.end_offset is None


class TestLoadManifest:
    def test_load_sample(self, sample_manifest_path: Path):
        m = load_manifest(sample_manifest_path)
        assert m.version == "1"
        assert m.input_dir == Path("episodes")
        assert m.output_dir == Path("clips")
        assert m.clips.end_offset == 1.5
        assert m.clips.phrase_set == "toshino"
        assert m.clips.keep_going is True
        assert m.clips.label == "TOSHINO_KYOUKO"

    def test_load_without_clips_section(self, tmp_path: Path):
        path = tmp_path / "m.json"
        path.write_text(json.dumps({"input_dir": "a", "output_dir": "b"}))
        m = load_manifest(path)
        assert m.clips == ClipConfig()

    def test_load_invalid_json(self, tmp_path: Path):
        bad = tmp_path / "bad.json"
        bad.write_text("not json")
        with pytest.raises(json.JSONDecodeError):
            load_manifest(bad)

    def test_load_missing_fields(self, tmp_path: Path):
        incomplete = tmp_path / "incomplete.json"
        incomplete.write_text('{"version": "1", "input_dir": "a"}')
        with pytest.raises(ValueError, match="must contain"):
            load_manifest(incomplete)

    def test_load_unknown_clip_option(self, tmp_path: Path):
        path = tmp_path / "m.json"
        path.write_text(json.dumps({"input_dir": "a", "output_dir": "b", "clips": {"bogus": 1}}))
        with pytest.raises(TypeError):
            load_manifest(path)


class TestValidateManifest:
    def _dirs(self, tmp_path: Path) -> tuple[Path, Path]:
        src, dst = tmp_path / "src", tmp_path / "dst"
        src.mkdir()
        dst.mkdir()
        return src, dst

    def test_valid(self, tmp_path: Path):
        src, dst = self._dirs(tmp_path)
        validate_manifest(Manifest(input_dir=src, output_dir=dst, clips=ClipConfig(end_offset=2.0)))

    def test_missing_input(self, tmp_path: Path):
        _, dst = self._dirs(tmp_path)
        with pytest.raises(ValueError, match="Input path does not exist"):
            validate_manifest(Manifest(input_dir=tmp_path / "nope", output_dir=dst))

    def test_input_not_directory(self, tmp_path: Path):
        _, dst = self._dirs(tmp_path)
        f = tmp_path / "file.mp4"
        f.write_bytes(b"")
        with pytest.raises(ValueError, match="Input path is not a directory"):
            validate_manifest(Manifest(input_dir=f, output_dir=dst))

    def test_missing_output(self, tmp_path: Path):
        src, _ = self._dirs(tmp_path)
        with pytest.raises(ValueError, match="Output path does not exist"):
            validate_manifest(Manifest(input_dir=src, output_dir=tmp_path / "nope"))

    def test_negative_offset(self, tmp_path: Path):
        src, dst = self._dirs(tmp_path)
        m = Manifest(input_dir=src, output_dir=dst, clips=ClipConfig(end_offset=-1.0))
        with pytest.raises(ValueError, match="non-negative"):
            validate_manifest(m)

    def test_unknown_phrase_set(self, tmp_path: Path):
        src, dst = self._dirs(tmp_path)
        m = Manifest(input_dir=src, output_dir=dst, clips=ClipConfig(phrase_set="akari"))
        with pytest.raises(ValueError, match="Unknown phrase set"):
            validate_manifest(m)

    @pytest.mark.parametrize("offset", [float("nan"), float("inf"), float("-inf")])
    def test_non_finite_offset(self, tmp_path: Path, offset):
        src, dst = self._dirs(tmp_path)
        m = Manifest(input_dir=src, output_dir=dst, clips=ClipConfig(end_offset=offset))
        with pytest.raises(ValueError, match="finite"):
            validate_manifest(m)


class TestCheckEndOffset:
    @pytest.mark.parametrize("offset", [None, 0.0, 2.0, 1e6])
    def test_accepts(self, offset):
        check_end_offset(offset)

    @pytest.mark.parametrize("offset", [-0.5, float("nan"), float("inf")])
    def test_rejects(self, offset):
        with pytest.raises(ValueError, match="end_offset"):
            check_end_offset(offset)
