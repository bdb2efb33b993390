"""Tests for Timecode parsing, formatting and arithmetic."""

import pytest

from phraseclip.timecode import FormatError, Timecode


class TestParse:
    def test_srt_form(self):
        assert Timecode.parse("00:00:05,000") == Timecode(5000)

    def test_ffmpeg_form(self):
        assert Timecode.parse("01:02:03.456") == Timecode(3_723_456)

    def test_centisecond_fraction(self):
        # ffmpeg prints Duration with two fractional digits
        assert Timecode.parse("00:23:40.05") == Timecode(1_420_050)

    def test_single_digit_fraction(self):
        assert Timecode.parse("00:00:01.5") == Timecode(1500)

    def test_extra_fraction_digits_truncated(self):
        assert Timecode.parse("00:00:01.123999") == Timecode(1123)

    def test_surrounding_whitespace(self):
        assert Timecode.parse("  00:00:07,500 ") == Timecode(7500)

    def test_large_hours(self):
        assert Timecode.parse("123:00:00.000") == Timecode(123 * 3_600_000)

    @pytest.mark.parametrize(
        "text",
        [
            "",
            "garbage",
            "00:00:05",
            "00:00:05:000",
            "00-00-05,000",
            "00:00:05,",
            "-1:00:00,000",
            "00:00:05,000 --> 00:00:07,000",
        ],
    )
    def test_unrecognised_raises(self, text):
        with pytest.raises(FormatError):
            Timecode.parse(text)

    @pytest.mark.parametrize("text", ["00:60:00,000", "00:00:60,000", "00:99:99.000"])
    def test_out_of_range_raises(self, text):
        with pytest.raises(FormatError, match="out of range"):
            Timecode.parse(text)

    def test_format_error_is_value_error(self):
        with pytest.raises(ValueError):
            Timecode.parse("nope")


class TestFormat:
    def test_zero_padded(self):
        assert Timecode(5000).format() == "00:00:05.000"

    def test_all_fields(self):
        assert Timecode(3_723_456).format() == "01:02:03.456"

    def test_str_matches_format(self):
        assert str(Timecode(7500)) == "00:00:07.500"

    @pytest.mark.parametrize("ms", [0, 1, 999, 1000, 59_999, 3_599_999, 3_600_000, 86_400_123])
    def test_round_trip(self, ms):
        t = Timecode(ms)
        assert Timecode.parse(t.format()) == t


class TestArithmetic:
    def test_add_seconds(self):
        assert Timecode(7500).add_seconds(2.0) == Timecode(9500)

    def test_add_fractional_seconds_has_no_drift(self):
        t = Timecode(0)
        for _ in range(10):
            t = t.add_seconds(0.1)
        assert t == Timecode(1000)

    def test_add_seconds_returns_new_value(self):
        t = Timecode(1000)
        t.add_seconds(1.0)
        assert t == Timecode(1000)

    def test_add_seconds_below_zero_raises(self):
        with pytest.raises(ValueError):
            Timecode(500).add_seconds(-1.0)

    def test_subtract(self):
        assert Timecode(1000) - Timecode(250) == Timecode(750)

    def test_subtract_below_zero_raises(self):
        with pytest.raises(ValueError):
            Timecode(250) - Timecode(1000)

    def test_ordering(self):
        assert Timecode(1) < Timecode(2)
        assert max(Timecode(5), Timecode(3)) == Timecode(5)

    def test_negative_rejected(self):
        with pytest.raises(ValueError):
            Timecode(-1)

    def test_total_seconds(self):
        assert Timecode(2500).total_seconds == 2.5
