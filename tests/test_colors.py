"""Tests for color pairs and scheme selection."""

import pytest

from sankeyview import ColorPair, ColorScheme, InvalidColorError, InvalidOptionError
from sankeyview.colors import normalize_hex


class TestNormalizeHex:
    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("#ABCDEF", "#abcdef"),
            ("abcdef", "#abcdef"),
            ("#fff", "#ffffff"),
            ("#11223344", "#11223344"),
            ("  #0F0  ", "#00ff00"),
        ],
    )
    def test_accepts_hex_forms(self, raw, expected):
        assert normalize_hex(raw) == expected

    @pytest.mark.parametrize("raw", ["red", "#12345", "#gggggg", "", None, 0xFFFFFF])
    def test_rejects_non_hex(self, raw):
        with pytest.raises(InvalidColorError) as exc_info:
            normalize_hex(raw)
        assert exc_info.value.value == raw


class TestColorScheme:
    def test_coerce_strings(self):
        assert ColorScheme.coerce("dark") is ColorScheme.DARK
        assert ColorScheme.coerce(" Light ") is ColorScheme.LIGHT

    def test_coerce_rejects_unknown(self):
        with pytest.raises(InvalidOptionError):
            ColorScheme.coerce("sepia")

    def test_is_dark(self):
        assert ColorScheme.DARK.is_dark
        assert not ColorScheme.LIGHT.is_dark


class TestColorPair:
    def test_values_are_normalized(self):
        pair = ColorPair("#FFF", "000000")
        assert pair.light == "#ffffff"
        assert pair.dark == "#000000"

    def test_of_uses_one_color_for_both(self):
        pair = ColorPair.of("#123456")
        assert pair.light == pair.dark == "#123456"

    def test_for_scheme(self):
        pair = ColorPair("#111111", "#eeeeee")
        assert pair.for_scheme(ColorScheme.LIGHT) == "#111111"
        assert pair.for_scheme("dark") == "#eeeeee"

    @pytest.mark.parametrize(
        "value",
        [
            ("#111111", "#eeeeee"),
            ["#111111", "#eeeeee"],
            {"light": "#111111", "dark": "#eeeeee"},
            ColorPair("#111111", "#eeeeee"),
        ],
    )
    def test_coerce_forms(self, value):
        assert ColorPair.coerce(value) == ColorPair("#111111", "#eeeeee")

    def test_coerce_mapping_requires_both_keys(self):
        with pytest.raises(InvalidColorError):
            ColorPair.coerce({"light": "#111111"})

    def test_to_dict(self):
        assert ColorPair("#111111", "#eeeeee").to_dict() == {"light": "#111111", "dark": "#eeeeee"}
