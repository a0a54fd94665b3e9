"""Tests for symbol key and coordinate arithmetic."""

import pytest
from fswtex.core.symbol_key import (
    MAX_SYMBOL_ID,
    coordinate_from_codepoint,
    coordinate_from_digits,
    fill_glyph,
    line_glyph,
    symbol_id_from_codepoint,
    symbol_id_from_key,
    symbol_key_from_id,
)


class TestSymbolId:
    def test_first_symbol(self):
        assert symbol_id_from_key("S10000") == 0

    def test_rotation_and_fill(self):
        assert symbol_id_from_key("S10005") == 5
        assert symbol_id_from_key("S1001f") == 31
        assert symbol_id_from_key("S10050") == 80

    def test_next_base(self):
        assert symbol_id_from_key("S10100") == 96

    def test_punctuation(self):
        assert symbol_id_from_key("S38700") == 62112

    def test_key_from_id(self):
        assert symbol_key_from_id(0) == "S10000"
        assert symbol_key_from_id(5) == "S10005"
        assert symbol_key_from_id(96) == "S10100"
        assert symbol_key_from_id(62112) == "S38700"

    def test_codepoint_form_agrees(self):
        for key in ("S10000", "S14c20", "S2ff5f", "S38700"):
            sid = symbol_id_from_key(key)
            assert symbol_id_from_codepoint(0x40001 + sid) == sid

    def test_codepoint(self):
        assert symbol_id_from_codepoint(0x40001) == 0
        assert symbol_id_from_codepoint(0x4F2A1) == 62112

    @pytest.mark.parametrize("key", ["S1000", "X10000", "S0ff00", "S38c00", "S10060", "S1000g", "S1A000"])
    def test_bad_keys(self, key):
        with pytest.raises(ValueError):
            symbol_id_from_key(key)

    def test_bad_ids(self):
        with pytest.raises(ValueError):
            symbol_key_from_id(-1)
        with pytest.raises(ValueError):
            symbol_key_from_id(MAX_SYMBOL_ID + 1)
        with pytest.raises(ValueError):
            symbol_id_from_codepoint(0x40000)


class TestCoordinates:
    def test_digits(self):
        assert coordinate_from_digits("500") == 500
        assert coordinate_from_digits("250") == 250
        assert coordinate_from_digits("749") == 749

    def test_codepoint(self):
        assert coordinate_from_codepoint(0x1D80C) == 250
        assert coordinate_from_codepoint(0x1D906) == 500

    def test_bad_digits(self):
        with pytest.raises(ValueError):
            coordinate_from_digits("50")
        with pytest.raises(ValueError):
            coordinate_from_digits("5a0")

    def test_bad_codepoint(self):
        with pytest.raises(ValueError):
            coordinate_from_codepoint(0x1D80B)
        with pytest.raises(ValueError):
            coordinate_from_codepoint(0x1DA00)


class TestGlyphs:
    def test_fill_and_line(self):
        assert fill_glyph(0) == 0x100001
        assert line_glyph(0) == 0xF0001
        assert fill_glyph(5) == 1048582
        assert line_glyph(5) == 983046
