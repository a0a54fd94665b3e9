"""Tests for the end-to-end conversion pipeline."""

import io
import sys

import pytest
from fswtex.core.errors import EncodingError, UsageError
from fswtex.engine.config import ConverterConfig
from fswtex.engine.pipeline import convert, convert_bytes, convert_text, run_conversion

SIGN = "M500x500S10005490x520"
DOCUMENT = f"""\\section{{Greetings}}
Hello {SIGN} and \\textbf{{Bob}}.
Punctuation: S38700463x496
"""


class TestPassthrough:
    @pytest.mark.parametrize("text", [
        "",
        "plain text\n",
        "\\documentclass{article}\r\n\\begin{document}\r\nMary and Bob\r\n",
        "Ünïcödé \U0001D803 \U00040006 and AS100 and M500x",
    ])
    def test_text_unchanged(self, text):
        assert convert_text(text) == text

    @pytest.mark.parametrize("codec,bom", [
        ("utf-16-le", b"\xff\xfe"),
        ("utf-16-be", b"\xfe\xff"),
        ("utf-32-le", b"\xff\xfe\x00\x00"),
        ("utf-32-be", b"\x00\x00\xfe\xff"),
    ])
    def test_any_encoding(self, codec, bom):
        text = "Mary had a little lamb \U0001D803"
        assert convert_bytes(bom + text.encode(codec)) == text


class TestConversion:
    def test_sign_replaced(self):
        out = convert_text(f"see {SIGN} here")
        assert out.startswith("see {")
        assert out.endswith("\\\\ here")
        assert SIGN not in out
        assert r"\begin{tikzpicture}" in out

    def test_idempotent(self):
        assert convert_text(DOCUMENT) == convert_text(DOCUMENT)

    def test_encodings_agree(self):
        expected = convert_text(DOCUMENT)
        assert convert_bytes(b"\xfe\xff" + DOCUMENT.encode("utf-16-be")) == expected

    def test_adjacent_signs(self):
        out = convert_text(SIGN + SIGN)
        assert out.count(r"\begin{tikzpicture}") == 2

    def test_punctuation_drawn_as_middle_lane(self):
        assert convert_text("S38700463x496") == convert_text("M500x500S38700463x496")

    def test_config_used(self):
        out = convert_text(SIGN, ConverterConfig(mirror=False, rotation=0))
        assert "rotate" not in out
        assert "yscale" not in out


class TestFraming:
    def test_frame(self):
        out = convert_text(SIGN, frame=True)
        assert out.startswith("% In order for this conversion to work")
        assert "% Converted 1 sign(s)." in out
        assert out.endswith("% \\end{document}\n")

    def test_stats(self):
        out = io.StringIO()
        stats = convert(io.BytesIO(DOCUMENT.encode("utf-8")), out)
        assert stats.encoding == "utf8"
        assert stats.signs == 2
        assert stats.punctuation == 1
        assert stats.codepoints == len(DOCUMENT)
        assert stats.bytes_read == len(DOCUMENT.encode("utf-8"))

    def test_log_receives_progress(self):
        lines = []
        stats = convert(io.BytesIO(b"M500x500S1q"), io.StringIO(), log=lines.append)
        assert stats.flushes == 1
        assert any("flushed" in line for line in lines)
        assert any("Signs: 0" in line for line in lines)

    def test_encoding_error_propagates(self):
        with pytest.raises(EncodingError):
            convert(io.BytesIO(b"ok \xff"), io.StringIO())


class TestRunConversion:
    def test_file_to_file(self, write_file, tmp_path):
        source = write_file("in.tex", DOCUMENT)
        target = tmp_path / "out.tex"
        stats = run_conversion(str(source), str(target), ConverterConfig(), command_line="fswtex in.tex out.tex")
        text = target.read_text(encoding="utf-8")
        assert text.startswith("% This file was generated by:\n%    fswtex in.tex out.tex\n")
        assert stats.signs == 2

    def test_line_endings_kept(self, write_file, tmp_path):
        source = write_file("in.tex", "a\r\nb\r\n")
        target = tmp_path / "out.tex"
        run_conversion(str(source), str(target))
        assert b"a\r\nb\r\n" in target.read_bytes()

    def test_log_file(self, write_file, tmp_path):
        source = write_file("in.tex", DOCUMENT)
        log = tmp_path / "run.log"
        run_conversion(str(source), str(tmp_path / "out.tex"), log_file=str(log))
        assert "Signs: 2" in log.read_text(encoding="utf-8")

    def test_verbose_goes_to_stderr(self, write_file, tmp_path, capsys):
        source = write_file("in.tex", DOCUMENT)
        run_conversion(str(source), str(tmp_path / "out.tex"), verbose=True)
        captured = capsys.readouterr()
        assert captured.out == ""
        assert "Encoding: utf8" in captured.err

    def test_stdout(self, write_file, capsys):
        source = write_file("in.tex", SIGN)
        run_conversion(str(source))
        assert r"\begin{tikzpicture}" in capsys.readouterr().out

    def test_stdout_is_utf8_under_any_locale(self, write_file, monkeypatch):
        raw = io.BytesIO()
        monkeypatch.setattr(sys, "stdout", io.TextIOWrapper(raw, encoding="ascii"))
        source = write_file("in.tex", "R\u00e9sum\u00e9 \U0001D803 " + SIGN + " \r\n")
        run_conversion(str(source))
        data = raw.getvalue()
        assert "R\u00e9sum\u00e9 \U0001D803 ".encode("utf-8") in data
        assert b" \r\n" in data
        assert b"\\begin{tikzpicture}" in data

    def test_missing_input(self, tmp_path):
        with pytest.raises(UsageError):
            run_conversion(str(tmp_path / "missing.tex"), str(tmp_path / "out.tex"))
