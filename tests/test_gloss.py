"""Tests for the glossary helper tools."""

import pytest
from fswtex.core.errors import GlossFormatError
from fswtex.gloss.extract import (
    extract_glossary,
    format_pairs,
    iter_glossary_pairs,
    parse_gloss,
)
from fswtex.gloss.sort import merge_glossaries, read_pairs, to_horizontal

CHAPTER = r"""\chapter{Lesson 1}
Some text M500x500S10005490x520.
\begin{glossary}
\textbf{house / home}\\
M518x529S14c20481x471

\textbf{Cat}\\
M500x500S10005490x520
\end{glossary}
More text.
\begin{glossary}
\textbf{dog}\\
M510x510S10000490x490
\end{glossary}
"""


class TestParseGloss:
    def test_single(self):
        assert parse_gloss(r"\textbf{cat}\\") == ["cat"]

    def test_alternatives(self):
        assert parse_gloss(r"\textbf{house / home / hut}\\") == ["house", "home", "hut"]

    def test_not_a_gloss(self):
        with pytest.raises(GlossFormatError):
            parse_gloss("cat")
        with pytest.raises(GlossFormatError):
            parse_gloss(r"\textbf{cat}")


class TestExtract:
    def test_pairs(self):
        assert list(iter_glossary_pairs(CHAPTER)) == [
            ("house", "M518x529S14c20481x471"),
            ("home", "M518x529S14c20481x471"),
            ("Cat", "M500x500S10005490x520"),
            ("dog", "M510x510S10000490x490"),
        ]

    def test_no_glossary(self):
        assert list(iter_glossary_pairs("nothing here")) == []

    def test_unclosed_glossary(self):
        text = "\\begin{glossary}\n\\textbf{cat}\\\\\nM500x500S10005490x520\n"
        assert list(iter_glossary_pairs(text)) == [("cat", "M500x500S10005490x520")]

    def test_single_lines_skipped(self):
        text = "\\begin{glossary}\n\\columnbreak\n\n\\textbf{cat}\\\\\nM1\n\\end{glossary}"
        assert list(iter_glossary_pairs(text)) == [("cat", "M1")]

    def test_malformed_gloss(self):
        text = "\\begin{glossary}\ncat\nM500x500S10005490x520\n\\end{glossary}"
        with pytest.raises(GlossFormatError):
            list(iter_glossary_pairs(text))

    def test_entries_must_be_separated(self):
        text = "\\begin{glossary}\n\\textbf{a}\\\\\nM1\n\\textbf{b}\\\\\nM2\n\\end{glossary}"
        with pytest.raises(GlossFormatError):
            list(iter_glossary_pairs(text))

    def test_from_file(self, write_file):
        path = write_file("lesson.tex", CHAPTER)
        assert len(extract_glossary(path)) == 4

    def test_format(self):
        assert format_pairs([("cat", "M1"), ("dog", "M2")]) == "cat\nM1\ndog\nM2\n"


class TestSort:
    def test_read_pairs_line_endings(self):
        text = "cat\nM1\r\ndog\n\rM2\rowl\nM3\n"
        assert read_pairs(text) == [("cat", "M1"), ("dog", "M2"), ("owl", "M3")]

    def test_read_pairs_odd(self):
        assert read_pairs("cat") == [("cat", "")]

    def test_to_horizontal(self):
        assert to_horizontal("M500x500S10005490x520") == "B500x500S10005490x520"
        assert to_horizontal("AS10001M500x500S10005490x520") == "AS10001B500x500S10005490x520"

    def test_to_horizontal_codepoint(self):
        assert to_horizontal("\U0001D803\U0001D906") == "\U0001D801\U0001D906"

    def test_to_horizontal_other_lanes(self):
        assert to_horizontal("L500x500S10005490x520") == "L500x500S10005490x520"

    def test_merge(self, write_file):
        a = write_file("a.txt", "dog\nM1\nCat\nM2\n")
        b = write_file("b.txt", "cat\r\nM3\r\napple\r\nM4\r\n")
        assert merge_glossaries([a, b]) == [
            ("apple", "B4"),
            ("cat", "B3"),
            ("dog", "B1"),
        ]

    def test_merge_then_format(self, write_file):
        path = write_file("a.txt", format_pairs(iter_glossary_pairs(CHAPTER)))
        out = format_pairs(merge_glossaries([path]))
        assert out.splitlines()[0::2] == ["Cat", "dog", "home", "house"]
