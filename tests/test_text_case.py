"""
Tests for the text-case converter.

All modes are deterministic except "Random case", which is checked only for
properties that hold for every possible outcome.
"""

from __future__ import annotations

import pytest

from calc_engine.text_case import convert_case, text_case_converter


def _convert(text, mode: str) -> str:
    return text_case_converter(text, mode).text_result


class TestSimpleCases:
    def test_lowercase(self):
        assert _convert("Hello WORLD", "lowercase") == "hello world"

    def test_uppercase(self):
        assert _convert("Hello world", "UPPERCASE") == "HELLO WORLD"

    @pytest.mark.parametrize("mode", ["upper", "Upper", "  UPPERCASE  "])
    def test_mode_aliases(self, mode):
        assert _convert("abc", mode) == "ABC"

    def test_numbers_are_converted_to_text(self):
        assert _convert(42, "lowercase") == "42"


class TestTitleCase:
    def test_basic(self):
        assert _convert("hello world", "Title Case") == "Hello World"

    def test_lowers_the_rest_of_each_word(self):
        assert _convert("hELLO wORLD", "title") == "Hello World"

    def test_preserves_line_breaks(self):
        assert _convert("hello world\nfoo bar", "Title Case") == "Hello World\nFoo Bar"


class TestSentenceCase:
    def test_capitalizes_after_each_sentence_end(self):
        assert _convert("HELLO. world.", "Sentence case") == "Hello. World."

    def test_question_and_exclamation(self):
        assert _convert("what? yes! ok.", "sentence") == "What? Yes! Ok."

    def test_without_sentence_punctuation(self):
        assert _convert("HELLO WORLD", "Sentence case") == "Hello world"

    def test_skips_leading_non_letters(self):
        assert _convert("one. 2 apples", "sentence") == "One. 2 Apples"


class TestAlternatingCase:
    def test_starts_lowercase(self):
        assert _convert("abc def", "Alternating case") == "aBc DeF"

    def test_non_letters_do_not_advance(self):
        assert _convert("a1b-c", "alternating") == "a1B-c"


class TestRandomCase:
    """Non-deterministic: only outcome-independent properties are asserted."""

    def test_same_letters_in_any_case(self):
        text = "The Quick Brown Fox"
        result = _convert(text, "Random case")
        assert result.lower() == text.lower()
        assert len(result) == len(text)

    def test_non_letters_untouched(self):
        result = _convert("1-2 3!", "random")
        assert result == "1-2 3!"


class TestEdgeCases:
    @pytest.mark.parametrize("text", ["", "   ", "\n\t", None])
    def test_empty_input(self, text):
        assert _convert(text, "UPPERCASE") == ""

    def test_input_is_stripped(self):
        assert _convert("  hi  ", "UPPERCASE") == "HI"

    def test_unknown_mode_returns_stripped_text(self):
        assert _convert("  Hi There ", "sarcastic") == "Hi There"

    def test_convert_case_does_not_strip(self):
        assert convert_case(" ab ", "upper") == " AB "
