"""Tests for chunking.token_counter."""

from chunking.token_counter import count_tokens, truncate_to_tokens


class TestCountTokens:
    def test_empty(self):
        assert count_tokens("") == 0

    def test_counts_words(self):
        assert count_tokens("hello world") == 2

    def test_longer_text_has_more_tokens(self):
        short = "React is a library."
        assert count_tokens(short * 10) > count_tokens(short)


class TestTruncate:
    def test_fits(self):
        text = "React is a JavaScript library."
        assert truncate_to_tokens(text, 100) == text

    def test_cuts_to_budget(self):
        text = "one two three four five six seven eight"
        truncated = truncate_to_tokens(text, 3)

        assert count_tokens(truncated) == 3
        assert text.startswith(truncated)

    def test_zero_budget(self):
        assert truncate_to_tokens("anything", 0) == ""

    def test_empty_text(self):
        assert truncate_to_tokens("", 10) == ""
