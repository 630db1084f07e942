"""Tests for chunking.sentence_splitter."""

from chunking.sentence_splitter import split_sentences


class TestSplitSentences:
    def test_empty(self):
        assert split_sentences("") == []
        assert split_sentences("   ") == []

    def test_splits_on_terminators(self):
        text = "React is a library for UIs. It builds on small components! Does it scale well enough?"
        assert split_sentences(text) == [
            "React is a library for UIs",
            "It builds on small components",
            "Does it scale well enough",
        ]

    def test_terminator_runs(self):
        text = "Wait for the answer to arrive... Then continue with the next step!!"
        assert split_sentences(text) == [
            "Wait for the answer to arrive",
            "Then continue with the next step",
        ]

    def test_short_fragments_dropped(self):
        text = "Intro. This sentence is definitely long enough. Ok."
        assert split_sentences(text) == ["This sentence is definitely long enough"]

    def test_min_chars_threshold(self):
        twenty = "a" * 20
        twenty_one = "b" * 21
        assert split_sentences(f"{twenty}. {twenty_one}.") == [twenty_one]
        assert split_sentences(f"{twenty}.", min_chars=5) == [twenty]

    def test_no_terminator(self):
        text = "A single run of text without any sentence punctuation"
        assert split_sentences(text) == [text]
