"""Tests for retrieval.lexical - keyword relevance scoring."""

import pytest

from conftest import make_chunk
from retrieval.lexical import lexical_score, lexical_search, query_words

REACT_TEXT = "React is a JavaScript library. It uses components."


class TestQueryWords:
    def test_short_words_dropped(self):
        assert query_words("Is it a big deal") == ["big", "deal"]

    def test_punctuation_stripped(self):
        assert query_words("What is React?") == ["what", "react"]

    def test_lowercased(self):
        assert query_words("PYTHON Tutorial") == ["python", "tutorial"]


class TestLexicalScore:
    def test_empty_query(self):
        assert lexical_score("", "React Docs", REACT_TEXT) == 0.0
        assert lexical_score("   ", "React Docs", REACT_TEXT) == 0.0

    def test_title_content_and_word(self):
        # title 1.0 + content 0.8 + word 0.3
        assert lexical_score("React", "React Docs", REACT_TEXT) == pytest.approx(2.1)

    def test_case_insensitive(self):
        assert lexical_score("REACT", "react docs", REACT_TEXT.upper()) == pytest.approx(2.1)

    def test_no_match(self):
        assert lexical_score("Python", "React Docs", REACT_TEXT) == 0.0

    def test_words_only(self):
        # "what" and "react" are words; the full query never matches
        assert lexical_score("What is React?", "Docs", REACT_TEXT) == pytest.approx(0.3)

    def test_phrases(self):
        content = "Machine learning models need data."
        score = lexical_score("machine learning models", "Guide", content)
        # content 0.8 + 2 phrases 1.2 + 3 words 0.9 + AI bonus 0.4
        assert score == pytest.approx(3.3)

    def test_synonyms(self):
        assert lexical_score("data", "Notes", "Some information about stuff") == pytest.approx(0.2)

    def test_multiple_synonyms_add_up(self):
        content = "a computer system runs the algorithm"
        # synonyms of "machine": computer, system, algorithm
        assert lexical_score("machine", "Notes", content) == pytest.approx(0.6)

    def test_ai_bonus(self):
        assert lexical_score("ai", "Notes", "Neural network research") == pytest.approx(0.4)

    def test_ai_bonus_requires_both_sides(self):
        assert lexical_score("ai", "Notes", "Cooking with garlic") == 0.0

    def test_ai_terms_match_whole_words(self):
        assert lexical_score("said", "Notes", "the data was wrong") == 0.0


class TestLexicalSearch:
    def test_excludes_zero_scores(self):
        react = make_chunk(REACT_TEXT, content_id="react", title="React Docs")
        python = make_chunk(
            "Python is a programming language with clear syntax.",
            content_id="python",
            title="Python Guide",
        )

        hits = lexical_search("Python", [react, python])

        assert [hit.chunk.content_id for hit in hits] == ["python"]
        assert hits[0].source == "lexical"
        assert hits[0].relevance == pytest.approx(2.1)

    def test_no_chunks(self):
        assert lexical_search("React", []) == []
