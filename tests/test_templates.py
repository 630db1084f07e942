"""Tests for generation.templates and generation.citations."""

import pytest

from conftest import make_chunk
from generation.citations import build_citations, unique_source_urls
from generation.templates import (
    ANSWER_PREFIX,
    NO_INFO_ANSWER,
    classify_question,
    extract_snippet,
    synthesize_answer,
)
from retrieval.models import RetrievalHit


def _hit(content: str, relevance: float = 1.5, index: int = 0, title: str = "React Docs",
         url: str = "https://react.dev") -> RetrievalHit:
    chunk = make_chunk(content, content_id="react", index=index, title=title, url=url)
    return RetrievalHit(chunk=chunk, relevance=relevance)


class TestClassifyQuestion:
    @pytest.mark.parametrize("question", ["What is React?", "How do hooks work", "why use JSX"])
    def test_explain(self, question):
        assert classify_question(question) == "explain"

    @pytest.mark.parametrize("question", ["When was React released?", "Where is the state kept"])
    def test_locate(self, question):
        assert classify_question(question) == "locate"

    @pytest.mark.parametrize("question, kind", [
        ("What's React?", "explain"),
        ("How's state managed in React?", "explain"),
        ("Why's JSX compiled?", "explain"),
        ("Where's the state kept?", "locate"),
        ("When's the next release?", "locate"),
    ])
    def test_contractions(self, question, kind):
        assert classify_question(question) == kind

    def test_general(self):
        assert classify_question("Tell me about React") == "general"

    def test_whole_words_only(self):
        assert classify_question("Show somewhat related pages") == "general"


class TestExtractSnippet:
    CONTENT = (
        "Welcome to the documentation pages. "
        "React components are reusable building blocks for interfaces. "
        "Hooks let components keep state."
    )

    def test_first_matching_sentence(self):
        snippet = extract_snippet("What are React components?", self.CONTENT)
        assert snippet == "React components are reusable building blocks for interfaces"

    def test_needs_two_matches(self):
        assert extract_snippet("Which interfaces matter most?", "Interfaces are nice to have here") is None

    def test_single_significant_word(self):
        snippet = extract_snippet("Why use hooks?", self.CONTENT)
        assert snippet == "Hooks let components keep state"

    def test_truncated_with_ellipsis(self):
        sentence = "React components " + "x" * 300
        snippet = extract_snippet("react components", sentence, max_chars=150)

        assert snippet.endswith("...")
        assert len(snippet) == 153

    def test_no_significant_words_takes_first_sentence(self):
        assert extract_snippet("Is it?", self.CONTENT) == "Welcome to the documentation pages"

    def test_no_match(self):
        assert extract_snippet("Explain Python generators", self.CONTENT) is None


class TestSynthesizeAnswer:
    def test_no_hits(self):
        assert synthesize_answer("What is React?", []) == NO_INFO_ANSWER

    def test_explanatory(self):
        hit = _hit("React is a JavaScript library for building user interfaces.", index=2)
        answer = synthesize_answer("What is a JavaScript library?", [hit])

        assert answer.startswith(ANSWER_PREFIX)
        assert '"React Docs" (chunk 3)' in answer
        assert "Here's what I found: \"React is a JavaScript library for building user interfaces\"" in answer
        assert answer.endswith("You can find more details at the source URL.")

    def test_explanatory_without_snippet(self):
        answer = synthesize_answer("What is Vue?", [_hit("Nothing relevant in this sentence at all.")])
        assert "Here's what I found" not in answer

    def test_locational(self):
        answer = synthesize_answer("Where are docs hosted?", [_hit("React docs live on react.dev today.")])

        assert "appears to be covered in the content from \"React Docs\"" in answer
        assert "Please refer to the source" in answer

    def test_general_with_others(self):
        hits = [_hit("First chunk text here.", relevance=2.5), _hit("Second.", index=1), _hit("Third.", index=2)]
        answer = synthesize_answer("Tell me about React", hits)

        assert "relevance score of 2.50" in answer
        assert "I also found 2 other relevant chunks." in answer

    def test_general_single(self):
        answer = synthesize_answer("React overview", [_hit("Some text.")])
        assert "other relevant chunks" not in answer


class TestCitations:
    def test_fields(self):
        hit = _hit("React is a JavaScript library.", relevance=1.23456, index=4)
        citation = build_citations([hit])[0]

        assert citation.url == "https://react.dev"
        assert citation.title == "React Docs"
        assert citation.relevance == 1.2346
        assert citation.chunk_index == 4
        assert citation.chunk_id == "react_chunk_0004"
        assert citation.content_id == "react"
        assert citation.content_snippet == "React is a JavaScript library."

    def test_snippet_truncated(self):
        citation = build_citations([_hit("y" * 500)], snippet_chars=200)[0]
        assert citation.content_snippet == "y" * 200 + "..."

    def test_order_preserved(self):
        hits = [_hit("a", index=1), _hit("b", index=0)]
        assert [c.chunk_index for c in build_citations(hits)] == [1, 0]

    def test_unique_urls(self):
        hits = [
            _hit("a", url="https://react.dev"),
            _hit("b", index=1, url="https://python.org"),
            _hit("c", index=2, url="https://react.dev"),
        ]
        assert unique_source_urls(build_citations(hits)) == ["https://react.dev", "https://python.org"]
