"""
Content Extraction - URL to (title, text)

Strategies:
- HttpContentExtractor: fetch the page and strip it down to readable text
- MockContentExtractor: offline, topic-based stand-in content derived from
  the URL, so the pipeline stays usable without network access
- FallbackContentExtractor: primary extractor, then mock content on failure

Usage:
    from content_qa.extractor import build_extractor

    extractor = build_extractor(timeout=10.0, allow_mock=True)
    page = extractor.extract("https://react.dev/learn")
    print(page.title, len(page.text))
"""

import logging
import re
from typing import Optional, Protocol
from urllib import request
from urllib.error import HTTPError, URLError
from urllib.parse import urlparse

from bs4 import BeautifulSoup
from pydantic import BaseModel, Field

from .exceptions import FetchError

logger = logging.getLogger(__name__)

MIN_TEXT_CHARS = 100

# Removed together with their content
REMOVE_TAGS = ["title", "script", "style", "nav", "header", "footer", "aside", "noscript"]

USER_AGENT = "content-qa/1.0"


class ExtractedContent(BaseModel):
    """Readable text of one page."""
    url: str
    title: str
    text: str = Field(..., description="Cleaned page text")
    is_mock: bool = Field(False, description="True when the text is stand-in mock content")


class ContentExtractor(Protocol):
    def extract(self, url: str) -> ExtractedContent: ...


def html_to_text(html: str) -> str:
    """Strip markup, boilerplate blocks and entities; collapse whitespace."""
    soup = BeautifulSoup(html, "html.parser")
    for tag in soup(REMOVE_TAGS):
        tag.decompose()
    text = soup.get_text(separator=" ")
    return re.sub(r"\s+", " ", text).strip()


def html_title(html: str) -> Optional[str]:
    soup = BeautifulSoup(html, "html.parser")
    if soup.title and soup.title.string:
        title = soup.title.string.strip()
        return title or None
    return None


def title_from_url(url: str) -> str:
    """A readable title guessed from the host name or the last path segment."""
    parsed = urlparse(url)
    hostname = (parsed.hostname or "").lower()
    if not hostname:
        return "Web Content"

    known_hosts = [
        ("wikipedia", "Wikipedia Article"),
        ("react", "React Documentation"),
        ("js", "React Documentation"),
        ("python", "Python Tutorial"),
        ("ai", "AI & Machine Learning Guide"),
        ("intelligence", "AI & Machine Learning Guide"),
        ("github", "GitHub Repository"),
        ("stackoverflow", "Stack Overflow Discussion"),
        ("medium", "Medium Article"),
        ("dev.to", "Dev.to Blog Post"),
    ]
    for needle, title in known_hosts:
        if needle in hostname:
            return title

    parts = [part for part in parsed.path.split("/") if part]
    if parts:
        last = re.sub(r"\.[^/.]+$", "", parts[-1])
        last = re.sub(r"[-_]", " ", last).strip()
        if last:
            return last[0].upper() + last[1:]

    name = hostname.removeprefix("www.")
    for suffix in (".com", ".org", ".net"):
        name = name.replace(suffix, "")
    return name


class HttpContentExtractor:
    """Fetch a page over HTTP(S) and extract its title and text."""

    def __init__(self, timeout: float = 10.0, min_chars: int = MIN_TEXT_CHARS):
        self.timeout = timeout
        self.min_chars = min_chars

    def fetch(self, url: str) -> str:
        try:
            req = request.Request(url, headers={"User-Agent": USER_AGENT})
            with request.urlopen(req, timeout=self.timeout) as resp:
                charset = resp.headers.get_content_charset() or "utf-8"
                raw = resp.read()
        except HTTPError as exc:
            raise FetchError(url, f"HTTP {exc.code}") from exc
        except URLError as exc:
            raise FetchError(url, "Cannot reach host", details=str(exc.reason)) from exc
        except (OSError, ValueError) as exc:
            raise FetchError(url, details=str(exc)) from exc

        try:
            return raw.decode(charset, errors="replace")
        except LookupError:
            logger.debug("Unknown charset %r for %s, decoding as utf-8", charset, url)
            return raw.decode("utf-8", errors="replace")

    def extract(self, url: str) -> ExtractedContent:
        html = self.fetch(url)
        text = html_to_text(html)
        if len(text) <= self.min_chars:
            raise FetchError(url, f"Page yielded only {len(text)} characters of text")
        title = html_title(html) or title_from_url(url)
        return ExtractedContent(url=url, title=title, text=text)


class MockContentExtractor:
    """
    Offline stand-in content chosen by keywords in the URL.

    Always succeeds; the returned content is marked is_mock.
    """

    TOPICS = [
        (
            ("wikipedia",),
            "Wikipedia Article",
            "This is a comprehensive Wikipedia article covering various aspects of the topic. "
            "The content includes detailed explanations, historical context, and relevant examples. "
            "Wikipedia articles are collaboratively edited and provide reliable information from "
            "multiple sources. The article contains sections covering different aspects, references "
            "to external sources, and links to related topics for further exploration.",
        ),
        (
            ("react", "js"),
            "React Documentation & Tutorials",
            "React is a powerful JavaScript library for building user interfaces. This documentation "
            "covers React fundamentals, component lifecycle, state management, and advanced patterns. "
            "It includes practical examples, code snippets, and best practices for building scalable "
            "applications. The content explains React hooks, context API, and modern React patterns "
            "for optimal performance and maintainability.",
        ),
        (
            ("python",),
            "Python Programming Guide",
            "Python is a versatile high-level programming language known for its simplicity and "
            "readability. This guide covers Python syntax, data structures, object-oriented "
            "programming, and popular frameworks. It includes practical examples, coding exercises, "
            "and real-world applications in web development, data science, machine learning, and "
            "automation. The content explains Python best practices and design patterns.",
        ),
        (
            ("ai", "intelligence"),
            "Artificial Intelligence & Machine Learning",
            "Artificial Intelligence (AI) is a branch of computer science that aims to create "
            "intelligent machines capable of performing tasks that typically require human "
            "intelligence. AI encompasses machine learning, neural networks, deep learning, natural "
            "language processing, and computer vision. Machine learning is a subset of AI that "
            "enables computers to learn and improve from experience without being explicitly "
            "programmed. Neural networks are computational models inspired by biological neural "
            "networks in the human brain. Deep learning uses multiple layers of neural networks to "
            "analyze various factors of data. AI applications include virtual assistants, autonomous "
            "vehicles, medical diagnosis, financial analysis, and creative content generation. The "
            "field continues to evolve with breakthroughs in large language models, reinforcement "
            "learning, and explainable AI.",
        ),
        (
            ("web", "frontend"),
            "Web Development & Frontend Technologies",
            "Modern web development involves HTML5, CSS3, JavaScript, and various frameworks. This "
            "content covers responsive design, progressive web apps, modern JavaScript features, and "
            "frontend build tools. It includes tutorials on creating interactive user interfaces, "
            "optimizing performance, and implementing modern web standards. The content explains "
            "best practices for accessibility, SEO, and cross-browser compatibility.",
        ),
        (
            ("programming", "coding"),
            "Programming & Software Development",
            "Software development encompasses various programming languages, design patterns, and "
            "development methodologies. This resource covers software architecture, clean code "
            "principles, testing strategies, and deployment practices. It includes tutorials on "
            "version control, debugging techniques, and collaborative development workflows. The "
            "content explains modern development practices and tools used in professional software "
            "engineering.",
        ),
    ]

    GENERIC_TEXT = (
        "This is a comprehensive resource covering various aspects of the topic. The content "
        "includes detailed explanations, practical examples, and relevant information suitable for "
        "learning and reference. The material is regularly updated and maintained to provide "
        "accurate and current information. It covers both theoretical concepts and practical "
        "applications, making it useful for beginners and advanced users alike."
    )

    def extract(self, url: str) -> ExtractedContent:
        lowered = url.lower()
        for keywords, title, text in self.TOPICS:
            if any(keyword in lowered for keyword in keywords):
                return ExtractedContent(url=url, title=title, text=text, is_mock=True)
        return ExtractedContent(url=url, title=title_from_url(url), text=self.GENERIC_TEXT, is_mock=True)


class FallbackContentExtractor:
    """Primary extractor first; mock content when it fails and mock is allowed."""

    def __init__(
        self,
        primary: ContentExtractor,
        fallback: Optional[ContentExtractor] = None,
        allow_mock: bool = True,
    ):
        self.primary = primary
        self.fallback = fallback or MockContentExtractor()
        self.allow_mock = allow_mock

    def extract(self, url: str) -> ExtractedContent:
        try:
            return self.primary.extract(url)
        except FetchError as e:
            if not self.allow_mock:
                raise
            logger.warning("Using mock content for %s: %s", url, e)
            return self.fallback.extract(url)


def build_extractor(timeout: float = 10.0, allow_mock: bool = True) -> FallbackContentExtractor:
    return FallbackContentExtractor(
        primary=HttpContentExtractor(timeout=timeout),
        fallback=MockContentExtractor(),
        allow_mock=allow_mock,
    )
