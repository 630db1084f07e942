"""
Generation component for the content Q&A engine.

Answers questions from retrieved chunks, either with a template synthesizer
or with an LLM (Ollama or OpenAI) that falls back to the template.
"""

__version__ = "1.0.0"

from .config import GenerationConfig
from .models import AskRequest, QAResponse, SourceCitation
from .service import Answerer, build_chat_client
from .templates import NO_INFO_ANSWER, classify_question, extract_snippet, synthesize_answer

__all__ = [
    "__version__",
    "GenerationConfig",
    "AskRequest",
    "QAResponse",
    "SourceCitation",
    "Answerer",
    "build_chat_client",
    "NO_INFO_ANSWER",
    "classify_question",
    "extract_snippet",
    "synthesize_answer",
]
