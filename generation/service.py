from __future__ import annotations

import logging
import re
import time
from typing import Optional, Protocol

from retrieval.models import RetrievalHit

from .citations import build_citations
from .config import GenerationConfig
from .context_builder import build_context
from .json_utils import parse_json_object
from .models import QAResponse
from .ollama_client import OllamaChatClient
from .openai_client import OpenAIChatClient
from .prompts import SYSTEM_PROMPT, USER_PROMPT_TEMPLATE
from .templates import NO_INFO_ANSWER, synthesize_answer

logger = logging.getLogger(__name__)


class ChatClient(Protocol):
    name: str

    def complete(self, system_prompt: str, user_prompt: str) -> str: ...


def build_chat_client(config: GenerationConfig) -> Optional[ChatClient]:
    if config.provider == "ollama":
        return OllamaChatClient(
            base_url=config.ollama_base_url,
            model=config.ollama_model,
            temperature=config.temperature,
            output_tokens=config.output_tokens,
            timeout=config.timeout,
        )
    if config.provider == "openai":
        return OpenAIChatClient(
            model=config.openai_model,
            api_key=config.openai_api_key or None,
            temperature=config.temperature,
            output_tokens=config.output_tokens,
            timeout=config.timeout,
        )
    return None


def _clean_answer(text: str) -> str:
    text = re.sub(r"[ \t]+", " ", text or "")
    return re.sub(r"\n{3,}", "\n\n", text).strip()


class Answerer:
    """
    Turns a question and its retrieved hits into an answer with sources.

    With a chat client configured the answer is generated from a token
    bounded context; on provider failure or an empty answer the template
    synthesizer is used instead, so answer() never fails on provider errors.
    """

    def __init__(
        self,
        config: GenerationConfig | None = None,
        chat_client: Optional[ChatClient] = None,
    ):
        self.config = config or GenerationConfig()
        self.chat_client = chat_client if chat_client is not None else build_chat_client(self.config)

    def answer(self, question: str, hits: list[RetrievalHit]) -> QAResponse:
        if not hits:
            return QAResponse(answer=NO_INFO_ANSWER, sources=[], total_chunks_considered=0, mode="no_results")

        sources = build_citations(hits, self.config.source_snippet_chars)

        if self.chat_client is not None:
            generated = self._generate(question, hits)
            if generated:
                return QAResponse(
                    answer=generated,
                    sources=sources,
                    total_chunks_considered=len(hits),
                    mode="llm",
                )
            logger.warning("Falling back to template answer for %r", question)

        return QAResponse(
            answer=synthesize_answer(question, hits, self.config.snippet_chars),
            sources=sources,
            total_chunks_considered=len(hits),
            mode="template",
        )

    def _generate(self, question: str, hits: list[RetrievalHit]) -> Optional[str]:
        context = build_context(
            question=question,
            hits=hits,
            max_context_tokens=self.config.max_context_tokens,
            system_prompt=SYSTEM_PROMPT,
            user_template=USER_PROMPT_TEMPLATE,
        )
        user_prompt = USER_PROMPT_TEMPLATE.format(question=question, context=context.context_text)

        attempts = self.config.max_retries + 1
        delay = self.config.retry_delay
        for attempt in range(1, attempts + 1):
            try:
                logger.debug("LLM call attempt %d/%d", attempt, attempts)
                content = self.chat_client.complete(SYSTEM_PROMPT, user_prompt)
            except (RuntimeError, OSError, ValueError) as e:
                logger.warning(
                    "%s generation failed (attempt %d/%d): %s",
                    self.chat_client.name,
                    attempt,
                    attempts,
                    e,
                )
                if attempt < attempts and delay > 0:
                    time.sleep(delay)
                    delay *= 2
                continue

            payload = parse_json_object(content)
            answer = _clean_answer(str(payload.get("answer") or ""))
            if not answer:
                logger.info(
                    "%s returned no answer: %s",
                    self.chat_client.name,
                    payload.get("missing_info") or "unparseable response",
                )
            return answer or None

        return None
