from dataclasses import dataclass
import os

PROVIDERS = ("template", "ollama", "openai")


@dataclass
class GenerationConfig:
    provider: str = "template"
    ollama_base_url: str = "http://localhost:11434"
    ollama_model: str = "llama3.1:latest"
    openai_model: str = "gpt-4o-mini"
    openai_api_key: str = ""
    max_context_tokens: int = 2048
    output_tokens: int = 512
    temperature: float = 0.2
    timeout: float = 60.0
    max_retries: int = 1
    retry_delay: float = 0.5
    snippet_chars: int = 150
    source_snippet_chars: int = 200

    def __post_init__(self) -> None:
        if self.provider not in PROVIDERS:
            raise ValueError(f"Unsupported generation provider: {self.provider}")
        if self.max_retries < 0:
            raise ValueError("max_retries must be >= 0")

    @classmethod
    def from_env(cls) -> "GenerationConfig":
        def _int(name: str, default: int) -> int:
            value = os.environ.get(name)
            return int(value) if value else default

        def _float(name: str, default: float) -> float:
            value = os.environ.get(name)
            return float(value) if value else default

        return cls(
            provider=os.environ.get("GENERATION_PROVIDER", cls.provider),
            ollama_base_url=os.environ.get("OLLAMA_BASE_URL", cls.ollama_base_url),
            ollama_model=os.environ.get("OLLAMA_MODEL", cls.ollama_model),
            openai_model=os.environ.get("GENERATION_OPENAI_MODEL", cls.openai_model),
            openai_api_key=os.environ.get("OPENAI_API_KEY", cls.openai_api_key),
            max_context_tokens=_int("GENERATION_MAX_CONTEXT_TOKENS", cls.max_context_tokens),
            output_tokens=_int("GENERATION_OUTPUT_TOKENS", cls.output_tokens),
            temperature=_float("GENERATION_TEMPERATURE", cls.temperature),
            timeout=_float("GENERATION_TIMEOUT", cls.timeout),
            max_retries=_int("GENERATION_MAX_RETRIES", cls.max_retries),
            retry_delay=_float("GENERATION_RETRY_DELAY", cls.retry_delay),
        )
