from dataclasses import dataclass

FUSION_MODES = ("prefer_lexical", "weighted")


@dataclass
class RetrievalConfig:
    default_limit: int = 5
    answer_limit: int = 3
    fusion_mode: str = "prefer_lexical"
    fusion_alpha: float = 0.5
    vector_default_relevance: float = 0.5

    def __post_init__(self) -> None:
        if self.fusion_mode not in FUSION_MODES:
            raise ValueError(f"fusion_mode must be one of {FUSION_MODES}, got {self.fusion_mode!r}")
        if not 0.0 <= self.fusion_alpha <= 1.0:
            raise ValueError("fusion_alpha must be between 0 and 1")
        if self.default_limit < 1 or self.answer_limit < 1:
            raise ValueError("limits must be positive")
