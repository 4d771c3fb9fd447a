"""Matcher configuration: defaults and environment overrides."""
import os
from dataclasses import dataclass, field

from plantmatch.matching.cache import DEFAULT_CACHE_SIZE
from plantmatch.matching.ranking import (
    DEFAULT_CONFIDENCE_BOOST,
    HIGH_CONFIDENCE_MATCH_KINDS,
    SimilarityWeights,
    get_weights,
)
from plantmatch.matching.similarity import DEFAULT_SCORER, get_scorer

DEFAULT_DB_PATH = "data/catalog.db"


@dataclass
class MatcherConfig:
    db_path: str = DEFAULT_DB_PATH
    limit: int = 10
    minimum_score: float = 0.3
    candidate_limit: int = 100
    weights: SimilarityWeights = field(default_factory=lambda: get_weights("four_component"))
    scorer: str = DEFAULT_SCORER
    confidence_boost: float = DEFAULT_CONFIDENCE_BOOST
    confident_match_kinds: frozenset[str] = HIGH_CONFIDENCE_MATCH_KINDS
    cache_size: int = DEFAULT_CACHE_SIZE
    trigram_threshold: float = 0.3

    def __post_init__(self):
        get_scorer(self.scorer)
        if self.limit < 0 or self.candidate_limit < 1:
            raise ValueError(
                f"Invalid limits: limit={self.limit}, candidate_limit={self.candidate_limit}"
            )
        if not 0.0 <= self.minimum_score <= 1.0:
            raise ValueError(f"minimum_score must be within [0, 1], got {self.minimum_score}")

    @classmethod
    def from_env(cls) -> "MatcherConfig":
        """Create from PLANTMATCH_* environment variables, falling back to defaults."""
        defaults = cls()
        env = os.environ
        return cls(
            db_path=env.get("PLANTMATCH_DB_PATH", defaults.db_path),
            limit=_env_int("PLANTMATCH_LIMIT", defaults.limit),
            minimum_score=_env_float("PLANTMATCH_MIN_SCORE", defaults.minimum_score),
            candidate_limit=_env_int("PLANTMATCH_CANDIDATE_LIMIT", defaults.candidate_limit),
            weights=get_weights(env.get("PLANTMATCH_WEIGHTS", "four_component")),
            scorer=env.get("PLANTMATCH_SCORER", defaults.scorer),
            confidence_boost=_env_float("PLANTMATCH_CONFIDENCE_BOOST", defaults.confidence_boost),
            cache_size=_env_int("PLANTMATCH_CACHE_SIZE", defaults.cache_size),
            trigram_threshold=_env_float("PLANTMATCH_TRIGRAM_THRESHOLD", defaults.trigram_threshold),
        )


def _env_int(key: str, default: int) -> int:
    raw = os.environ.get(key)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{key} must be an integer, got {raw!r}") from None


def _env_float(key: str, default: float) -> float:
    raw = os.environ.get(key)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{key} must be a number, got {raw!r}") from None
