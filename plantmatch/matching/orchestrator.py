"""Plant name matching: fetch candidates, score every name variant, rank.

Used for search-as-you-type, inventory lookup and import reconciliation.

Steps for one query:
    1. Reject queries shorter than 2 characters
    2. One call to the candidate provider (coarse pre-filter)
    3. Parse the query once
    4. Score each candidate's main name, Swedish name and synonyms and
       keep the best variant
    5. Sort (strict first, score descending, shorter name first)
    6. Drop results below the minimum score
    7. Split into strict matches and suggestions

Search is never on a critical path: provider failures are logged and turn
into an empty result rather than an exception.
"""
import enum
import logging
from dataclasses import dataclass, field

from plantmatch.data.candidates import Candidate, CandidateProvider, candidates_from_rows
from plantmatch.data.config import MatcherConfig
from plantmatch.matching.cache import ParsedNameCache
from plantmatch.matching.name_parser import PlantNameComponents, parse_plant_name
from plantmatch.matching.ranking import (
    RankedScore,
    SimilarityWeights,
    apply_confidence_boost,
    rank_scores,
)
from plantmatch.matching.scoring import ComponentScores, score_components

logger = logging.getLogger(__name__)

MIN_QUERY_LENGTH = 2


class MatchSource(str, enum.Enum):
    MAIN_NAME = "main_name"
    SV_NAME = "sv_name"
    SYNONYM = "synonym"


@dataclass(frozen=True)
class MatchDetails:
    """Why a candidate scored the way it did."""

    search_query: str
    best_match_name: str
    search_components: PlantNameComponents
    plant_components: PlantNameComponents
    weights: SimilarityWeights
    base_score: float
    boost: float = 0.0
    match_kind: str | None = None
    matched_synonym_name: str | None = None
    matched_synonym_id: str | None = None

    def to_dict(self) -> dict:
        return {
            "search_query": self.search_query,
            "best_match_name": self.best_match_name,
            "search_components": self.search_components.to_dict(),
            "plant_components": self.plant_components.to_dict(),
            "weights": self.weights.to_dict(),
            "base_score": self.base_score,
            "boost": self.boost,
            "match_kind": self.match_kind,
            "matched_synonym_name": self.matched_synonym_name,
            "matched_synonym_id": self.matched_synonym_id,
        }


@dataclass(frozen=True)
class SimilarityResult:
    id: int
    name: str
    sv_name: str | None
    total_score: float
    is_strict_match: bool
    component_scores: ComponentScores
    best_match_source: MatchSource
    match_details: MatchDetails
    plant_type: str | None = None
    grupp: str | None = None
    serie: str | None = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "sv_name": self.sv_name,
            "plant_type": self.plant_type,
            "grupp": self.grupp,
            "serie": self.serie,
            "total_score": self.total_score,
            "is_strict_match": self.is_strict_match,
            "component_scores": self.component_scores.to_dict(),
            "best_match_source": self.best_match_source.value,
            "match_details": self.match_details.to_dict(),
        }


@dataclass
class MatchResult:
    strict_matches: list[SimilarityResult] = field(default_factory=list)
    suggestions: list[SimilarityResult] = field(default_factory=list)

    @property
    def has_strict_match(self) -> bool:
        return bool(self.strict_matches)

    @classmethod
    def empty(cls) -> "MatchResult":
        return cls()


@dataclass(frozen=True)
class _Variant:
    source: MatchSource
    name: str
    scores: ComponentScores
    ranked: RankedScore


def parse_name(raw: str) -> PlantNameComponents:
    """Parse a plant name without ranking anything."""
    return parse_plant_name(raw)


def sort_key(result: SimilarityResult) -> tuple:
    """Strict matches first, then score descending, then shorter names."""
    return (
        not result.is_strict_match,
        -result.total_score,
        len(result.name),
        result.name,
        result.id,
    )


class PlantMatcher:
    """Ranks catalog plants against a free-text plant name."""

    def __init__(
        self,
        provider: CandidateProvider,
        cache: ParsedNameCache | None = None,
        config: MatcherConfig | None = None,
    ):
        self.provider = provider
        self.cache = cache
        self.config = config or MatcherConfig()

    def _parse(self, name: str) -> PlantNameComponents:
        if self.cache is None:
            return parse_plant_name(name)
        return self.cache.parse(name)

    def find_best_matches(
        self,
        query: str,
        limit: int | None = None,
        minimum_score: float | None = None,
        weights: SimilarityWeights | None = None,
        strict_only: bool = False,
    ) -> MatchResult:
        """Find the best catalog matches for a plant name.

        Args:
            query: Raw name as typed or imported.
            limit: Max suggestions (strict matches are never truncated).
            minimum_score: Results scoring below this are dropped.
            weights: Component weights, defaults to the configured scheme.
            strict_only: Return no suggestions, only strict matches.

        Returns:
            MatchResult; empty for short queries and provider failures.
        """
        limit = self.config.limit if limit is None else limit
        minimum_score = self.config.minimum_score if minimum_score is None else minimum_score
        weights = weights or self.config.weights

        query = (query or "").strip()
        if len(query) < MIN_QUERY_LENGTH:
            return MatchResult.empty()

        # Rows may be a lazy cursor; read them inside the guard
        try:
            rows = self.provider.fetch_candidates(query, self.config.candidate_limit)
            candidates = candidates_from_rows(rows or [])
        except Exception as e:
            logger.error("Candidate lookup failed for %r: %s", query, e)
            return MatchResult.empty()

        if not candidates:
            logger.debug("No candidates for %r", query)
            return MatchResult.empty()

        search_components = parse_plant_name(query)
        results = [
            self.score_candidate(query, search_components, candidate, weights)
            for candidate in candidates
        ]
        results.sort(key=sort_key)
        results = [r for r in results if r.total_score >= minimum_score]

        strict_matches = [r for r in results if r.is_strict_match]
        suggestions = [] if strict_only else [r for r in results if not r.is_strict_match][:limit]

        log_matches(query, strict_matches + suggestions)
        return MatchResult(strict_matches=strict_matches, suggestions=suggestions)

    def score_candidate(
        self,
        query: str,
        search_components: PlantNameComponents,
        candidate: Candidate,
        weights: SimilarityWeights,
    ) -> SimilarityResult:
        """Score every name variant of a candidate and keep the best one.

        Variants are tried main name, Swedish name, then synonyms; a later
        variant only wins with a strictly higher score.
        """
        names = [(MatchSource.MAIN_NAME, candidate.name)]
        if candidate.sv_name:
            names.append((MatchSource.SV_NAME, candidate.sv_name))
        names.extend((MatchSource.SYNONYM, synonym) for synonym in candidate.synonyms)

        best: _Variant | None = None
        for source, name in names:
            scores = score_components(search_components, self._parse(name), self.config.scorer)
            ranked = rank_scores(scores, weights)
            if best is None or ranked.total_score > best.ranked.total_score:
                best = _Variant(source, name, scores, ranked)

        ranked = best.ranked
        if candidate.match_kind in self.config.confident_match_kinds:
            ranked = apply_confidence_boost(
                ranked, best.scores.sort_brand_name.score, self.config.confidence_boost
            )

        details = MatchDetails(
            search_query=query,
            best_match_name=best.name,
            search_components=search_components,
            plant_components=self._parse(best.name),
            weights=weights,
            base_score=ranked.base_score,
            boost=ranked.boost,
            match_kind=candidate.match_kind,
            matched_synonym_name=candidate.matched_synonym_name,
            matched_synonym_id=candidate.matched_synonym_id,
        )
        return SimilarityResult(
            id=candidate.id,
            name=candidate.name,
            sv_name=candidate.sv_name,
            total_score=ranked.total_score,
            is_strict_match=ranked.is_strict_match,
            component_scores=best.scores,
            best_match_source=best.source,
            match_details=details,
            plant_type=candidate.plant_type,
            grupp=candidate.grupp,
            serie=candidate.serie,
        )


def log_matches(query: str, results: list[SimilarityResult]) -> None:
    if not logger.isEnabledFor(logging.DEBUG):
        return
    if not results:
        logger.debug("No matches found for %r", query)
        return
    for i, result in enumerate(results, 1):
        logger.debug(
            "%r match %d: %s %.1f%% (%s, via %s)",
            query, i, result.name, result.total_score * 100,
            "EXACT" if result.is_strict_match else "SIMILAR",
            result.best_match_source.value,
        )
