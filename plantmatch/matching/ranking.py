"""Weighted combination of component scores and strict-match classification.

Scoring formula:
    total = (genus * w.genus + species * w.species
             + sort_brand_name * w.sort_brand_name + full_name * w.full_name)
            / (w.genus + w.species + w.sort_brand_name + w.full_name)

A result is a strict match when total >= 0.95 and the sort/brand score is
>= 0.7. The second gate keeps a near-identical genus and full name from
being reported as exact when the cultivar differs.
"""
import math
from dataclasses import dataclass

from plantmatch.matching.scoring import ComponentScores

STRICT_SCORE_THRESHOLD = 0.95
STRICT_SORT_BRAND_THRESHOLD = 0.7

DEFAULT_CONFIDENCE_BOOST = 0.05
HIGH_CONFIDENCE_MATCH_KINDS = frozenset({"exact_match", "synonym_exact_match", "prefix_match"})


@dataclass(frozen=True)
class SimilarityWeights:
    genus: float = 0.35
    species: float = 0.10
    sort_brand_name: float = 0.40
    full_name: float = 0.15

    def __post_init__(self):
        values = (self.genus, self.species, self.sort_brand_name, self.full_name)
        if any(v < 0 for v in values):
            raise ValueError(f"Similarity weights must be non-negative: {values}")
        if sum(values) <= 0:
            raise ValueError("At least one similarity weight must be positive")

    @property
    def total(self) -> float:
        return self.genus + self.species + self.sort_brand_name + self.full_name

    def to_dict(self) -> dict:
        return {
            "genus": self.genus,
            "species": self.species,
            "sort_brand_name": self.sort_brand_name,
            "full_name": self.full_name,
        }


WEIGHT_SCHEMES = {
    "four_component": SimilarityWeights(0.35, 0.10, 0.40, 0.15),
    "three_component": SimilarityWeights(0.42, 0.0, 0.42, 0.16),
}
DEFAULT_WEIGHTS = WEIGHT_SCHEMES["four_component"]


def get_weights(scheme: str) -> SimilarityWeights:
    try:
        return WEIGHT_SCHEMES[scheme]
    except KeyError:
        raise ValueError(
            f"Unknown weight scheme {scheme!r}, expected one of {sorted(WEIGHT_SCHEMES)}"
        ) from None


@dataclass(frozen=True)
class RankedScore:
    total_score: float
    is_strict_match: bool
    base_score: float = 0.0
    boost: float = 0.0


def is_strict_match(total_score: float, sort_brand_score: float) -> bool:
    return (
        total_score >= STRICT_SCORE_THRESHOLD
        and sort_brand_score >= STRICT_SORT_BRAND_THRESHOLD
    )


def weighted_score(scores: ComponentScores, weights: SimilarityWeights = DEFAULT_WEIGHTS) -> float:
    weighted_sum = (
        scores.genus.score * weights.genus
        + scores.species.score * weights.species
        + scores.sort_brand_name.score * weights.sort_brand_name
        + scores.full_name.score * weights.full_name
    )
    return weighted_sum / weights.total


def rank_scores(scores: ComponentScores, weights: SimilarityWeights = DEFAULT_WEIGHTS) -> RankedScore:
    """Combine component scores into a total and classify it."""
    total = weighted_score(scores, weights)
    return RankedScore(
        total_score=total,
        is_strict_match=is_strict_match(total, scores.sort_brand_name.score),
        base_score=total,
    )


def apply_confidence_boost(
    ranked: RankedScore,
    sort_brand_score: float,
    boost: float = DEFAULT_CONFIDENCE_BOOST,
) -> RankedScore:
    """Add a small tie-breaking boost for candidates the store flagged as confident.

    The boosted score is capped at 1.0. A base score below the strict
    threshold stays below it after boosting, so the boost can reorder
    suggestions but never turn one into a strict match. Close to the
    threshold the boost shrinks to half the remaining gap, which keeps
    boosted scores in the same order as their base scores.
    """
    if boost <= 0:
        return ranked
    base = ranked.base_score
    if base < STRICT_SCORE_THRESHOLD:
        gap = STRICT_SCORE_THRESHOLD - base
        boosted = base + min(boost, gap / 2)
        # Float rounding for bases a few ulps under the threshold
        boosted = min(boosted, math.nextafter(STRICT_SCORE_THRESHOLD, 0.0))
    else:
        boosted = min(1.0, base + boost)
    return RankedScore(
        total_score=boosted,
        is_strict_match=is_strict_match(boosted, sort_brand_score),
        base_score=ranked.base_score,
        boost=boosted - ranked.base_score,
    )
