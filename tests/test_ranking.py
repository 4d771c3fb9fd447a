"""Tests for weighted ranking and strict-match classification."""
import pytest

from plantmatch.matching.ranking import (
    DEFAULT_WEIGHTS,
    STRICT_SCORE_THRESHOLD,
    RankedScore,
    SimilarityWeights,
    apply_confidence_boost,
    get_weights,
    is_strict_match,
    rank_scores,
)
from plantmatch.matching.scoring import ComponentMatchResult, ComponentScores


def _scores(genus, species, sort_brand, full_name):
    return ComponentScores(
        genus=ComponentMatchResult("", "", genus),
        species=ComponentMatchResult("", "", species),
        sort_brand_name=ComponentMatchResult("", "", sort_brand),
        full_name=ComponentMatchResult("", "", full_name),
    )


def test_default_weights():
    assert DEFAULT_WEIGHTS == SimilarityWeights(0.35, 0.10, 0.40, 0.15)


def test_perfect_scores_are_strict():
    ranked = rank_scores(_scores(1.0, 1.0, 1.0, 1.0))
    assert ranked.total_score == pytest.approx(1.0)
    assert ranked.is_strict_match


def test_weighted_average():
    ranked = rank_scores(_scores(1.0, 1.0, 0.5, 1.0))
    assert ranked.total_score == pytest.approx(0.80)
    assert not ranked.is_strict_match


def test_weights_are_normalized():
    ranked = rank_scores(_scores(0.5, 0.0, 0.0, 0.0), SimilarityWeights(2.0, 0.0, 0.0, 0.0))
    assert ranked.total_score == pytest.approx(0.5)


def test_high_total_with_differing_cultivar_is_not_strict():
    assert not is_strict_match(0.96, 0.5)
    ranked = rank_scores(_scores(1.0, 1.0, 0.5, 1.0), SimilarityWeights(1.0, 1.0, 0.01, 1.0))
    assert ranked.total_score >= STRICT_SCORE_THRESHOLD
    assert not ranked.is_strict_match


def test_invalid_weights_rejected():
    with pytest.raises(ValueError):
        SimilarityWeights(-0.1, 0.1, 0.4, 0.15)
    with pytest.raises(ValueError):
        SimilarityWeights(0.0, 0.0, 0.0, 0.0)


def test_weight_schemes():
    assert get_weights("four_component") == DEFAULT_WEIGHTS
    three = get_weights("three_component")
    assert three.species == 0.0
    assert three.genus == three.sort_brand_name == 0.42
    with pytest.raises(ValueError):
        get_weights("five_component")


def test_ranking_is_deterministic():
    scores = _scores(0.91, 0.37, 0.66, 0.72)
    assert rank_scores(scores) == rank_scores(scores)


def test_boost_raises_suggestion_score():
    ranked = apply_confidence_boost(RankedScore(0.80, False, base_score=0.80), 1.0)
    assert ranked.total_score == pytest.approx(0.85)
    assert ranked.boost == pytest.approx(0.05)
    assert ranked.base_score == 0.80


def test_boost_never_creates_strict_match():
    ranked = apply_confidence_boost(RankedScore(0.93, False, base_score=0.93), 1.0)
    assert 0.93 < ranked.total_score < STRICT_SCORE_THRESHOLD
    assert not ranked.is_strict_match


def test_boost_keeps_order_below_threshold():
    lower = apply_confidence_boost(RankedScore(0.91, False, base_score=0.91), 1.0)
    higher = apply_confidence_boost(RankedScore(0.94, False, base_score=0.94), 1.0)
    assert lower.total_score < higher.total_score < STRICT_SCORE_THRESHOLD
    assert lower.total_score == pytest.approx(0.93)
    assert higher.total_score == pytest.approx(0.945)


def test_boost_capped_at_one():
    ranked = apply_confidence_boost(RankedScore(0.97, True, base_score=0.97), 1.0)
    assert ranked.total_score == 1.0
    assert ranked.is_strict_match


def test_boost_respects_sort_brand_gate():
    ranked = apply_confidence_boost(RankedScore(0.97, False, base_score=0.97), 0.5)
    assert not ranked.is_strict_match


def test_zero_boost_is_noop():
    original = RankedScore(0.8, False, base_score=0.8)
    assert apply_confidence_boost(original, 1.0, boost=0.0) is original
