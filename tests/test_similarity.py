"""Tests for string and trigram similarity."""
import pytest

from plantmatch.matching.similarity import SCORERS, similarity, trigram_similarity, trigrams

PAIRS = [
    ("rosa", "rose"),
    ("pinus sylvestris", "pinus sylvesteris"),
    ("picea abies", "pinus mugo"),
    ("charles de mills", "charles mills"),
]


@pytest.mark.parametrize("scorer", sorted(SCORERS))
def test_identical_strings_score_one(scorer):
    for a, _ in PAIRS:
        assert similarity(a, a, scorer) == 1.0


@pytest.mark.parametrize("scorer", sorted(SCORERS))
def test_similarity_is_symmetric(scorer):
    for a, b in PAIRS:
        assert similarity(a, b, scorer) == similarity(b, a, scorer)


def test_empty_side_scores_zero():
    assert similarity("", "rosa") == 0.0
    assert similarity("rosa", "") == 0.0
    assert similarity("", "") == 0.0


def test_similarity_is_graded():
    score = similarity("rosa", "rose")
    assert 0.0 < score < 1.0
    assert score == pytest.approx(0.75)


def test_one_letter_typo_in_species():
    score = similarity("sylvesteris", "sylvestris")
    assert 0.85 <= score <= 0.95


def test_unknown_scorer_raises():
    with pytest.raises(ValueError):
        similarity("abc", "abd", scorer="soundex")


def test_trigrams_are_padded():
    assert trigrams("Rosa") == {"  r", " ro", "ros", "osa", "sa "}


def test_trigram_similarity():
    assert trigram_similarity("pinus sylvestris", "pinus sylvestris") == 1.0
    assert trigram_similarity("pinus sylvestris", "pinus sylvesteris") == pytest.approx(0.75)
    assert trigram_similarity("pinus sylvestris", "picea abies") < 0.3


def test_trigram_similarity_empty():
    assert trigram_similarity("", "rosa") == 0.0
    assert trigram_similarity(None, "rosa") == 0.0
    assert trigram_similarity("---", "rosa") == 0.0
